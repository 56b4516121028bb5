from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class IsoRecord(BaseModel):
    """Canonical ISO image entry, independent of the backend's field naming."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: str = Field(min_length=1)
    name: str
    description: Optional[str] = None
    os_label: Optional[str] = None
    version: Optional[str] = None
    checksum: Optional[str] = None
    size_label: Optional[str] = None
    date_label: Optional[str] = None
    download_url: Optional[str] = None
    tags: tuple[str, ...] = ()
    machine_name: Optional[str] = None
    mount_name: Optional[str] = None
    nfs_share_id: Optional[Union[int, float]] = None
    file_path: Optional[str] = None
    available_on: tuple[str, ...] = ()


class ShareRecord(BaseModel):
    """A named storage mount used to label where an ISO lives."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: Optional[int] = None
    name: Optional[str] = None
    fallback_name: str
    target: Optional[str] = None
    folder_path: Optional[str] = None
    machine_name: Optional[str] = None

    @property
    def display_name(self) -> str:
        trimmed = (self.name or "").strip()
        return trimmed or self.fallback_name
