"""Build canonical IsoRecords from raw listing entries."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Union

from iso_catalog.date_utils import format_date_label
from iso_catalog.models import IsoRecord
from iso_catalog.normalization.formatters import (
    build_download_url,
    derive_name_from_url,
    format_size_from_bytes,
    format_size_from_gb,
    format_size_from_mb,
    is_filesystem_path,
    name_from_file_path,
    normalize_availability,
    normalize_tags,
    placeholder_name,
    resolve_absolute_url,
)
from iso_catalog.normalization.lookup import FieldLookup
from iso_catalog.primitives import integral

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Candidate keys, most specific first
# ---------------------------------------------------------------------------

MACHINE_KEYS = ("machinename", "machine", "host", "server")
SHARE_ID_KEYS = ("nfsshareid", "nfs_share_id", "shareid", "mountid", "share_id", "mount_id")
MOUNT_NAME_KEYS = (
    "mountname",
    "mount",
    "mounttitle",
    "share",
    "sharename",
    "sharelabel",
    "nfs",
    "nfsshare",
    "nfsname",
    "nfs_label",
    "nfssharelabel",
)
FILE_PATH_KEYS = ("filepath", "file_path", "fullpath", "full_path", "sourcepath", "source_path")
AVAILABILITY_KEYS = ("availableonslaves", "availability", "available", "slaves", "hosts")
ID_KEYS = ("id", "identifier", "slug", "uuid")
NAME_KEYS = ("name", "title", "label", "filename")
VERSION_KEYS = ("version", "release", "build", "tag", "variant")
DOWNLOAD_URL_KEYS = ("downloadurl", "download_url", "url", "link", "href", "directlink", "direct_url")
PATH_KEYS = ("path", "file", "source", "uri", "location")
DESCRIPTION_KEYS = ("description", "desc", "summary", "details", "notes", "info")
OS_KEYS = ("os", "operatingsystem", "system", "platform", "category", "type")
CHECKSUM_KEYS = ("checksum", "hash", "sha256", "sha", "sha1", "md5")
SIZE_GB_KEYS = ("sizegb", "size_gb")
SIZE_MB_KEYS = ("sizemb", "size_mb")
SIZE_BYTES_KEYS = ("sizebytes", "bytes")
SIZE_TEXT_KEYS = ("size", "filesize", "sizehuman", "sizelabel")
DATE_KEYS = (
    "releasedate",
    "release_date",
    "date",
    "updatedat",
    "updated_at",
    "createdat",
    "created_at",
    "timestamp",
)
TAG_KEYS = ("tags", "labels", "keywords", "categories")


# ---------------------------------------------------------------------------
# Raw entry shapes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TextEntry:
    """A bare string entry, usually a URL or path."""

    text: str


@dataclass(frozen=True)
class MappingEntry:
    fields: FieldLookup


RawEntry = Union[TextEntry, MappingEntry]


def classify_entry(entry: Any) -> RawEntry | None:
    """Decode one raw collection element into a known shape, or None to drop it."""
    if isinstance(entry, str):
        return TextEntry(entry)
    if isinstance(entry, Mapping):
        return MappingEntry(FieldLookup(entry))
    return None


# ---------------------------------------------------------------------------
# Normalizers
# ---------------------------------------------------------------------------


def _normalize_text_entry(entry: TextEntry, index: int, api_base: str | None) -> IsoRecord:
    download_url = resolve_absolute_url(entry.text, api_base)
    if download_url:
        name = derive_name_from_url(download_url, index)
    else:
        name = name_from_file_path(entry.text) or placeholder_name(index)
    return IsoRecord(
        id=f"{download_url}-{index}" if download_url else f"iso-{index}",
        name=name,
        download_url=download_url,
    )


def _size_label(fields: FieldLookup) -> str | None:
    return (
        format_size_from_gb(fields.number(SIZE_GB_KEYS))
        or format_size_from_mb(fields.number(SIZE_MB_KEYS))
        or format_size_from_bytes(fields.number(SIZE_BYTES_KEYS))
        or fields.string(SIZE_TEXT_KEYS)
    )


def _normalize_mapping_entry(entry: MappingEntry, index: int, api_base: str | None) -> IsoRecord:
    fields = entry.fields

    machine_name = fields.string(MACHINE_KEYS)
    share_id = fields.number(SHARE_ID_KEYS)
    path_candidate = fields.string(PATH_KEYS)
    file_path = fields.string(FILE_PATH_KEYS)
    if file_path is None and is_filesystem_path(path_candidate):
        file_path = path_candidate
    id_value = fields.string(ID_KEYS)
    explicit_name = fields.string(NAME_KEYS)

    target = fields.string(DOWNLOAD_URL_KEYS) or path_candidate or file_path
    download_url = resolve_absolute_url(target, api_base) or build_download_url(
        api_base,
        id=id_value,
        name=explicit_name,
        machine_name=machine_name,
        file_path=file_path or target,
    )

    if id_value:
        record_id = id_value
    elif download_url:
        record_id = f"{download_url}-{index}"
    elif machine_name:
        record_id = f"{machine_name}-{index}"
    else:
        record_id = f"iso-{index}"

    name_source = target or download_url or name_from_file_path(file_path)
    name = explicit_name or (
        derive_name_from_url(name_source, index) if name_source else placeholder_name(index)
    )

    return IsoRecord(
        id=record_id,
        name=name,
        description=fields.string(DESCRIPTION_KEYS),
        os_label=fields.string(OS_KEYS),
        version=fields.string(VERSION_KEYS),
        checksum=fields.string(CHECKSUM_KEYS),
        size_label=_size_label(fields),
        date_label=format_date_label(fields.value(DATE_KEYS)),
        download_url=download_url,
        tags=tuple(normalize_tags(fields.value(TAG_KEYS))),
        machine_name=machine_name,
        mount_name=fields.string(MOUNT_NAME_KEYS),
        nfs_share_id=integral(share_id) if share_id is not None else None,
        file_path=file_path,
        available_on=tuple(normalize_availability(fields.value(AVAILABILITY_KEYS))),
    )


def normalize_iso_entry(entry: Any, index: int, api_base: str | None = None) -> IsoRecord | None:
    """Normalize one raw entry at position *index*. Entries of unknown shape yield None."""
    raw = classify_entry(entry)
    if isinstance(raw, TextEntry):
        return _normalize_text_entry(raw, index, api_base)
    if isinstance(raw, MappingEntry):
        return _normalize_mapping_entry(raw, index, api_base)
    logger.debug("Dropping entry %d of type %s", index, type(entry).__name__)
    return None
