"""Free-text filtering over normalized ISO records."""

from collections.abc import Sequence

from iso_catalog.models import IsoRecord


def searchable_fields(record: IsoRecord) -> list[str]:
    fields = [
        record.name,
        record.description,
        record.version,
        record.os_label,
        record.size_label,
        record.date_label,
        record.checksum,
        record.download_url,
        record.machine_name,
        record.mount_name,
        record.file_path,
        " ".join(record.available_on),
        " ".join(record.tags),
    ]
    return [f for f in fields if f]


def filter_records(records: Sequence[IsoRecord], query: str | None) -> list[IsoRecord]:
    """Case-insensitive substring match of *query* against every displayed field."""
    needle = (query or "").strip().lower()
    if not needle:
        return list(records)
    return [
        r for r in records
        if any(needle in field.lower() for field in searchable_fields(r))
    ]
