"""CSV writer for ISO catalog exports."""

import csv
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from iso_catalog.models import IsoRecord

# (display header, IsoRecord attribute), in column order
CATALOG_COLUMNS: tuple[tuple[str, str], ...] = (
    ("Name", "name"),
    ("Version", "version"),
    ("OS", "os_label"),
    ("Size", "size_label"),
    ("Date", "date_label"),
    ("Mount", "mount_name"),
    ("Machine", "machine_name"),
    ("File Path", "file_path"),
    ("Download URL", "download_url"),
    ("Tags", "tags"),
    ("Available On", "available_on"),
)

CATALOG_HEADERS: list[str] = [header for header, _ in CATALOG_COLUMNS]


def cell_text(value: Any) -> str:
    """Render one record attribute as a single-line CSV cell.

    >>> cell_text(("lts", "server"))
    'lts; server'
    >>> cell_text(None)
    ''
    """
    if isinstance(value, (list, tuple)):
        return "; ".join(str(v) for v in value)
    if value is None:
        return ""
    return str(value).replace("\r\n", " ").replace("\n", " ").replace("\r", " ")


def catalog_row(record: IsoRecord) -> list[str]:
    return [cell_text(getattr(record, attr)) for _, attr in CATALOG_COLUMNS]


def _sort_key(record: IsoRecord) -> tuple[str, str]:
    return (record.name.lower(), record.id)


def export_catalog_csv(records: Sequence[IsoRecord], output_path: str | Path) -> int:
    """Write *records* to *output_path* sorted by name (case-insensitive).

    Parent directories are created as needed. Returns the number of data rows.
    """
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    ordered = sorted(records, key=_sort_key)
    with open(path, "w", newline="", encoding="utf-8") as fh:
        writer = csv.writer(fh, quoting=csv.QUOTE_MINIMAL)
        writer.writerow(CATALOG_HEADERS)
        writer.writerows(catalog_row(r) for r in ordered)
    return len(ordered)
