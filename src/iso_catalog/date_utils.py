"""Date parsing helpers for release/update timestamps."""

import re
from datetime import datetime, timezone
from typing import Any

from iso_catalog.primitives import is_finite_number, to_number

# Epoch values below this are seconds, anything else is milliseconds.
MILLISECOND_EPOCH_FLOOR = 1_000_000_000_000

_ISO_RE = re.compile(r"^\s*(\d{4}-\d{2}-\d{2})(?:[T ](\d{2}:\d{2}(?::\d{2})?))?")


def epoch_to_datetime(value: int | float) -> datetime | None:
    millis = value * 1000 if 0 < value < MILLISECOND_EPOCH_FLOOR else value
    try:
        return datetime.fromtimestamp(millis / 1000, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


def parse_iso_datetime(raw: Any) -> datetime | None:
    """
    Parse an ISO-ish date string.
    Supports YYYY-MM-DD, YYYY-MM-DDTHH:MM[:SS], a space separator, fractional
    seconds and offsets (including a trailing Z). Naive values are taken as UTC.
    Returns None if unparseable.
    """
    if not isinstance(raw, str):
        return None

    clean = raw.strip()
    if clean.endswith(("Z", "z")):
        clean = clean[:-1] + "+00:00"

    try:
        dt = datetime.fromisoformat(clean)
    except ValueError:
        match = _ISO_RE.match(clean)
        if not match:
            return None
        stamp = match.group(1)
        fmt = "%Y-%m-%d"
        if match.group(2):
            stamp = f"{stamp} {match.group(2)}"
            fmt += " %H:%M:%S" if match.group(2).count(":") == 2 else " %H:%M"
        try:
            dt = datetime.strptime(stamp, fmt)
        except ValueError:
            return None

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def format_day_month_year(dt: datetime) -> str:
    dt = dt.astimezone(timezone.utc)
    return f"{dt.day} {dt.strftime('%b')} {dt.year}"


def format_date_label(value: Any) -> str | None:
    """Format an epoch (seconds or milliseconds) or ISO string as ``5 Mar 2024``."""
    if value is None or isinstance(value, bool):
        return None

    if is_finite_number(value):
        dt = epoch_to_datetime(value)
        return format_day_month_year(dt) if dt else None

    if isinstance(value, str) and value.strip():
        numeric = to_number(value)
        if numeric is not None:
            return format_date_label(numeric)
        dt = parse_iso_datetime(value)
        return format_day_month_year(dt) if dt else None

    return None
