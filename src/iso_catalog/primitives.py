"""Reusable coercion primitives shared by the normalization modules."""

import json
import math
import re
import sys
from typing import Any

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]")


def normalize_key(key: Any) -> str:
    """Lower-case *key* and drop everything outside ``[a-z0-9]``.

    >>> normalize_key("NfsShareId") == normalize_key("nfs-share-id")
    True
    """
    return _NON_ALNUM_RE.sub("", str(key).lower())


def is_finite_number(value: Any) -> bool:
    # JSON booleans decode to bool, which is an int subclass.
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        # float(value) overflows past the float range
        return abs(value) <= sys.float_info.max
    return isinstance(value, float) and math.isfinite(value)


def to_number(value: Any) -> int | float | None:
    """Coerce a finite number or numeric string, returning None otherwise."""
    if is_finite_number(value):
        return value
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text or "_" in text:
        return None
    try:
        parsed = float(text)
    except ValueError:
        return None
    return parsed if math.isfinite(parsed) else None


def number_text(value: int | float) -> str:
    """Render a number the way a JSON client would display it (``4.0`` -> ``"4"``)."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def integral(value: int | float) -> int | float:
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def try_parse_json(text: str) -> Any:
    """Speculatively decode *text* as JSON. Returns None on blank or invalid input."""
    if not text.strip():
        return None
    try:
        return json.loads(text)
    except (ValueError, RecursionError):
        return None


def is_truthy(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes")
    return value is not None


def split_delimited(text: str) -> list[str]:
    """Split on commas/semicolons, trimming and dropping empty parts."""
    return [part.strip() for part in re.split(r"[;,]", text) if part.strip()]
