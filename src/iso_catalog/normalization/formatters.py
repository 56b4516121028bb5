"""Derived display values: sizes, URLs, names, tags and availability."""

import re
from collections.abc import Mapping
from typing import Any
from urllib.parse import quote, unquote, urlsplit

from iso_catalog.primitives import is_finite_number, is_truthy, number_text, split_delimited

MAX_TAGS = 6

KIB = 1024
MIB = 1024 * 1024
GIB = 1024 * 1024 * 1024

DOWNLOAD_ENDPOINT = "/isos/download"

# Paths that only exist on the hypervisor host and cannot be served over HTTP.
_LOCAL_PATH_RE = re.compile(r"^(?:/mnt/|/media/|[A-Za-z]:[\\/])", re.IGNORECASE)
_ABSOLUTE_URL_RE = re.compile(r"^https?://", re.IGNORECASE)
_DRIVE_PATH_RE = re.compile(r"^[A-Za-z]:[\\/]")

# encodeURIComponent leaves these unescaped
_URI_COMPONENT_SAFE = "-_.!~*'()"


# ---------------------------------------------------------------------------
# Sizes
# ---------------------------------------------------------------------------


def format_size_number(value: int | float | None, unit: str) -> str | None:
    if value is None or not is_finite_number(value):
        return None
    places = 1 if value >= 10 else 2
    text = f"{value:.{places}f}".rstrip("0").rstrip(".")
    if text in ("-0", ""):
        text = "0"
    return f"{text} {unit}".strip()


def format_size_from_gb(value: int | float | None) -> str | None:
    return format_size_number(value, "GB")


def format_size_from_mb(value: int | float | None) -> str | None:
    if value is None:
        return None
    if value >= 1024:
        return format_size_number(value / 1024, "GB")
    return format_size_number(value, "MB")


def format_size_from_bytes(value: int | float | None) -> str | None:
    if value is None:
        return None
    if value >= GIB:
        return format_size_number(value / GIB, "GB")
    if value >= MIB:
        return format_size_number(value / MIB, "MB")
    if value >= KIB:
        return format_size_number(value / KIB, "KB")
    return format_size_number(value, "B")


# ---------------------------------------------------------------------------
# URLs and names
# ---------------------------------------------------------------------------


def is_local_path(value: str) -> bool:
    return bool(_LOCAL_PATH_RE.match(value.strip()))


def is_filesystem_path(value: str | None) -> bool:
    """Absolute POSIX or drive-letter path (not a URL or protocol-relative URL)."""
    if not value:
        return False
    trimmed = value.strip()
    if trimmed.startswith("/"):
        return not trimmed.startswith("//")
    return bool(_DRIVE_PATH_RE.match(trimmed))


def resolve_absolute_url(value: str | None, api_base: str | None = None) -> str | None:
    """
    Turn a download target into an absolute URL.

    - host-local paths (/mnt/..., /media/..., C:\\...) resolve to None
    - http(s) URLs are returned unchanged
    - protocol-relative URLs (//host/...) are upgraded to https
    - anything else is joined onto *api_base*; without a base it is None
    """
    if not value:
        return None
    trimmed = value.strip()
    if not trimmed:
        return None
    if is_local_path(trimmed):
        return None
    if _ABSOLUTE_URL_RE.match(trimmed):
        return trimmed
    if trimmed.startswith("//"):
        return f"https:{trimmed}"

    base = (api_base or "").rstrip("/")
    if not base:
        return None
    if trimmed.startswith("/"):
        return f"{base}{trimmed}"
    return f"{base}/{trimmed.lstrip('/')}"


def encode_uri_component(value: str) -> str:
    return quote(value, safe=_URI_COMPONENT_SAFE)


def build_download_url(
    api_base: str | None,
    *,
    id: str | None = None,
    name: str | None = None,
    file_path: str | None = None,
    machine_name: str | None = None,
) -> str | None:
    """Synthesize a URL on the API's download endpoint, preferring id, then machine+path."""
    base = (api_base or "").rstrip("/")
    if not base:
        return None
    endpoint = f"{base}{DOWNLOAD_ENDPOINT}"
    if id and id.strip():
        return f"{endpoint}/{encode_uri_component(id)}"
    if machine_name and file_path:
        return (
            f"{endpoint}?machine={encode_uri_component(machine_name)}"
            f"&path={encode_uri_component(file_path)}"
        )
    if file_path:
        return f"{endpoint}?path={encode_uri_component(file_path)}"
    if name:
        return f"{endpoint}/{encode_uri_component(name)}"
    return None


def placeholder_name(index: int) -> str:
    return f"ISO {index + 1}"


def derive_name_from_url(url: str, index: int) -> str:
    """Last path segment of *url*, percent-decoded."""
    try:
        path = urlsplit(url).path
    except ValueError:
        path = url
    segments = [s for s in re.split(r"[/\\]", path) if s]
    name = unquote(segments[-1]).strip() if segments else ""
    return name or placeholder_name(index)


def name_from_file_path(path: str | None) -> str | None:
    if not path:
        return None
    normalized = re.sub(r"[/\\]+$", "", path.strip())
    if not normalized:
        return None
    segments = [s for s in re.split(r"[/\\]", normalized) if s]
    return segments[-1] if segments else None


# ---------------------------------------------------------------------------
# Tags and availability
# ---------------------------------------------------------------------------


def _tag_text(entry: Any) -> str:
    if isinstance(entry, str):
        return entry.strip()
    if is_finite_number(entry):
        return number_text(entry)
    return ""


def normalize_tags(value: Any) -> list[str]:
    if not value:
        return []
    if isinstance(value, list):
        return [t for t in (_tag_text(e) for e in value) if t][:MAX_TAGS]
    if isinstance(value, str):
        return split_delimited(value)[:MAX_TAGS]
    return []


def _host_text(entry: Any) -> str:
    if isinstance(entry, str):
        return entry.strip()
    if isinstance(entry, Mapping):
        candidate = entry.get("name")
        return candidate.strip() if isinstance(candidate, str) else ""
    return ""


def normalize_availability(value: Any) -> list[str]:
    """Host names from a list, a host -> flag mapping, or a delimited string."""
    if not value:
        return []
    if isinstance(value, list):
        return [h for h in (_host_text(e) for e in value) if h]
    if isinstance(value, Mapping):
        return [str(host) for host, status in value.items() if host and is_truthy(status)]
    if isinstance(value, str):
        return split_delimited(value)
    return []
