from .entries import normalize_iso_entry
from .locator import locate_collection
from .payload import normalize_iso_response
from .shares import apply_share_names, normalize_share_listing, resolve_share_name

__all__ = [
    "normalize_iso_entry",
    "locate_collection",
    "normalize_iso_response",
    "apply_share_names",
    "normalize_share_listing",
    "resolve_share_name",
]
