"""Normalization of ISO image and share listings from the HyperHive management API."""

from iso_catalog.models import IsoRecord, ShareRecord
from iso_catalog.normalization import (
    apply_share_names,
    normalize_iso_response,
    normalize_share_listing,
)

__all__ = [
    "IsoRecord",
    "ShareRecord",
    "apply_share_names",
    "normalize_iso_response",
    "normalize_share_listing",
]
