"""Share (NFS mount) listings and ISO -> share cross-referencing."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping, Sequence
from typing import Any

from iso_catalog.models import IsoRecord, ShareRecord
from iso_catalog.normalization.locator import locate_collection
from iso_catalog.normalization.lookup import FieldLookup
from iso_catalog.normalization.payload import decode_string_payload
from iso_catalog.primitives import integral

logger = logging.getLogger(__name__)

SHARE_COLLECTION_KEYS: tuple[str, ...] = (
    "mounts",
    "mountlist",
    "shares",
    "sharelist",
    "nfs",
    "nfsshares",
    "data",
    "result",
    "results",
    "items",
    "records",
    "payload",
    "entries",
    "list",
)

SHARE_ID_KEYS = ("id", "shareid", "nfsshareid")
SHARE_NAME_KEYS = ("name", "label", "title")
SHARE_MACHINE_KEYS = ("machinename", "machine", "host")
SHARE_FOLDER_KEYS = ("folderpath", "folder", "path")
SHARE_TARGET_KEYS = ("target", "mountpoint", "targetpath")


# ---------------------------------------------------------------------------
# Share listing
# ---------------------------------------------------------------------------


def _looks_like_share_array(items: list[Any]) -> bool:
    for entry in items:
        if not isinstance(entry, Mapping):
            continue
        fields = FieldLookup(entry)
        if "NfsShare" in fields or fields.string(SHARE_TARGET_KEYS + SHARE_FOLDER_KEYS):
            return True
    return False


def _share_fields(entry: Mapping[Any, Any]) -> FieldLookup:
    fields = FieldLookup(entry)
    nested = fields.value(["NfsShare"])
    return FieldLookup(nested) if isinstance(nested, Mapping) else fields


def normalize_share_entry(entry: Any) -> ShareRecord | None:
    """Build a ShareRecord from one mount listing entry (``{"NfsShare": {...}}`` or flat)."""
    if not isinstance(entry, Mapping):
        return None
    fields = _share_fields(entry)

    share_id = fields.number(SHARE_ID_KEYS)
    if share_id is not None:
        share_id = integral(share_id)
        if not isinstance(share_id, int):
            share_id = None
    folder_path = fields.string(SHARE_FOLDER_KEYS)
    target = fields.string(SHARE_TARGET_KEYS)
    if share_id is None and not (folder_path or target):
        return None

    machine_name = fields.string(SHARE_MACHINE_KEYS)
    fallback_name = " • ".join(p for p in (machine_name, folder_path) if p)
    return ShareRecord(
        id=share_id,
        name=fields.string(SHARE_NAME_KEYS),
        fallback_name=fallback_name or target or f"share {share_id}",
        target=target,
        folder_path=folder_path,
        machine_name=machine_name,
    )


def _normalize_share_entries(entries: list[Any]) -> list[ShareRecord]:
    shares = []
    for entry in entries:
        share = normalize_share_entry(entry)
        if share is not None:
            shares.append(share)
    return shares


def normalize_share_listing(payload: Any) -> list[ShareRecord]:
    """Normalize a mount/share listing response of any supported shape. Never raises."""
    if not payload:
        return []
    if isinstance(payload, str):
        # Plain-text lines carry no share structure.
        return decode_string_payload(payload, normalize_share_listing, lambda lines: [])
    collection = locate_collection(
        payload,
        candidate_keys=SHARE_COLLECTION_KEYS,
        looks_like_collection=_looks_like_share_array,
    )
    shares = _normalize_share_entries(collection)
    logger.debug("Normalized %d share record(s)", len(shares))
    return shares


# ---------------------------------------------------------------------------
# Cross-referencing
# ---------------------------------------------------------------------------


def normalize_fs_path(path: str | None) -> str | None:
    """Canonical form for path comparison: forward slashes, no doubles, no trailing slash, lower-case."""
    if not path:
        return None
    replaced = re.sub(r"/{2,}", "/", re.sub(r"\\+", "/", path))
    trimmed = re.sub(r"/+$", "", replaced).strip()
    return trimmed.lower() if trimmed else None


def _path_within(path: str, share: ShareRecord) -> bool:
    for candidate in (share.target, share.folder_path):
        root = normalize_fs_path(candidate)
        if root and (path == root or path.startswith(f"{root}/")):
            return True
    return False


def resolve_share_name(record: IsoRecord, shares: Sequence[ShareRecord]) -> str | None:
    """
    Display name of the share holding *record*.

    An existing mount name wins. Otherwise the share id is matched exactly,
    then the record's file path is tested against each share's target and
    folder path. The first share in list order wins.
    """
    if record.mount_name:
        return record.mount_name
    if not shares:
        return None

    if record.nfs_share_id is not None:
        for share in shares:
            if share.id is not None and share.id == record.nfs_share_id:
                return share.display_name

    path = normalize_fs_path(record.file_path)
    if not path:
        return None
    for share in shares:
        if _path_within(path, share):
            return share.display_name
    return None


def apply_share_names(records: Sequence[IsoRecord], shares: Sequence[ShareRecord]) -> list[IsoRecord]:
    """Return records with mount names filled from *shares*; unchanged records are passed through."""
    if not shares:
        return list(records)
    out = []
    for record in records:
        resolved = resolve_share_name(record, shares)
        if resolved and resolved != record.mount_name:
            record = record.model_copy(update={"mount_name": resolved})
        out.append(record)
    return out
