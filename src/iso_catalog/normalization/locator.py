"""Find the list of records inside an arbitrarily shaped API response."""

import logging
import re
from collections import deque
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from iso_catalog.normalization.lookup import FieldLookup
from iso_catalog.primitives import normalize_key, try_parse_json

logger = logging.getLogger(__name__)

MAX_COLLECTION_DEPTH = 4

ISO_COLLECTION_KEYS: tuple[str, ...] = (
    "isos",
    "iso",
    "isoarray",
    "isolist",
    "availableisos",
    "availableiso",
    "images",
    "imagelist",
    "files",
    "filelist",
    "downloads",
    "data",
    "result",
    "results",
    "items",
    "records",
    "payload",
    "entries",
    "list",
)

_HEURISTIC_URL_KEYS = ("downloadurl", "download_url", "url", "link", "href", "directlink")
_HEURISTIC_PATH_KEYS = ("path", "file", "source")
_HEURISTIC_NAME_KEYS = ("name", "title", "label", "filename")

_ISO_SUFFIX_RE = re.compile(r"\.iso(\.gz)?$", re.IGNORECASE)
_HTTP_PREFIX_RE = re.compile(r"^https?://", re.IGNORECASE)


def _looks_like_iso_entry(entry: Any) -> bool:
    if isinstance(entry, str):
        trimmed = entry.strip()
        if not trimmed:
            return False
        return bool(_HTTP_PREFIX_RE.match(trimmed) or _ISO_SUFFIX_RE.search(trimmed))
    if not isinstance(entry, Mapping):
        return False
    fields = FieldLookup(entry)
    return bool(
        fields.string(_HEURISTIC_URL_KEYS)
        or fields.string(_HEURISTIC_PATH_KEYS)
        or fields.string(_HEURISTIC_NAME_KEYS)
    )


def is_likely_iso_array(items: list[Any]) -> bool:
    """True when at least one element looks like an ISO record (URL, .iso name, or named mapping)."""
    return any(_looks_like_iso_entry(entry) for entry in items)


def locate_collection(
    payload: Any,
    candidate_keys: Iterable[str] = ISO_COLLECTION_KEYS,
    looks_like_collection: Callable[[list[Any]], bool] = is_likely_iso_array,
    max_depth: int = MAX_COLLECTION_DEPTH,
) -> list[Any]:
    """
    Breadth-first search for the record list inside *payload*.

    A list root is returned as is. Inside mappings, a key matching one of
    *candidate_keys* wins as soon as its value is (or JSON-decodes to) a list;
    any other list qualifies only if *looks_like_collection* accepts it.
    Mappings, including JSON strings that decode to mappings, are searched
    down to *max_depth* levels. Each mapping is visited at most once, so
    self-referencing payloads terminate. Returns [] when nothing matches.
    """
    if isinstance(payload, list):
        return payload
    if not isinstance(payload, Mapping) or not payload:
        return []

    key_set = {normalize_key(k) for k in candidate_keys}
    # Holding the nodes keeps their ids from being reused while searching.
    visited: dict[int, Mapping[Any, Any]] = {}
    queue: deque[tuple[Mapping[Any, Any], int]] = deque([(payload, 0)])

    while queue:
        node, depth = queue.popleft()
        if depth > max_depth or id(node) in visited:
            continue
        visited[id(node)] = node

        for key, child in node.items():
            if normalize_key(key) in key_set:
                if isinstance(child, list):
                    logger.debug("Collection found under key %r at depth %d", key, depth)
                    return child
                if isinstance(child, str):
                    parsed = try_parse_json(child)
                    if isinstance(parsed, list):
                        logger.debug("Collection decoded from JSON string under key %r", key)
                        return parsed
                    if isinstance(parsed, Mapping):
                        queue.append((parsed, depth + 1))
                elif isinstance(child, Mapping):
                    queue.append((child, depth + 1))
                continue

            if isinstance(child, list):
                if looks_like_collection(child):
                    logger.debug("Collection matched structurally under key %r", key)
                    return child
                continue

            if isinstance(child, Mapping):
                queue.append((child, depth + 1))
            elif isinstance(child, str):
                parsed = try_parse_json(child)
                if isinstance(parsed, list):
                    if looks_like_collection(parsed):
                        logger.debug("Collection matched structurally in JSON string under key %r", key)
                        return parsed
                elif isinstance(parsed, Mapping):
                    queue.append((parsed, depth + 1))

    logger.debug("No record collection found in payload")
    return []
