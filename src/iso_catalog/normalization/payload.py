"""Top-level entry point: raw ISO listing response -> list of IsoRecords."""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Callable
from typing import Any, TypeVar

from iso_catalog.models import IsoRecord
from iso_catalog.normalization.entries import normalize_iso_entry
from iso_catalog.normalization.locator import locate_collection

logger = logging.getLogger(__name__)

T = TypeVar("T")

_LINE_SPLIT_RE = re.compile(r"\r?\n")


def split_lines(text: str) -> list[str]:
    return [line.strip() for line in _LINE_SPLIT_RE.split(text) if line.strip()]


def decode_string_payload(
    text: str,
    normalize: Callable[[Any], list[T]],
    parse_lines: Callable[[list[str]], list[T]],
) -> list[T]:
    """
    Unwrap a string response.

    Blank strings give []. Valid JSON (including JSON that decodes to another
    string) is handed back to *normalize*; anything else is treated as
    newline-delimited text and passed to *parse_lines*. Each round trip
    through *normalize* strips one encoding layer, so this terminates.
    """
    trimmed = text.strip()
    if not trimmed:
        return []

    try:
        parsed = json.loads(trimmed)
    except (ValueError, RecursionError):
        logger.debug("Payload is not JSON; reading it as line-delimited text")
        return parse_lines(split_lines(trimmed))

    if isinstance(parsed, str):
        logger.debug("Payload is a double-encoded JSON string")
    return normalize(parsed)


def _normalize_entries(entries: list[Any], api_base: str | None) -> list[IsoRecord]:
    records = []
    for index, entry in enumerate(entries):
        record = normalize_iso_entry(entry, index, api_base)
        if record is not None:
            records.append(record)
    return records


def normalize_iso_response(payload: Any, api_base: str | None = None) -> list[IsoRecord]:
    """
    Normalize an ISO listing response of any supported shape.

    *payload* may be a decoded JSON value (list, nested mapping) or a string
    holding JSON, double-encoded JSON or one URL per line. Never raises on
    malformed input; unrecognized shapes produce [].
    """
    if not payload:
        return []

    if isinstance(payload, str):
        return decode_string_payload(
            payload,
            lambda value: normalize_iso_response(value, api_base),
            lambda lines: _normalize_entries(lines, api_base),
        )

    records = _normalize_entries(locate_collection(payload), api_base)
    logger.debug("Normalized %d ISO record(s)", len(records))
    return records
