"""Tests for the normalizers given missing or malformed input.

Listing responses come from several backend versions and are often
hand-edited when saved. These tests assert that normalize_iso_response and
normalize_share_listing never raise and always return a list of valid records.
"""

from __future__ import annotations

import json
import unittest
from typing import Any

from iso_catalog.models import IsoRecord, ShareRecord
from iso_catalog.normalization import normalize_iso_response, normalize_share_listing

BAD_PAYLOADS: list[tuple[Any, str]] = [
    (b"raw bytes", "bytes"),
    (("a.iso",), "tuple root"),
    (12.5, "float root"),
    ("{", "truncated json"),
    ("[" * 50_000, "deeply nested json text"),
    ("9" * 5000, "oversized integer text"),
    (json.dumps(json.dumps(json.dumps([]))), "triple encoded"),
    ({"isos": None}, "null collection"),
    ({"isos": "{"}, "broken json collection"),
    ({"isos": {"nested": "deeper"}}, "mapping collection"),
    ({1: [None], None: "x"}, "non-string keys"),
    (
        {
            "isos": [
                None,
                1,
                True,
                {},
                {"name": None},
                {"name": ["a"]},
                {"size_gb": "abc"},
                {"size_gb": float("nan")},
                {"size_mb": 10**400},
                {"bytes": -1},
                {"date": 1e30},
                {"date": -5},
                {"date": "9999-99-99"},
                {"tags": {"a": 1}},
                {"tags": [float("inf"), None, ""]},
                {"hosts": 5},
                {"hosts": {"": True, "a": float("nan")}},
                {"url": "http://[broken"},
                {"url": 123},
                {"nfs_share_id": "NaN"},
            ]
        },
        "junk entries",
    ),
]


def _deep_mapping(levels: int) -> dict[str, Any]:
    node: dict[str, Any] = {"isos": ["a.iso"]}
    for _ in range(levels):
        node = {"wrap": node}
    return node


class TestNormalizeIsoResponseBadInput(unittest.TestCase):
    """normalize_iso_response must not raise on malformed responses."""

    def _ok(self, payload: Any, label: str) -> list[IsoRecord]:
        try:
            records = normalize_iso_response(payload, api_base="https://hive.example.com")
        except Exception as exc:
            self.fail(f"normalize_iso_response raised {type(exc).__name__} on {label!r}: {exc}")
        self.assertIsInstance(records, list, label)
        for record in records:
            self.assertIsInstance(record, IsoRecord, label)
            self.assertTrue(record.id, label)
            self.assertTrue(record.name, label)
        return records

    def test_bad_payloads(self) -> None:
        for payload, label in BAD_PAYLOADS:
            with self.subTest(label=label):
                self._ok(payload, label)

    def test_junk_entries_keep_mapping_records(self) -> None:
        records = self._ok(BAD_PAYLOADS[-1][0], "junk entries")
        self.assertEqual(len(records), 17)
        self.assertEqual(len({r.id for r in records}), 17)

    def test_very_deep_mapping(self) -> None:
        self.assertEqual(self._ok(_deep_mapping(500), "deep mapping"), [])

    def test_non_json_rubbish_becomes_line_records(self) -> None:
        records = self._ok("\x00\x01 garbage \n\t", "control characters")
        self.assertEqual(len(records), 1)


class TestNormalizeShareListingBadInput(unittest.TestCase):
    """normalize_share_listing must not raise on malformed responses."""

    def _ok(self, payload: Any, label: str) -> list[ShareRecord]:
        try:
            shares = normalize_share_listing(payload)
        except Exception as exc:
            self.fail(f"normalize_share_listing raised {type(exc).__name__} on {label!r}: {exc}")
        self.assertIsInstance(shares, list, label)
        for share in shares:
            self.assertIsInstance(share, ShareRecord, label)
            self.assertTrue(share.display_name, label)
        return shares

    def test_bad_payloads(self) -> None:
        for payload, label in BAD_PAYLOADS:
            with self.subTest(label=label):
                self._ok(payload, label)

    def test_junk_share_entries(self) -> None:
        payload = [
            None,
            "text",
            {"NfsShare": None},
            {"NfsShare": {"Id": True}},
            {"NfsShare": {"Id": 2.5}},
            {"NfsShare": {"Id": 10**400}},
            {"id": "x", "target": "   "},
        ]
        self.assertEqual(self._ok(payload, "junk shares"), [])

    def test_plain_text_gives_no_shares(self) -> None:
        self.assertEqual(self._ok("one\ntwo", "plain text"), [])


if __name__ == "__main__":
    unittest.main()
