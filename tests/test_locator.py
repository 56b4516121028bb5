"""Tests for the collection locator."""

import json

from iso_catalog.normalization.locator import (
    MAX_COLLECTION_DEPTH,
    is_likely_iso_array,
    locate_collection,
)


class TestLocateCollection:
    def test_root_list_returned_as_is(self):
        payload = [{"name": "a.iso"}, 1, None]
        assert locate_collection(payload) is payload

    def test_primitive_root_is_empty(self):
        assert locate_collection(42) == []
        assert locate_collection(None) == []
        assert locate_collection({}) == []

    def test_candidate_key_matches_regardless_of_spelling(self):
        items = [{"x": 1}]
        assert locate_collection({"Available-ISOs": items}) is items
        assert locate_collection({"ISO_LIST": items}) is items

    def test_candidate_key_list_wins_without_heuristic(self):
        items = [1, 2, 3]
        assert locate_collection({"items": items}) is items

    def test_shallowest_candidate_wins(self):
        shallow = [{"name": "shallow.iso"}]
        deep = [{"name": "deep.iso"}]
        payload = {"wrapper": {"isos": deep}, "results": shallow}
        assert locate_collection(payload) is shallow

    def test_candidate_key_with_json_string_list(self):
        payload = {"data": json.dumps([{"name": "a.iso"}])}
        assert locate_collection(payload) == [{"name": "a.iso"}]

    def test_candidate_key_with_json_string_object_is_searched(self):
        payload = {"payload": json.dumps({"files": ["a.iso"]})}
        assert locate_collection(payload) == ["a.iso"]

    def test_candidate_key_with_non_json_string_is_ignored(self):
        assert locate_collection({"data": "not json"}) == []

    def test_non_candidate_list_needs_structural_match(self):
        numbers = [1, 2, 3]
        isos = [{"title": "Fedora"}]
        assert locate_collection({"counts": numbers}) == []
        assert locate_collection({"counts": numbers, "catalog": isos}) is isos

    def test_non_candidate_json_string_list_needs_structural_match(self):
        assert locate_collection({"blob": json.dumps([1, 2])}) == []
        assert locate_collection({"blob": json.dumps(["http://x/a.iso"])}) == ["http://x/a.iso"]

    def test_non_candidate_json_string_object_is_searched(self):
        payload = {"envelope": json.dumps({"downloads": [{"url": "http://x/a.iso"}]})}
        assert locate_collection(payload) == [{"url": "http://x/a.iso"}]

    def test_depth_limit(self):
        items = [{"name": "a.iso"}]
        payload = {"isos": items}
        for _ in range(MAX_COLLECTION_DEPTH):
            payload = {"level": payload}
        assert locate_collection(payload) is items

        payload = {"level": payload}
        assert locate_collection(payload) == []

    def test_self_referencing_payload_terminates(self):
        payload = {"meta": {}}
        payload["meta"]["parent"] = payload
        payload["self"] = payload
        assert locate_collection(payload) == []

    def test_mutually_referencing_payload_finds_collection(self):
        a = {"name": "a"}
        b = {"name": "b", "peer": a}
        a["peer"] = b
        items = [{"name": "x.iso"}]
        b["images"] = items
        assert locate_collection({"root": a}) is items

    def test_custom_candidate_keys(self):
        items = [1]
        assert locate_collection({"mounts": items}, candidate_keys=("mounts",)) is items
        assert locate_collection({"mounts": items}) == []


class TestIsLikelyIsoArray:
    def test_url_strings(self):
        assert is_likely_iso_array(["https://example.com/a"])

    def test_iso_suffix_strings(self):
        assert is_likely_iso_array(["debian.iso"])
        assert is_likely_iso_array(["DEBIAN.ISO.GZ"])

    def test_plain_strings(self):
        assert not is_likely_iso_array(["hello", "  "])

    def test_mappings_with_name_url_or_path(self):
        assert is_likely_iso_array([{"Download_URL": "x"}])
        assert is_likely_iso_array([{"source": "/mnt/a"}])
        assert is_likely_iso_array([{"FileName": "a"}])

    def test_mappings_without_identifying_fields(self):
        assert not is_likely_iso_array([{"size": 1}, {"name": "  "}])

    def test_any_element_is_enough(self):
        assert is_likely_iso_array([None, 3, {"name": "a.iso"}])

    def test_empty(self):
        assert not is_likely_iso_array([])
