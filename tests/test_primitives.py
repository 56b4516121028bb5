"""Tests for the coercion primitives."""

from iso_catalog.primitives import (
    integral,
    is_finite_number,
    is_truthy,
    number_text,
    split_delimited,
    to_number,
    try_parse_json,
)


class TestIsFiniteNumber:
    def test_numbers(self):
        assert is_finite_number(0)
        assert is_finite_number(-3.5)

    def test_rejects_bool_and_non_finite(self):
        assert not is_finite_number(True)
        assert not is_finite_number(float("nan"))
        assert not is_finite_number(float("-inf"))
        assert not is_finite_number("1")

    def test_huge_int_is_not_finite(self):
        assert not is_finite_number(10**400)
        assert is_finite_number(10**300)


class TestToNumber:
    def test_numeric_strings(self):
        assert to_number("42") == 42
        assert to_number(" -1.5 ") == -1.5

    def test_rejects_junk(self):
        for value in ("", "  ", "abc", "1_000", "nan", "inf", None, [], {}, False):
            assert to_number(value) is None, value


def test_number_text():
    assert number_text(4.0) == "4"
    assert number_text(4.25) == "4.25"
    assert number_text(7) == "7"


def test_integral():
    assert integral(3.0) == 3
    assert isinstance(integral(3.0), int)
    assert integral(3.5) == 3.5


def test_try_parse_json():
    assert try_parse_json('{"a": 1}') == {"a": 1}
    assert try_parse_json("  ") is None
    assert try_parse_json("{oops") is None
    assert try_parse_json("[" * 100_000) is None


def test_is_truthy():
    for value in (True, 1, -2, 0.5, "true", " YES ", "1", {}, []):
        assert is_truthy(value), value
    for value in (False, 0, 0.0, "false", "no", "", "0", None):
        assert not is_truthy(value), value


def test_split_delimited():
    assert split_delimited(" a ,b;; c ") == ["a", "b", "c"]
    assert split_delimited(" ; , ") == []
