"""Tests for lenient integer/float scanning and range parsing."""

import math

import pytest

from rulectl.domain.numbers import UNBOUNDED, parse_double, parse_int, parse_range, scan_ll


class TestScanLl:
    def test_plain(self) -> None:
        assert scan_ll("42") == (42, "")

    def test_sign_and_whitespace(self) -> None:
        assert scan_ll("  -7") == (-7, "")
        assert scan_ll("+3") == (3, "")

    def test_remainder(self) -> None:
        assert scan_ll("12abc") == (12, "abc")
        assert scan_ll("1-5") == (1, "-5")

    @pytest.mark.parametrize("text", ["", "abc", "-", " ", "x1"])
    def test_no_digits(self, text: str) -> None:
        with pytest.raises(ValueError):
            scan_ll(text)

    def test_64_bit_limits(self) -> None:
        assert scan_ll("9223372036854775807")[0] == 2**63 - 1
        assert scan_ll("-9223372036854775808")[0] == -(2**63)
        with pytest.raises(ValueError):
            scan_ll("9223372036854775808")


class TestParseInt:
    def test_trailing_characters_accepted(self) -> None:
        assert parse_int("10kg") == 10


class TestParseDouble:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("1.5", 1.5),
            ("  -2.25", -2.25),
            ("1e3", 1000.0),
            (".5", 0.5),
            ("3.", 3.0),
            ("7", 7.0),
            ("2.5GHz", 2.5),
            ("1e", 1.0),
            ("0.0", 0.0),
            ("0x10", 16.0),
            ("-0X1.8p1", -3.0),
            ("0x.8", 0.5),
            ("0xffzz", 255.0),
            ("0x", 0.0),
        ],
    )
    def test_valid(self, text: str, expected: float) -> None:
        assert parse_double(text) == expected

    def test_infinity_literal(self) -> None:
        assert math.isinf(parse_double("inf"))
        assert parse_double("-Infinity") == -math.inf

    def test_nan_literal(self) -> None:
        assert math.isnan(parse_double("NaN"))

    @pytest.mark.parametrize("text", ["", "abc", ".", "e5"])
    def test_no_number(self, text: str) -> None:
        with pytest.raises(ValueError):
            parse_double(text)

    def test_overflow(self) -> None:
        with pytest.raises(ValueError, match="overflows"):
            parse_double("1e400")

    def test_hex_overflow(self) -> None:
        with pytest.raises(ValueError, match="overflows"):
            parse_double("0x1p2000")

    def test_hex_underflow(self) -> None:
        with pytest.raises(ValueError, match="underflows"):
            parse_double("0x1p-2000")

    def test_underflow(self) -> None:
        with pytest.raises(ValueError, match="underflows"):
            parse_double("1e-400")


class TestParseRange:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("5", (5, 5)),
            ("1-5", (1, 5)),
            ("9-17", (9, 17)),
            ("3-", (3, UNBOUNDED)),
            ("-7", (UNBOUNDED, 7)),
            ("3--1", (3, UNBOUNDED)),
            ("5-3", (5, 3)),
        ],
    )
    def test_valid(self, text: str, expected: tuple[int, int]) -> None:
        assert parse_range(text) == expected

    @pytest.mark.parametrize("text", [None, "", "-", "abc", "1x", "1-2x", "-3x", "1+2"])
    def test_invalid(self, text: str | None) -> None:
        with pytest.raises(ValueError):
            parse_range(text)
