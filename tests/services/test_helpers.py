"""Tests for shared service helpers."""

from datetime import UTC

import pytest

from rulectl.services._helpers import now_utc, parse_assignments


class TestNowUtc:
    def test_aware_whole_seconds(self) -> None:
        now = now_utc()
        assert now.tzinfo is UTC
        assert now.microsecond == 0


class TestParseAssignments:
    def test_pairs(self) -> None:
        assert parse_assignments(["#uname=node1", "rack=2"]) == {"#uname": "node1", "rack": "2"}

    def test_empty_value_and_embedded_equals(self) -> None:
        assert parse_assignments(("empty=", "expr=a=b")) == {"empty": "", "expr": "a=b"}

    def test_later_pair_wins(self) -> None:
        assert parse_assignments(["a=1", "a=2"]) == {"a": "2"}

    @pytest.mark.parametrize("pair", ["novalue", "=value"])
    def test_malformed(self, pair: str) -> None:
        with pytest.raises(ValueError, match="NAME=VALUE"):
            parse_assignments([pair])
