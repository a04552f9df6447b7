"""Shared service-layer helper functions."""

from __future__ import annotations

from datetime import UTC, datetime


def now_utc() -> datetime:
    """Current time, truncated to whole seconds, in UTC."""
    return datetime.now(UTC).replace(microsecond=0)


def parse_assignments(pairs: tuple[str, ...] | list[str]) -> dict[str, str]:
    """Parse ``NAME=VALUE`` pairs into a dict (later pairs win).

    Raises:
        ValueError: If a pair has no ``=`` or an empty name.

    Examples:
        >>> parse_assignments(["#uname=node1", "rack=2"])
        {'#uname': 'node1', 'rack': '2'}
    """
    result: dict[str, str] = {}
    for pair in pairs:
        name, sep, value = pair.partition("=")
        if not sep or not name:
            msg = f"expected NAME=VALUE, got '{pair}'"
            raise ValueError(msg)
        result[name] = value
    return result
