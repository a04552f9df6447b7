"""Typed comparison of attribute values.

Both sides of an attribute expression arrive as raw strings. The value
type decides how they are ordered:

- string:  case-insensitive lexical order
- integer: signed 64-bit integers
- number:  floating point
- version: dotted numeric components, shorter side padded with zeros

Integer and number comparisons fall back to string order when either side
does not parse. A missing value always sorts before a present one.
"""

from __future__ import annotations

import logging
import re
from typing import Any

from rulectl.domain.numbers import parse_double, parse_int
from rulectl.domain.types import ORDERING_COMPARISONS, Comparison, ValueType

logger = logging.getLogger(__name__)

_LEADING_DIGITS = re.compile(r"\d+", re.ASCII)


def parse_comparison(op: str | None) -> Comparison:
    """Map operator text (case-insensitive) to a :class:`Comparison`."""
    if op is None:
        return Comparison.UNKNOWN
    try:
        return Comparison(op.lower())
    except ValueError:
        return Comparison.UNKNOWN


def parse_type(
    type_name: str | None,
    op: Comparison,
    left: str | None = None,
    right: str | None = None,
) -> ValueType:
    """Resolve the value type used to compare *left* and *right*.

    An explicit *type_name* wins (unknown names give ``UNKNOWN``). Without
    one, ordering operators compare as ``number`` when either value has a
    decimal point and as ``integer`` otherwise; every other operator
    compares as ``string``.
    """
    if type_name is None:
        if op in ORDERING_COMPARISONS:
            if (left is not None and "." in left) or (right is not None and "." in right):
                return ValueType.NUMBER
            return ValueType.INTEGER
        return ValueType.STRING

    try:
        return ValueType(type_name.lower())
    except ValueError:
        return ValueType.UNKNOWN


def _sign(left: Any, right: Any) -> int:
    return (left > right) - (left < right)


def _version_components(version: str) -> list[int]:
    components: list[int] = []
    for piece in version.split("."):
        m = _LEADING_DIGITS.match(piece)
        components.append(int(m.group()) if m else 0)
    return components


def compare_version(left: str, right: str) -> int:
    """Compare dotted version strings component by component."""
    l_parts = _version_components(left)
    r_parts = _version_components(right)
    width = max(len(l_parts), len(r_parts))
    l_parts.extend([0] * (width - len(l_parts)))
    r_parts.extend([0] * (width - len(r_parts)))
    for l_num, r_num in zip(l_parts, r_parts, strict=True):
        if l_num != r_num:
            return _sign(l_num, r_num)
    return 0


def compare_by_type(left: str | None, right: str | None, value_type: ValueType) -> int:
    """Compare two raw values as *value_type*.

    Returns -1, 0 or 1 as *left* sorts before, equal to, or after *right*.
    """
    if left is None and right is None:
        return 0
    if right is None:
        return 1
    if left is None:
        return -1

    if value_type is ValueType.STRING:
        return _sign(left.lower(), right.lower())

    if value_type is ValueType.INTEGER:
        try:
            return _sign(parse_int(left), parse_int(right))
        except ValueError:
            logger.debug("Integer parse error. Comparing %s and %s as strings", left, right)
            return compare_by_type(left, right, ValueType.STRING)

    if value_type is ValueType.NUMBER:
        try:
            return _sign(parse_double(left), parse_double(right))
        except ValueError:
            logger.debug(
                "Floating-point parse error. Comparing %s and %s as strings", left, right
            )
            return compare_by_type(left, right, ValueType.STRING)

    if value_type is ValueType.VERSION:
        return compare_version(left, right)

    return 0


def comparison_holds(
    op: Comparison,
    actual: str | None,
    expected: str | None,
    value_type: ValueType,
) -> bool:
    """Whether ``actual <op> expected`` holds under *value_type*.

    ``defined``/``not_defined`` only test whether *actual* is present.
    Ordering operators never hold when either side is missing.
    """
    if op is Comparison.DEFINED:
        return actual is not None
    if op is Comparison.NOT_DEFINED:
        return actual is None
    if op in ORDERING_COMPARISONS and (actual is None or expected is None):
        return False

    cmp = compare_by_type(actual, expected, value_type)
    if op is Comparison.EQ:
        return cmp == 0
    if op is Comparison.NE:
        return cmp != 0
    if op is Comparison.LT:
        return cmp < 0
    if op is Comparison.LTE:
        return cmp <= 0
    if op is Comparison.GT:
        return cmp > 0
    if op is Comparison.GTE:
        return cmp >= 0
    return False
