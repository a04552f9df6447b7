"""Lenient numeric scanning shared by the evaluators.

The scanners accept the same inputs a C library ``strtoll``/``strtod``
would: leading whitespace, an optional sign, and trailing characters
after the number (logged, then ignored). Rule configurations written
against that behavior keep evaluating the same way.
"""

from __future__ import annotations

import logging
import math
import re
import sys

logger = logging.getLogger(__name__)

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1
INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1

# Unbounded marker for range endpoints
UNBOUNDED = -1

_WS = "[ \t\n\v\f\r]*"
_INT_RE = re.compile(_WS + r"([+-]?\d+)", re.ASCII)
_HEX_FLOAT = r"0x(?:[0-9a-f]+\.?[0-9a-f]*|\.[0-9a-f]+)(?:p[+-]?\d+)?"
_DEC_FLOAT = r"(?:\d+\.?\d*|\.\d+)(?:e[+-]?\d+)?"
_FLOAT_RE = re.compile(
    _WS + rf"([+-]?(?:{_HEX_FLOAT}|{_DEC_FLOAT}|inf(?:inity)?|nan))",
    re.ASCII | re.IGNORECASE,
)
_NONZERO_DEC_RE = re.compile(r"[1-9]")
_NONZERO_HEX_RE = re.compile(r"[1-9a-f]", re.IGNORECASE)


def scan_ll(text: str) -> tuple[int, str]:
    """Scan a signed 64-bit integer from the start of *text*.

    Returns ``(value, remainder)`` where *remainder* is the unparsed tail.

    Raises:
        ValueError: If no digits are found or the value overflows 64 bits.
    """
    m = _INT_RE.match(text)
    if m is None:
        msg = f"no digits found in '{text}'"
        raise ValueError(msg)
    value = int(m.group(1))
    if not INT64_MIN <= value <= INT64_MAX:
        msg = f"integer '{m.group(1)}' is out of range"
        raise ValueError(msg)
    return value, text[m.end() :]


def parse_int(text: str) -> int:
    """Scan an integer, logging (not rejecting) trailing characters."""
    value, rest = scan_ll(text)
    if rest:
        logger.debug("Characters left over after parsing '%s': '%s'", text, rest)
    return value


def parse_double(text: str) -> float:
    """Scan a floating-point number, logging trailing characters.

    Raises:
        ValueError: If no number is found, or the value overflows or
            underflows a double.
    """
    m = _FLOAT_RE.match(text)
    if m is None:
        msg = f"no number found in '{text}'"
        raise ValueError(msg)
    literal = m.group(1)
    lowered = literal.lower()
    is_hex = "0x" in lowered
    try:
        value = float.fromhex(literal) if is_hex else float(literal)
    except OverflowError:
        value = math.inf
    if math.isinf(value) and "inf" not in lowered:
        msg = f"'{literal}' overflows a double"
        raise ValueError(msg)
    if "nan" not in lowered and "inf" not in lowered:
        if is_hex:
            mantissa = lowered.split("p", 1)[0].split("0x", 1)[1]
            nonzero = _NONZERO_HEX_RE.search(mantissa)
        else:
            nonzero = _NONZERO_DEC_RE.search(lowered.split("e", 1)[0])
        subnormal = value != 0.0 and abs(value) < sys.float_info.min
        if subnormal or (value == 0.0 and nonzero):
            msg = f"'{literal}' underflows a double"
            raise ValueError(msg)
    rest = text[m.end() :]
    if rest:
        logger.debug("Characters left over after parsing '%s': '%s'", text, rest)
    return value


def parse_range(text: str | None) -> tuple[int, int]:
    """Parse range text into inclusive ``(low, high)`` bounds.

    ``"N"`` gives ``(N, N)``, ``"N-M"`` gives ``(N, M)``, ``"N-"`` leaves
    the high end open and ``"-M"`` the low end. An open end is
    :data:`UNBOUNDED`.

    Raises:
        ValueError: If *text* is empty, a lone dash, or has trailing
            characters after a bound.
    """
    if not text:
        msg = "empty range"
        raise ValueError(msg)
    if text == "-":
        msg = "range has no bounds"
        raise ValueError(msg)

    if text[0] == "-":
        high, rest = scan_ll(text[1:])
        if rest:
            msg = f"unexpected '{rest}' in range '{text}'"
            raise ValueError(msg)
        return UNBOUNDED, high

    low, rest = scan_ll(text)
    if not rest:
        return low, low
    if rest[0] != "-":
        msg = f"unexpected '{rest}' in range '{text}'"
        raise ValueError(msg)
    if len(rest) == 1:
        return low, UNBOUNDED
    high, tail = scan_ll(rest[1:])
    if tail:
        msg = f"unexpected '{tail}' in range '{text}'"
        raise ValueError(msg)
    return low, high
