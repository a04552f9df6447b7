"""Recurring calendar specifications (``date_spec`` elements).

A date spec constrains calendar fields of a point in time with integer
ranges, e.g. ``hours="9-17" weekdays="1-5"``. Fields are checked in a
fixed order; the first one out of range decides the result. Fields
without a range (or with malformed range text) do not constrain anything.
"""

from __future__ import annotations

import logging
from datetime import datetime

from rulectl.domain.expressions import ExpressionNode
from rulectl.domain.numbers import UNBOUNDED, parse_range
from rulectl.domain.types import ResultCode

logger = logging.getLogger(__name__)

ATTR_MOON = "moon"

# Range attributes in evaluation order
RANGE_ATTRIBUTES: tuple[str, ...] = (
    "years",
    "months",
    "monthdays",
    "hours",
    "minutes",
    "seconds",
    "yeardays",
    "weekyears",
    "weeks",
    "weekdays",
    ATTR_MOON,
)


def phase_of_the_moon(now: datetime) -> int:
    """Approximate moon phase of *now*, 0 (new) through 7 (full).

    Deprecated: kept for date specs still using the ``moon`` field.
    """
    # Epact from the golden number, then advance by the day of the year;
    # 6 moons ~= 177 days ~= 8 phases * 22 days (+ 11 for rounding)
    year = now.year
    day_of_year = now.timetuple().tm_yday
    golden = (year % 19) + 1
    epact = (11 * golden + 18) % 30
    if (epact == 25 and golden > 11) or epact == 24:
        epact += 1
    return ((((day_of_year + epact) * 6) + 11) % 177 // 22) & 7


def calendar_fields(now: datetime) -> dict[str, int]:
    """Values of every date-spec field for *now*, keyed by attribute name."""
    week_year, week, weekday = now.isocalendar()
    return {
        "years": now.year,
        "months": now.month,
        "monthdays": now.day,
        "hours": now.hour,
        "minutes": now.minute,
        "seconds": now.second,
        "yeardays": now.timetuple().tm_yday,
        "weekyears": week_year,
        "weeks": week,
        "weekdays": weekday,
        ATTR_MOON: phase_of_the_moon(now),
    }


def check_range(date_spec: ExpressionNode, spec_id: str, attr: str, value: int) -> ResultCode:
    """Check *value* against the range in attribute *attr* of *date_spec*.

    Returns ``BEFORE_RANGE`` or ``AFTER_RANGE`` when *value* falls outside
    the range, else ``OK`` (also when the range is absent or malformed, so
    the remaining fields are still checked).
    """
    rc = ResultCode.OK
    range_text = date_spec.get(attr)
    if range_text is not None:
        try:
            low, high = parse_range(range_text)
        except ValueError:
            logger.warning(
                "Ignoring date_spec %s attribute %s because '%s' is not a valid range",
                spec_id,
                attr,
                range_text,
            )
        else:
            if low != UNBOUNDED and value < low:
                rc = ResultCode.BEFORE_RANGE
            elif high != UNBOUNDED and value > high:
                rc = ResultCode.AFTER_RANGE

    logger.debug(
        "Checked date_spec %s %s='%s' for %d: %s", spec_id, attr, range_text or "", value, rc
    )
    return rc


def evaluate_date_spec(date_spec: ExpressionNode | None, now: datetime | None) -> ResultCode:
    """Evaluate *date_spec* for the point in time *now*.

    Returns ``OK`` when every configured field matches (or none are
    configured), the first ``BEFORE_RANGE``/``AFTER_RANGE`` otherwise, and
    ``INVALID_ARGUMENT`` when an input is missing.
    """
    if date_spec is None or now is None:
        return ResultCode.INVALID_ARGUMENT

    spec_id = date_spec.id
    if spec_id is None:
        logger.warning("date_spec subelement of date_expression has no id")
        spec_id = date_spec.loggable_id

    if date_spec.get(ATTR_MOON) is not None:
        logger.warning(
            "Support for '%s' in date_spec elements (such as %s) is deprecated "
            "and will be removed in a future release",
            ATTR_MOON,
            spec_id,
        )

    fields = calendar_fields(now)
    for attr in RANGE_ATTRIBUTES:
        rc = check_range(date_spec, spec_id, attr, fields[attr])
        if rc is not ResultCode.OK:
            return rc
    return ResultCode.OK
