"""Date expression evaluation.

Dispatches a ``date_expression`` on its ``operation``:

- ``in_range``:  between ``start`` and ``end`` (or ``start`` + ``duration``)
- ``date_spec``: matches a recurring calendar specification
- ``gt``:        strictly after ``start``
- ``lt``:        strictly before ``end``

Configuration problems (malformed timestamps, missing attributes, unknown
operations) are logged and make the expression not pass; they never abort
evaluation of the surrounding rule.

INVARIANT: the next-change watermark is only ever moved earlier.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime, tzinfo

from rulectl.domain.datespec import evaluate_date_spec
from rulectl.domain.duration import unpack_duration
from rulectl.domain.expressions import TAG_DATE_SPEC, TAG_DURATION, ExpressionNode
from rulectl.domain.timestamps import NextChange, add_seconds, ensure_aware, get_datetime
from rulectl.domain.types import DateOperation, ResultCode

logger = logging.getLogger(__name__)


def _read_datetime(
    node: ExpressionNode, expr_id: str, attr: str, default_tz: tzinfo
) -> tuple[datetime | None, bool]:
    """Read *attr* as a timestamp; returns ``(value, valid)``.

    A malformed value is logged and reported as ``(None, False)``.
    """
    try:
        return get_datetime(node, attr, default_tz), True
    except ValueError:
        logger.warning("Ignoring %s in date_expression %s because it is invalid", attr, expr_id)
        return None, False


def _set_if_earlier(next_change: NextChange | None, candidate: datetime | None) -> None:
    if next_change is not None:
        next_change.set_if_earlier(candidate)


def _second_after(value: datetime) -> datetime | None:
    """The instant one second after *value*, or None past the last representable one."""
    try:
        return add_seconds(value, 1)
    except OverflowError:
        return None


def evaluate_in_range(
    date_expression: ExpressionNode,
    expr_id: str,
    now: datetime,
    next_change: NextChange | None = None,
    default_tz: tzinfo = UTC,
) -> ResultCode:
    """Evaluate an ``in_range`` date expression at *now*."""
    start, _ = _read_datetime(date_expression, expr_id, "start", default_tz)
    end, _ = _read_datetime(date_expression, expr_id, "end", default_tz)

    if start is None and end is None:
        logger.warning(
            "Treating date_expression %s as not passing because in_range "
            "requires at least one of start or end",
            expr_id,
        )
        return ResultCode.UNDETERMINED

    if end is None:
        duration = date_expression.first_child(TAG_DURATION)
        if duration is not None:
            _rc, end = unpack_duration(duration, start)

    if start is not None and now < start:
        _set_if_earlier(next_change, start)
        return ResultCode.BEFORE_RANGE

    if end is not None:
        if now > end:
            return ResultCode.AFTER_RANGE
        # Result doesn't change until the second after end
        _set_if_earlier(next_change, _second_after(end))

    return ResultCode.WITHIN_RANGE


def evaluate_gt(
    date_expression: ExpressionNode,
    expr_id: str,
    now: datetime,
    next_change: NextChange | None = None,
    default_tz: tzinfo = UTC,
) -> ResultCode:
    """Evaluate a ``gt`` date expression at *now* (strictly after ``start``)."""
    start, valid = _read_datetime(date_expression, expr_id, "start", default_tz)
    if not valid:
        logger.warning(
            "Treating date_expression %s as not passing because start is invalid", expr_id
        )
        return ResultCode.UNDETERMINED
    if start is None:
        logger.warning(
            "Treating date_expression %s as not passing because gt requires start", expr_id
        )
        return ResultCode.UNDETERMINED

    if now > start:
        return ResultCode.WITHIN_RANGE

    # Result doesn't change until the second after start
    _set_if_earlier(next_change, _second_after(start))
    return ResultCode.BEFORE_RANGE


def evaluate_lt(
    date_expression: ExpressionNode,
    expr_id: str,
    now: datetime,
    next_change: NextChange | None = None,
    default_tz: tzinfo = UTC,
) -> ResultCode:
    """Evaluate an ``lt`` date expression at *now* (strictly before ``end``)."""
    end, valid = _read_datetime(date_expression, expr_id, "end", default_tz)
    if not valid:
        logger.warning(
            "Treating date_expression %s as not passing because end is invalid", expr_id
        )
        return ResultCode.UNDETERMINED
    if end is None:
        logger.warning(
            "Treating date_expression %s as not passing because lt requires end", expr_id
        )
        return ResultCode.UNDETERMINED

    if now < end:
        _set_if_earlier(next_change, end)
        return ResultCode.WITHIN_RANGE
    return ResultCode.AFTER_RANGE


def evaluate_date_expression(
    date_expression: ExpressionNode | None,
    now: datetime | None,
    next_change: NextChange | None = None,
    *,
    default_tz: tzinfo = UTC,
) -> ResultCode:
    """Evaluate a ``date_expression`` element at *now*.

    Args:
        date_expression: The ``date_expression`` node.
        now: Point in time to evaluate at (naive values use *default_tz*).
        next_change: Watermark to move earlier when the instant the result
            will change is known.
        default_tz: Timezone for timestamps written without an offset.

    Returns:
        ``WITHIN_RANGE``/``OK`` when the expression passes,
        ``BEFORE_RANGE``/``AFTER_RANGE`` when it does not, ``UNDETERMINED``
        for configuration errors, ``INVALID_ARGUMENT`` for missing inputs.
    """
    if date_expression is None or now is None:
        return ResultCode.INVALID_ARGUMENT
    now = ensure_aware(now, default_tz)

    expr_id = date_expression.id
    if expr_id is None:
        logger.warning("date_expression element has no id")
        expr_id = date_expression.loggable_id

    op = date_expression.get("operation")
    operation = op.lower() if op is not None else None
    rc = ResultCode.UNDETERMINED

    if operation == DateOperation.IN_RANGE:
        rc = evaluate_in_range(date_expression, expr_id, now, next_change, default_tz)

    elif operation == DateOperation.DATE_SPEC:
        date_spec = date_expression.first_child(TAG_DATE_SPEC)
        if date_spec is None:
            logger.warning(
                "Treating date_expression %s as not passing because date_spec "
                "operations require a date_spec subelement",
                expr_id,
            )
        else:
            # TODO: compute the next transition of the date_spec for next_change
            rc = evaluate_date_spec(date_spec, now)

    elif operation == DateOperation.GT:
        rc = evaluate_gt(date_expression, expr_id, now, next_change, default_tz)

    elif operation == DateOperation.LT:
        rc = evaluate_lt(date_expression, expr_id, now, next_change, default_tz)

    else:
        logger.warning(
            "Treating date_expression %s as not passing because '%s' is not a valid operation",
            expr_id,
            op,
        )

    logger.debug("date_expression %s (%s): %s", expr_id, op, rc)
    return rc
