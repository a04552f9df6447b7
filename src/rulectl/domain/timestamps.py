"""Points in time, calendar arithmetic, and the next-change watermark.

Timestamps are timezone-aware ``datetime`` values. Text is parsed as
ISO 8601 (calendar, ordinal, or ISO week dates, with ``T`` or space
between date and time); a value without a UTC offset is pinned to the
caller's default timezone and then frozen to the UTC offset in effect at that
instant, so comparisons and arithmetic work on elapsed time.

INVARIANT: ``NextChange`` only ever moves earlier once it holds a value.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone, tzinfo
from enum import StrEnum

from dateutil.parser import isoparse
from dateutil.relativedelta import relativedelta

from rulectl.domain.expressions import ExpressionNode


class TimeComponent(StrEnum):
    """Duration components, in the order they are applied."""

    YEARS = "years"
    MONTHS = "months"
    WEEKS = "weeks"
    DAYS = "days"
    HOURS = "hours"
    MINUTES = "minutes"
    SECONDS = "seconds"


def ensure_aware(value: datetime, default_tz: tzinfo = UTC) -> datetime:
    """Return *value* with a fixed UTC offset.

    A naive value is first read as wall-clock time in *default_tz*. The
    offset in effect at that instant is then frozen, so later arithmetic
    adds elapsed time rather than wall-clock time across DST changes.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=default_tz)
    if isinstance(value.tzinfo, timezone):
        return value
    # Same wall clock, same offset: only the zone rules are dropped
    return value.replace(tzinfo=timezone(value.utcoffset()), fold=0)


def parse_datetime(text: str, default_tz: tzinfo = UTC) -> datetime:
    """Parse ISO 8601 *text* into an aware datetime.

    Raises:
        ValueError: If *text* is not a recognizable ISO 8601 date/time.
    """
    stripped = text.strip()
    if not stripped:
        msg = "empty date/time"
        raise ValueError(msg)
    try:
        parsed = isoparse(stripped)
    except (ValueError, OverflowError) as exc:
        msg = f"invalid date/time '{text}': {exc}"
        raise ValueError(msg) from exc
    return ensure_aware(parsed, default_tz)


def get_datetime(node: ExpressionNode, attr: str, default_tz: tzinfo = UTC) -> datetime | None:
    """Read attribute *attr* of *node* as a timestamp.

    Returns None when the attribute is absent.

    Raises:
        ValueError: If the attribute is present but unparsable.
    """
    text = node.get(attr)
    if text is None:
        return None
    return parse_datetime(text, default_tz)


def add_seconds(value: datetime, seconds: int) -> datetime:
    """Return *value* shifted by a signed number of seconds."""
    return value + timedelta(seconds=seconds)


def add_component(value: datetime, component: TimeComponent, amount: int) -> datetime:
    """Add *amount* of one calendar *component* to *value*.

    Month and year additions clamp the day to the end of the target
    month (Jan 31 + 1 month is Feb 28/29).

    Raises:
        OverflowError: If the result falls outside the representable range.
    """
    if amount == 0:
        return value
    try:
        return value + relativedelta(**{str(component): amount})
    except ValueError as exc:
        # relativedelta reports out-of-range years as ValueError
        raise OverflowError(str(exc)) from exc


def format_datetime(value: datetime | None) -> str | None:
    """ISO 8601 text for *value* (None passes through)."""
    return value.isoformat() if value is not None else None


class NextChange:
    """Earliest known instant at which an evaluation result could flip.

    Owned by the caller and shared across every sub-expression evaluated
    for one decision. ``value`` is None until some evaluator can name a
    future transition.
    """

    __slots__ = ("value",)

    def __init__(self, value: datetime | None = None) -> None:
        self.value = value

    def set_if_earlier(self, candidate: datetime | None) -> None:
        """Adopt *candidate* if the watermark is unset or *candidate* is earlier."""
        if candidate is None:
            return
        if self.value is None or candidate < self.value:
            self.value = candidate

    def __repr__(self) -> str:
        return f"NextChange({format_datetime(self.value)!r})"
