"""End time of a ``duration`` element added to a start time.

Each component (years, months, weeks, days, hours, minutes, seconds) is
applied on its own. An invalid component is logged and skipped while the
others still apply, so the caller always gets a best-effort end time.
"""

from __future__ import annotations

import logging
from datetime import datetime

from rulectl.domain.expressions import ExpressionNode
from rulectl.domain.numbers import INT32_MAX, INT32_MIN, scan_ll
from rulectl.domain.timestamps import TimeComponent, add_component
from rulectl.domain.types import ResultCode

logger = logging.getLogger(__name__)


def _component_value(duration: ExpressionNode, component: TimeComponent) -> int:
    """Read one component; absent means 0.

    Raises:
        ValueError: Unparsable text.
        OverflowError: Value outside signed 32 bits.
    """
    text = duration.get(str(component))
    if text is None:
        return 0
    value, _rest = scan_ll(text)
    if not INT32_MIN <= value <= INT32_MAX:
        msg = f"{component} value {value} is out of range"
        raise OverflowError(msg)
    return value


def unpack_duration(
    duration: ExpressionNode | None,
    start: datetime | None,
) -> tuple[ResultCode, datetime | None]:
    """Calculate the end time of *duration* starting at *start*.

    Returns ``(rc, end)``. *rc* is ``OK`` when every component applied,
    otherwise the code of the first component that failed (``UNPACK_ERROR``
    or ``OUT_OF_RANGE``); *end* still carries every valid component.
    Missing inputs give ``(INVALID_ARGUMENT, None)``.
    """
    if duration is None or start is None:
        return ResultCode.INVALID_ARGUMENT, None

    duration_id = duration.id
    if duration_id is None:
        logger.warning("duration subelement of date_expression has no id")
        duration_id = duration.loggable_id

    rc = ResultCode.OK
    end = start
    for component in TimeComponent:
        try:
            end = add_component(end, component, _component_value(duration, component))
        except ValueError:
            sub_rc = ResultCode.UNPACK_ERROR
        except OverflowError:
            sub_rc = ResultCode.OUT_OF_RANGE
        else:
            continue
        logger.warning(
            "Ignoring %s in duration %s because it is invalid", component, duration_id
        )
        if rc is ResultCode.OK:
            rc = sub_rc
    return rc, end
