"""Rule evaluation over a tree of sub-expressions.

A ``rule`` combines its children with ``boolean-op`` (``and`` by default,
or ``or``). Children may be date expressions, node attribute expressions,
resource and operation expressions, or nested rules.
"""

from __future__ import annotations

import logging
import re
from datetime import UTC, datetime, tzinfo

from pydantic import BaseModel, Field

from rulectl.domain.comparison import comparison_holds, parse_comparison, parse_type
from rulectl.domain.dates import evaluate_date_expression
from rulectl.domain.expressions import ExpressionNode, expression_type
from rulectl.domain.timestamps import NextChange
from rulectl.domain.types import (
    BoolOperator,
    Comparison,
    ExpressionType,
    ResultCode,
    passes,
)

logger = logging.getLogger(__name__)

_INTERVAL_RE = re.compile(r"^\s*(\d+)\s*([a-z]*)\s*$", re.ASCII | re.IGNORECASE)

_INTERVAL_UNITS_MS: dict[str, int] = {
    "": 1000,
    "ms": 1,
    "msec": 1,
    "s": 1000,
    "sec": 1000,
    "m": 60_000,
    "min": 60_000,
    "h": 3_600_000,
    "hr": 3_600_000,
}


class RuleInput(BaseModel):
    """Everything a rule may be evaluated against."""

    model_config = {"frozen": True}

    now: datetime
    node_attrs: dict[str, str] = Field(default_factory=dict)
    rsc_standard: str | None = None
    rsc_provider: str | None = None
    rsc_agent: str | None = None
    op_name: str | None = None
    op_interval_ms: int | None = None


def parse_interval_ms(text: str | None) -> int | None:
    """Parse an operation interval (``"10s"``, ``"500ms"``, ``"1m"``, ``"2h"``).

    A bare number is seconds. Returns milliseconds, or None if unparsable.
    """
    if text is None:
        return None
    m = _INTERVAL_RE.match(text)
    if m is None:
        return None
    factor = _INTERVAL_UNITS_MS.get(m.group(2).lower())
    if factor is None:
        return None
    return int(m.group(1)) * factor


def _result(passed: bool) -> ResultCode:
    return ResultCode.OK if passed else ResultCode.OP_UNSATISFIED


def evaluate_attr_expression(expression: ExpressionNode, rule_input: RuleInput) -> ResultCode:
    """Evaluate a node attribute (or location) expression."""
    expr_id = expression.loggable_id
    name = expression.get("attribute")
    if name is None:
        logger.warning(
            "Treating expression %s as not passing because it has no attribute", expr_id
        )
        return ResultCode.UNDETERMINED

    op_text = expression.get("operation")
    op = parse_comparison(op_text)
    if op is Comparison.UNKNOWN:
        logger.warning(
            "Treating expression %s as not passing because '%s' is not a valid operation",
            expr_id,
            op_text,
        )
        return ResultCode.UNDETERMINED

    actual = rule_input.node_attrs.get(name)
    expected = expression.get("value")
    value_type = parse_type(expression.get("type"), op, actual, expected)
    passed = comparison_holds(op, actual, expected, value_type)
    logger.debug(
        "expression %s: %s %s %s as %s: %s", expr_id, actual, op, expected, value_type, passed
    )
    return _result(passed)


def evaluate_rsc_expression(expression: ExpressionNode, rule_input: RuleInput) -> ResultCode:
    """Evaluate a resource expression against the input's resource agent."""
    checks = (
        ("class", rule_input.rsc_standard),
        ("provider", rule_input.rsc_provider),
        ("type", rule_input.rsc_agent),
    )
    for attr, actual in checks:
        wanted = expression.get(attr)
        if wanted is not None and wanted != actual:
            return ResultCode.OP_UNSATISFIED
    return ResultCode.OK


def evaluate_op_expression(expression: ExpressionNode, rule_input: RuleInput) -> ResultCode:
    """Evaluate an operation expression against the input's operation."""
    expr_id = expression.loggable_id
    name = expression.get("name")
    if name is None:
        logger.warning("Treating op_expression %s as not passing because it has no name", expr_id)
        return ResultCode.UNDETERMINED
    if name != rule_input.op_name:
        return ResultCode.OP_UNSATISFIED

    interval_text = expression.get("interval")
    if interval_text is None:
        return ResultCode.OK
    interval_ms = parse_interval_ms(interval_text)
    if interval_ms is None:
        logger.warning(
            "Treating op_expression %s as not passing because '%s' is not a valid interval",
            expr_id,
            interval_text,
        )
        return ResultCode.UNDETERMINED
    return _result(interval_ms == (rule_input.op_interval_ms or 0))


def evaluate_expression(
    expression: ExpressionNode,
    rule_input: RuleInput,
    next_change: NextChange | None = None,
    *,
    default_tz: tzinfo = UTC,
) -> ResultCode:
    """Evaluate any single sub-expression by its type."""
    kind = expression_type(expression)
    if kind is ExpressionType.DATETIME:
        return evaluate_date_expression(
            expression, rule_input.now, next_change, default_tz=default_tz
        )
    if kind is ExpressionType.RULE:
        return evaluate_rule(expression, rule_input, next_change, default_tz=default_tz)
    if kind in (ExpressionType.ATTRIBUTE, ExpressionType.LOCATION):
        return evaluate_attr_expression(expression, rule_input)
    if kind is ExpressionType.RESOURCE:
        return evaluate_rsc_expression(expression, rule_input)
    if kind is ExpressionType.OPERATION:
        return evaluate_op_expression(expression, rule_input)

    logger.warning(
        "Treating %s element %s as not passing because it is not a known expression type",
        expression.tag,
        expression.loggable_id,
    )
    return ResultCode.UNDETERMINED


def evaluate_rule(
    rule: ExpressionNode | None,
    rule_input: RuleInput | None,
    next_change: NextChange | None = None,
    *,
    default_tz: tzinfo = UTC,
) -> ResultCode:
    """Evaluate a ``rule`` element.

    Returns ``OK`` when the rule passes, ``OP_UNSATISFIED`` when it does
    not, and ``INVALID_ARGUMENT`` for missing inputs. A rule without
    sub-expressions passes.
    """
    if rule is None or rule_input is None:
        return ResultCode.INVALID_ARGUMENT

    rule_id = rule.loggable_id
    op_text = rule.get("boolean-op")
    try:
        bool_op = BoolOperator(op_text.lower()) if op_text is not None else BoolOperator.AND
    except ValueError:
        logger.warning(
            "Treating rule %s as not passing because '%s' is not a valid boolean-op",
            rule_id,
            op_text,
        )
        return ResultCode.OP_UNSATISFIED

    passed = bool_op is BoolOperator.AND
    for child in rule.children:
        child_passed = passes(
            evaluate_expression(child, rule_input, next_change, default_tz=default_tz)
        )
        if bool_op is BoolOperator.AND and not child_passed:
            passed = False
            break
        if bool_op is BoolOperator.OR and child_passed:
            passed = True
            break
    else:
        if not rule.children:
            passed = True

    logger.debug("rule %s (%s) %s", rule_id, bool_op, "passed" if passed else "failed")
    return _result(passed)
