"""EvaluateService — rule evaluation, typed comparison, submatch expansion.

Wraps the pure domain evaluators for the CLI: resolves the evaluation
instant and timezone from settings, validates user input, and reports
each outcome as a :class:`ServiceResult`.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from rulectl.domain.comparison import (
    comparison_holds,
    compare_by_type,
    parse_comparison,
    parse_type,
)
from rulectl.domain.expressions import ExpressionNode, expression_type
from rulectl.domain.rules import RuleInput, evaluate_expression, parse_interval_ms
from rulectl.domain.submatches import expand_match
from rulectl.domain.timestamps import NextChange, format_datetime
from rulectl.domain.types import Comparison, ResultCode, ValueType, passes
from rulectl.services.base import BaseService
from rulectl.services.result import ServiceResult

logger = logging.getLogger(__name__)


def parse_agent_spec(spec: str) -> tuple[str, str | None, str]:
    """Split ``class:provider:type`` (or ``class:type``) into its parts.

    Raises:
        ValueError: If *spec* does not have two or three non-empty parts.

    Examples:
        >>> parse_agent_spec("ocf:heartbeat:IPaddr2")
        ('ocf', 'heartbeat', 'IPaddr2')
        >>> parse_agent_spec("systemd:httpd")
        ('systemd', None, 'httpd')
    """
    parts = spec.split(":")
    if len(parts) == 2 and all(parts):
        return parts[0], None, parts[1]
    if len(parts) == 3 and all(parts):
        return parts[0], parts[1], parts[2]
    msg = f"expected CLASS:PROVIDER:TYPE or CLASS:TYPE, got '{spec}'"
    raise ValueError(msg)


def parse_op_spec(spec: str) -> tuple[str, int]:
    """Split ``NAME[:INTERVAL]`` into the name and interval in milliseconds.

    Raises:
        ValueError: If the name is empty or the interval does not parse.
    """
    name, _, interval_text = spec.partition(":")
    if not name:
        msg = f"expected NAME[:INTERVAL], got '{spec}'"
        raise ValueError(msg)
    if not interval_text:
        return name, 0
    interval_ms = parse_interval_ms(interval_text)
    if interval_ms is None:
        msg = f"'{interval_text}' is not a valid interval"
        raise ValueError(msg)
    return name, interval_ms


class EvaluateService(BaseService):
    """Evaluate rule expressions and their building blocks."""

    def load_expression(self, path: Path) -> ExpressionNode:
        """Read an expression tree from a JSON file.

        Raises:
            OSError: If the file cannot be read.
            pydantic.ValidationError: If the JSON is not an expression tree.
        """
        return ExpressionNode.model_validate_json(path.read_text(encoding="utf-8"))

    def evaluate_file(self, path: Path, **kwargs: Any) -> ServiceResult:
        """Load *path* and evaluate it; see :meth:`evaluate`."""
        op = "evaluate"
        try:
            node = self.load_expression(path)
        except OSError as exc:
            return ServiceResult.failure(
                op, "INVALID_INPUT", f"Cannot read {path}: {exc}", path=str(path)
            )
        except ValidationError as exc:
            return ServiceResult.failure(
                op,
                "INVALID_INPUT",
                f"{path} is not a valid expression tree",
                path=str(path),
                errors=exc.error_count(),
            )
        return self.evaluate(node, **kwargs)

    def evaluate(
        self,
        node: ExpressionNode,
        *,
        now: str | datetime | None = None,
        node_attrs: dict[str, str] | None = None,
        rsc: str | None = None,
        operation: str | None = None,
    ) -> ServiceResult:
        """Evaluate a rule or any single sub-expression.

        Args:
            node: Root of the expression tree.
            now: Evaluation instant (ISO 8601 text or datetime); current
                time when omitted.
            node_attrs: Node attribute values for attribute expressions.
            rsc: Resource agent as ``class:provider:type``.
            operation: Operation as ``name[:interval]``.
        """
        op = "evaluate"
        try:
            instant = self._resolve_now(now)
        except ValueError as exc:
            return ServiceResult.failure(op, "INVALID_NOW", str(exc), now=str(now))

        rsc_standard = rsc_provider = rsc_agent = None
        op_name = None
        op_interval_ms = None
        try:
            if rsc is not None:
                rsc_standard, rsc_provider, rsc_agent = parse_agent_spec(rsc)
            if operation is not None:
                op_name, op_interval_ms = parse_op_spec(operation)
        except ValueError as exc:
            return ServiceResult.failure(op, "INVALID_INPUT", str(exc))

        rule_input = RuleInput(
            now=instant,
            node_attrs=node_attrs or {},
            rsc_standard=rsc_standard,
            rsc_provider=rsc_provider,
            rsc_agent=rsc_agent,
            op_name=op_name,
            op_interval_ms=op_interval_ms,
        )
        next_change = NextChange()
        rc = evaluate_expression(node, rule_input, next_change, default_tz=self.default_tz)
        if rc is ResultCode.INVALID_ARGUMENT:
            return ServiceResult.failure(op, "INVALID_INPUT", "Expression could not be evaluated")

        data: dict[str, object] = {
            "id": node.loggable_id,
            "type": str(expression_type(node)),
            "result": str(rc),
            "passed": passes(rc),
        }
        if self._settings.output.show_next_change:
            data["next_change"] = format_datetime(next_change.value)
        return ServiceResult(
            ok=True,
            op=op,
            data=data,
            meta={"now": instant.isoformat(), "timezone": self._settings.evaluation.timezone},
        )

    def compare(
        self,
        left: str | None,
        right: str | None,
        *,
        operation: str | None = None,
        type_name: str | None = None,
    ) -> ServiceResult:
        """Compare two raw values, and check *operation* if one is given."""
        op = "compare"
        comparison = parse_comparison(operation) if operation is not None else Comparison.EQ
        if comparison is Comparison.UNKNOWN:
            return ServiceResult.failure(
                op, "INVALID_INPUT", f"'{operation}' is not a valid comparison"
            )

        value_type = parse_type(type_name, comparison, left, right)
        data: dict[str, object] = {
            "left": left,
            "right": right,
            "type": str(value_type),
            "cmp": compare_by_type(left, right, value_type),
        }
        warnings: list[str] = []
        if type_name is not None and value_type is ValueType.UNKNOWN:
            warnings.append(f"Unknown type '{type_name}'; values compare as equal")
        if operation is not None:
            data["operation"] = str(comparison)
            data["holds"] = comparison_holds(comparison, left, right, value_type)
        return ServiceResult(ok=True, op=op, data=data, warnings=warnings)

    def expand(self, template: str, pattern: str, text: str) -> ServiceResult:
        """Match *pattern* against *text* and expand ``%N`` in *template*."""
        op = "expand"
        try:
            regex = re.compile(pattern)
        except re.error as exc:
            return ServiceResult.failure(
                op, "INVALID_PATTERN", f"Invalid pattern: {exc}", pattern=pattern
            )

        m = regex.search(text)
        if m is None:
            return ServiceResult.failure(
                op, "NO_MATCH", f"'{pattern}' does not match '{text}'", pattern=pattern
            )

        expansion = expand_match(template, m)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "expanded": expansion is not None,
                "result": expansion if expansion is not None else template,
                "groups": [m.group(i) for i in range(m.re.groups + 1)],
            },
        )
