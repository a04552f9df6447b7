"""Tests for EvaluateService — evaluate, compare, expand."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from rulectl.config.settings import RuleSettings
from rulectl.domain.expressions import ExpressionNode
from rulectl.services.evaluate import EvaluateService, parse_agent_spec, parse_op_spec
from tests.conftest import node, utc


def january_rule() -> ExpressionNode:
    return node(
        "rule",
        node(
            "date_expression",
            id="january",
            operation="in_range",
            start="2024-01-01",
            end="2024-01-31",
        ),
        id="r1",
    )


def write_tree(path: Path, tree: ExpressionNode) -> Path:
    path.write_text(tree.model_dump_json(), encoding="utf-8")
    return path


class TestParseSpecs:
    def test_agent_three_parts(self) -> None:
        assert parse_agent_spec("ocf:heartbeat:IPaddr2") == ("ocf", "heartbeat", "IPaddr2")

    def test_agent_two_parts(self) -> None:
        assert parse_agent_spec("systemd:httpd") == ("systemd", None, "httpd")

    @pytest.mark.parametrize("spec", ["ocf", "ocf::IPaddr2", "a:b:c:d", ""])
    def test_agent_malformed(self, spec: str) -> None:
        with pytest.raises(ValueError, match="CLASS:PROVIDER:TYPE"):
            parse_agent_spec(spec)

    def test_op_without_interval(self) -> None:
        assert parse_op_spec("start") == ("start", 0)

    def test_op_with_interval(self) -> None:
        assert parse_op_spec("monitor:10s") == ("monitor", 10_000)

    def test_op_bad_interval(self) -> None:
        with pytest.raises(ValueError, match="not a valid interval"):
            parse_op_spec("monitor:often")

    def test_op_missing_name(self) -> None:
        with pytest.raises(ValueError, match="NAME"):
            parse_op_spec(":10s")


class TestEvaluate:
    def test_rule_passes(self, service: EvaluateService) -> None:
        result = service.evaluate(january_rule(), now="2024-01-15T12:00:00")
        assert result.ok
        assert result.data == {
            "id": "r1",
            "type": "rule",
            "result": "ok",
            "passed": True,
            "next_change": "2024-01-31T00:00:01+00:00",
        }
        assert result.meta == {"now": "2024-01-15T12:00:00+00:00", "timezone": "UTC"}

    def test_date_expression_directly(self, service: EvaluateService) -> None:
        expr = january_rule().children[0]
        result = service.evaluate(expr, now=utc(2024, 2, 5))
        assert result.ok
        assert result.data["type"] == "datetime"
        assert result.data["result"] == "after_range"
        assert result.data["passed"] is False
        assert result.data["next_change"] is None

    def test_invalid_now(self, service: EvaluateService) -> None:
        result = service.evaluate(january_rule(), now="next tuesday")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "INVALID_NOW"

    def test_default_now_is_current_time(self, service: EvaluateService) -> None:
        result = service.evaluate(node("rule", id="empty"))
        assert result.ok
        assert result.data["passed"] is True
        assert result.meta is not None
        assert result.meta["now"].endswith("+00:00")

    def test_node_attributes(self, service: EvaluateService) -> None:
        tree = node(
            "rule",
            node("expression", id="e1", attribute="#uname", operation="eq", value="node1"),
            id="loc",
        )
        passing = service.evaluate(tree, now=utc(2024, 1, 1), node_attrs={"#uname": "node1"})
        failing = service.evaluate(tree, now=utc(2024, 1, 1), node_attrs={"#uname": "node2"})
        assert passing.data["passed"] is True
        assert failing.data["result"] == "op_unsatisfied"

    def test_resource_and_operation(self, service: EvaluateService) -> None:
        tree = node(
            "rule",
            node("rsc_expression", **{"class": "ocf", "type": "IPaddr2"}),
            node("op_expression", name="monitor", interval="10s"),
        )
        result = service.evaluate(
            tree,
            now=utc(2024, 1, 1),
            rsc="ocf:heartbeat:IPaddr2",
            operation="monitor:10000ms",
        )
        assert result.ok
        assert result.data["passed"] is True
        assert result.data["id"] == "without ID"

    def test_bad_resource_spec(self, service: EvaluateService) -> None:
        result = service.evaluate(january_rule(), now=utc(2024, 1, 1), rsc="IPaddr2")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "INVALID_INPUT"

    def test_configured_timezone(self, tmp_path: Path) -> None:
        (tmp_path / "rulectl.toml").write_text('[evaluation]\ntimezone = "Europe/Berlin"\n')
        service = EvaluateService(RuleSettings.from_cli(start=tmp_path))
        # Naive end and naive now are both read as Berlin time
        result = service.evaluate(january_rule(), now="2024-01-30T23:30:00")
        assert result.data["result"] == "ok"
        assert result.data["next_change"] == "2024-01-31T00:00:01+01:00"
        assert result.meta == {"now": "2024-01-30T23:30:00+01:00", "timezone": "Europe/Berlin"}

    def test_hide_next_change(self, tmp_path: Path) -> None:
        (tmp_path / "rulectl.toml").write_text("[output]\nshow_next_change = false\n")
        service = EvaluateService(RuleSettings.from_cli(start=tmp_path))
        result = service.evaluate(january_rule(), now="2024-01-15")
        assert "next_change" not in result.data


class TestEvaluateFile:
    def test_round_trip(self, service: EvaluateService, tmp_path: Path) -> None:
        path = write_tree(tmp_path / "rule.json", january_rule())
        result = service.evaluate_file(path, now="2024-01-15")
        assert result.ok
        assert result.data["passed"] is True

    def test_hand_written_json(self, service: EvaluateService, tmp_path: Path) -> None:
        path = tmp_path / "rule.json"
        path.write_text(
            json.dumps(
                {
                    "tag": "date_expression",
                    "attrs": {"id": "d1", "operation": "gt", "start": "2024-06-01"},
                }
            )
        )
        result = service.evaluate_file(path, now="2024-05-01")
        assert result.data["result"] == "before_range"
        assert result.data["next_change"] == "2024-06-01T00:00:01+00:00"

    def test_missing_file(self, service: EvaluateService, tmp_path: Path) -> None:
        result = service.evaluate_file(tmp_path / "nope.json")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "INVALID_INPUT"
        assert "Cannot read" in result.error.message

    def test_not_a_tree(self, service: EvaluateService, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text('{"attrs": []}')
        result = service.evaluate_file(path)
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "INVALID_INPUT"
        assert result.error.detail["errors"] >= 1


class TestCompare:
    def test_default_is_equality(self, service: EvaluateService) -> None:
        result = service.compare("abc", "ABC")
        assert result.ok
        assert result.data == {"left": "abc", "right": "ABC", "type": "string", "cmp": 0}

    def test_inferred_integer(self, service: EvaluateService) -> None:
        result = service.compare("8", "10", operation="gt")
        assert result.data["type"] == "integer"
        assert result.data["cmp"] == -1
        assert result.data["operation"] == "gt"
        assert result.data["holds"] is False

    def test_inferred_number(self, service: EvaluateService) -> None:
        result = service.compare("2.5", "10", operation="lt")
        assert result.data["type"] == "number"
        assert result.data["holds"] is True

    def test_explicit_version(self, service: EvaluateService) -> None:
        result = service.compare("1.10", "1.9", type_name="version")
        assert result.data["type"] == "version"
        assert result.data["cmp"] == 1

    def test_unknown_type_warns(self, service: EvaluateService) -> None:
        result = service.compare("a", "b", type_name="colour")
        assert result.ok
        assert result.data["type"] == "unknown"
        assert result.data["cmp"] == 0
        assert result.warnings == ["Unknown type 'colour'; values compare as equal"]

    def test_missing_value(self, service: EvaluateService) -> None:
        result = service.compare(None, "5", operation="lt")
        assert result.data["cmp"] == -1
        assert result.data["holds"] is False

    def test_invalid_operation(self, service: EvaluateService) -> None:
        result = service.compare("1", "2", operation="approx")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "INVALID_INPUT"


class TestExpand:
    def test_expands(self, service: EvaluateService) -> None:
        result = service.expand("%1-%2", r"(abc)|(xyz)", "abc")
        assert result.ok
        assert result.data == {
            "expanded": True,
            "result": "abc-",
            "groups": ["abc", "abc", None],
        }

    def test_no_placeholders_keeps_template(self, service: EvaluateService) -> None:
        result = service.expand("plain", r"a", "a")
        assert result.data["expanded"] is False
        assert result.data["result"] == "plain"

    def test_invalid_pattern(self, service: EvaluateService) -> None:
        result = service.expand("%1", "(", "x")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "INVALID_PATTERN"

    def test_no_match(self, service: EvaluateService) -> None:
        result = service.expand("%1", r"(\d+)", "abc")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "NO_MATCH"
