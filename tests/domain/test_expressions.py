"""Tests for expression nodes and expression-type classification."""

import pytest

from rulectl.domain.expressions import ExpressionNode, expression_type
from rulectl.domain.types import ExpressionType
from tests.conftest import node


class TestExpressionNode:
    def test_get_attribute(self) -> None:
        n = node("date_expression", id="d1", operation="gt")
        assert n.get("operation") == "gt"
        assert n.get("missing") is None

    def test_id_and_loggable_id(self) -> None:
        assert node("rule", id="r1").loggable_id == "r1"
        assert node("rule").id is None
        assert node("rule").loggable_id == "without ID"

    def test_empty_id_is_missing(self) -> None:
        assert node("rule", id="").id is None

    def test_first_child(self) -> None:
        spec = node("date_spec", id="s1")
        expr = node("date_expression", node("duration", id="x"), spec, node("date_spec", id="s2"))
        assert expr.first_child("date_spec") is spec
        assert expr.first_child("rule") is None

    def test_loads_from_json(self) -> None:
        raw = """
        {"tag": "rule", "attrs": {"id": "r1"},
         "children": [{"tag": "date_expression",
                       "attrs": {"id": "d1", "operation": "gt", "start": "2024-01-01"}}]}
        """
        parsed = ExpressionNode.model_validate_json(raw)
        assert parsed.tag == "rule"
        assert parsed.children[0].get("start") == "2024-01-01"

    def test_frozen(self) -> None:
        n = node("rule")
        with pytest.raises(Exception):
            n.tag = "other"  # type: ignore[misc]


class TestExpressionType:
    @pytest.mark.parametrize(
        "tag,expected",
        [
            ("date_expression", ExpressionType.DATETIME),
            ("rsc_expression", ExpressionType.RESOURCE),
            ("op_expression", ExpressionType.OPERATION),
            ("rule", ExpressionType.RULE),
            ("date_spec", ExpressionType.UNKNOWN),
            ("nvpair", ExpressionType.UNKNOWN),
        ],
    )
    def test_by_tag(self, tag: str, expected: ExpressionType) -> None:
        assert expression_type(node(tag)) is expected

    @pytest.mark.parametrize("attribute", ["#uname", "#kind", "#id"])
    def test_reserved_attributes_are_location(self, attribute: str) -> None:
        assert expression_type(node("expression", attribute=attribute)) is ExpressionType.LOCATION

    def test_other_attribute(self) -> None:
        assert expression_type(node("expression", attribute="rack")) is ExpressionType.ATTRIBUTE

    def test_expression_without_attribute(self) -> None:
        assert expression_type(node("expression")) is ExpressionType.ATTRIBUTE
