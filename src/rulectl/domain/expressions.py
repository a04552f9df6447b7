"""Expression tree nodes handed over by the configuration layer.

A node mirrors one configuration element: a tag, its string attributes,
and nested child elements. Parsing and schema validation happen upstream;
the evaluators only read from these frozen models.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from rulectl.domain.types import ExpressionType

# --- Element tags ---

TAG_RULE = "rule"
TAG_EXPRESSION = "expression"
TAG_DATE_EXPRESSION = "date_expression"
TAG_DATE_SPEC = "date_spec"
TAG_DURATION = "duration"
TAG_RSC_EXPRESSION = "rsc_expression"
TAG_OP_EXPRESSION = "op_expression"

# --- Reserved node attribute names (location expressions) ---

ATTR_UNAME = "#uname"
ATTR_KIND = "#kind"
ATTR_ID = "#id"
LOCATION_ATTRIBUTES = frozenset({ATTR_UNAME, ATTR_KIND, ATTR_ID})

MISSING_ID = "without ID"

_TAG_TYPES: dict[str, ExpressionType] = {
    TAG_DATE_EXPRESSION: ExpressionType.DATETIME,
    TAG_RSC_EXPRESSION: ExpressionType.RESOURCE,
    TAG_OP_EXPRESSION: ExpressionType.OPERATION,
    TAG_RULE: ExpressionType.RULE,
}


class ExpressionNode(BaseModel):
    """One element of a rule expression tree."""

    model_config = {"frozen": True}

    tag: str
    attrs: dict[str, str] = Field(default_factory=dict)
    children: list[ExpressionNode] = Field(default_factory=list)

    def get(self, name: str) -> str | None:
        """Return attribute *name*, or None when absent."""
        return self.attrs.get(name)

    @property
    def id(self) -> str | None:
        return self.attrs.get("id") or None

    @property
    def loggable_id(self) -> str:
        """Element ID for diagnostics (never empty)."""
        return self.id or MISSING_ID

    def first_child(self, tag: str) -> ExpressionNode | None:
        """Return the first child element with *tag*, if any."""
        for child in self.children:
            if child.tag == tag:
                return child
        return None


def expression_type(node: ExpressionNode) -> ExpressionType:
    """Classify *node* by its tag and, for plain expressions, its attribute.

    Plain ``expression`` elements testing one of the reserved node
    attributes (``#uname``, ``#kind``, ``#id``) are location expressions;
    any other attribute makes them generic attribute expressions.
    """
    kind = _TAG_TYPES.get(node.tag)
    if kind is not None:
        return kind
    if node.tag != TAG_EXPRESSION:
        return ExpressionType.UNKNOWN
    if node.get("attribute") in LOCATION_ATTRIBUTES:
        return ExpressionType.LOCATION
    return ExpressionType.ATTRIBUTE
