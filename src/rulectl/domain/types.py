"""Result codes and classification enums shared by the evaluators."""

from __future__ import annotations

from enum import StrEnum


class ResultCode(StrEnum):
    """Outcome of evaluating a (sub-)expression."""

    OK = "ok"
    WITHIN_RANGE = "within_range"
    BEFORE_RANGE = "before_range"
    AFTER_RANGE = "after_range"
    UNDETERMINED = "undetermined"
    INVALID_ARGUMENT = "invalid_argument"
    UNPACK_ERROR = "unpack_error"
    OUT_OF_RANGE = "out_of_range"
    OP_UNSATISFIED = "op_unsatisfied"


PASSING_CODES: frozenset[ResultCode] = frozenset({ResultCode.OK, ResultCode.WITHIN_RANGE})


def passes(rc: ResultCode) -> bool:
    """Whether *rc* means the expression currently applies."""
    return rc in PASSING_CODES


class ExpressionType(StrEnum):
    """Sub-expression kinds a rule may contain."""

    DATETIME = "datetime"
    RESOURCE = "resource"
    OPERATION = "operation"
    RULE = "rule"
    LOCATION = "location"
    ATTRIBUTE = "attribute"
    UNKNOWN = "unknown"


class DateOperation(StrEnum):
    """Operations accepted by a date expression."""

    IN_RANGE = "in_range"
    DATE_SPEC = "date_spec"
    GT = "gt"
    LT = "lt"


class Comparison(StrEnum):
    """Operators accepted by attribute expressions."""

    DEFINED = "defined"
    NOT_DEFINED = "not_defined"
    EQ = "eq"
    NE = "ne"
    LT = "lt"
    LTE = "lte"
    GT = "gt"
    GTE = "gte"
    UNKNOWN = "unknown"


ORDERING_COMPARISONS: frozenset[Comparison] = frozenset(
    {Comparison.LT, Comparison.LTE, Comparison.GT, Comparison.GTE}
)


class ValueType(StrEnum):
    """How the two sides of an attribute comparison are interpreted."""

    STRING = "string"
    INTEGER = "integer"
    NUMBER = "number"
    VERSION = "version"
    UNKNOWN = "unknown"


class BoolOperator(StrEnum):
    """How a rule combines its sub-expressions."""

    AND = "and"
    OR = "or"
