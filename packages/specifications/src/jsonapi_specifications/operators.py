from enum import Enum


class FilterOperator(str, Enum):
    """Operator names understood by the filter grammar and the built-in adapters."""

    # Standard comparison
    EQ = "eq"
    NEQ = "neq"
    NE = "ne"
    GT = "gt"
    LT = "lt"
    GTE = "gte"
    LTE = "lte"
    IN = "in"
    NIN = "nin"

    # Logical operators
    AND = "and"
    OR = "or"


LOGICAL_OPERATORS: frozenset[str] = frozenset(
    {FilterOperator.AND.value, FilterOperator.OR.value}
)
LIST_OPERATORS: frozenset[str] = frozenset(
    {FilterOperator.IN.value, FilterOperator.NIN.value}
)
