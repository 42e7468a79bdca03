from .ast import (
    ID_FIELD,
    FieldConstraint,
    FilterNode,
    Predicate,
    and_,
    combine,
    from_dict,
    or_,
)
from .evaluator import (
    MemoryOperator,
    MemoryOperatorRegistry,
    SpecificationEvaluator,
    build_default_registry,
)
from .exceptions import OperatorNotFoundError, SpecificationError
from .operators import LIST_OPERATORS, LOGICAL_OPERATORS, FilterOperator

__all__ = [
    # Core types
    "FilterOperator",
    "FieldConstraint",
    "FilterNode",
    "Predicate",
    "ID_FIELD",
    "LIST_OPERATORS",
    "LOGICAL_OPERATORS",
    # Builders
    "and_",
    "or_",
    "combine",
    "from_dict",
    # Evaluator / strategy
    "MemoryOperator",
    "MemoryOperatorRegistry",
    "SpecificationEvaluator",
    "build_default_registry",
    # Exceptions
    "SpecificationError",
    "OperatorNotFoundError",
]
