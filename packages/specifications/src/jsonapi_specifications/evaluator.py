"""
In-memory operator evaluation strategy.

Provides the MemoryOperator protocol, a registry that maps
FilterOperator → evaluation function, and an evaluator that walks a
Predicate / FieldConstraint tree against a resource.

New operators are added by subclassing MemoryOperator and
registering via ``register()``.
"""

from __future__ import annotations

import operator
from abc import ABC, abstractmethod
from typing import Any

from jsonapi_core.resources import Resource

from .ast import ID_FIELD, FieldConstraint, Predicate
from .operators import FilterOperator


class MemoryOperator(ABC):
    """
    Strategy interface for in-memory operator evaluation.

    Each operator is an isolated class with a single ``evaluate`` method.
    """

    @property
    @abstractmethod
    def name(self) -> FilterOperator:
        """The operator this strategy handles."""
        ...

    @abstractmethod
    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        """
        Evaluate the operator against concrete values.

        Args:
            field_value: The actual value resolved from the candidate.
            condition_value: The value provided in the constraint.
        """
        ...


class MemoryOperatorRegistry:
    """
    Registry of MemoryOperator instances keyed by FilterOperator.

    Usage::

        registry = MemoryOperatorRegistry()
        registry.register(EqualOperator())

        result = registry.evaluate(FilterOperator.EQ, actual, expected)
    """

    def __init__(self) -> None:
        self._operators: dict[FilterOperator, MemoryOperator] = {}

    def register(self, operator: MemoryOperator) -> None:
        self._operators[operator.name] = operator

    def register_all(self, *operators: MemoryOperator) -> None:
        for op in operators:
            self.register(op)

    def get(self, name: FilterOperator | str) -> MemoryOperator | None:
        try:
            return self._operators.get(FilterOperator(name))
        except ValueError:
            return None

    @property
    def supported_operators(self) -> set[FilterOperator]:
        return set(self._operators.keys())

    def evaluate(self, name: FilterOperator | str, field_value: Any, condition_value: Any) -> bool:
        """
        Look up the operator and evaluate.

        Raises:
            ValueError: If the operator is not registered.
        """
        op = self.get(name)
        if op is None:
            raise ValueError(f"Unsupported operator for in-memory evaluation: {name}")
        return op.evaluate(field_value, condition_value)


class SpecificationEvaluator:
    """Decides whether a resource satisfies a filter tree."""

    def __init__(self, registry: MemoryOperatorRegistry) -> None:
        if registry is None:
            raise ValueError(
                "registry parameter is required. "
                "Use build_default_registry() to create one."
            )
        self._registry = registry

    def matches(self, node: Predicate | FieldConstraint, candidate: Resource) -> bool:
        if isinstance(node, Predicate):
            if node.is_empty:
                return True
            results = (self.matches(it, candidate) for it in node.value)
            return all(results) if node.operator == FilterOperator.AND.value else any(results)
        actual = self.resolve_field(candidate, node.field)
        return self._registry.evaluate(node.operator, actual, node.value)

    @staticmethod
    def resolve_field(resource: Resource, field: str) -> Any:
        if field == ID_FIELD:
            return resource.id
        if field in resource.attrs:
            return resource.attrs[field]
        rel = resource.relationships.get(field)
        if rel is not None:
            return rel.unwrap_ids()
        obj: Any = resource.attrs
        for part in field.split("."):
            if not isinstance(obj, dict):
                return None
            obj = obj.get(part)
        return obj


# ── Built-in operators ───────────────────────────────────────────────


def _compare(fn: Any, field_value: Any, condition_value: Any) -> bool:
    if field_value is None or condition_value is None:
        return False
    try:
        return bool(fn(field_value, condition_value))
    except TypeError:
        return False


class EqualOperator(MemoryOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.EQ

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        if isinstance(field_value, list) and not isinstance(condition_value, list):
            return condition_value in field_value
        return bool(field_value == condition_value)


class NotEqualOperator(MemoryOperator):
    def __init__(self, name: FilterOperator = FilterOperator.NEQ) -> None:
        self._name = name

    @property
    def name(self) -> FilterOperator:
        return self._name

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        return not EqualOperator().evaluate(field_value, condition_value)


class GreaterThanOperator(MemoryOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.GT

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        return _compare(operator.gt, field_value, condition_value)


class LessThanOperator(MemoryOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.LT

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        return _compare(operator.lt, field_value, condition_value)


class GreaterEqualOperator(MemoryOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.GTE

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        return _compare(operator.ge, field_value, condition_value)


class LessEqualOperator(MemoryOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.LTE

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        return _compare(operator.le, field_value, condition_value)


class InOperator(MemoryOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.IN

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        values = condition_value if isinstance(condition_value, list | tuple) else [condition_value]
        if isinstance(field_value, list):
            return any(it in values for it in field_value)
        return field_value in values


class NotInOperator(MemoryOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.NIN

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        return not InOperator().evaluate(field_value, condition_value)


def build_default_registry() -> MemoryOperatorRegistry:
    """
    Create a registry with all built-in comparison operators.

    Example:
        >>> registry = build_default_registry()
        >>> registry.evaluate(FilterOperator.EQ, "active", "active")
        True
    """
    registry = MemoryOperatorRegistry()
    registry.register_all(
        EqualOperator(),
        NotEqualOperator(FilterOperator.NEQ),
        NotEqualOperator(FilterOperator.NE),
        GreaterThanOperator(),
        LessThanOperator(),
        GreaterEqualOperator(),
        LessEqualOperator(),
        InOperator(),
        NotInOperator(),
    )
    return registry
