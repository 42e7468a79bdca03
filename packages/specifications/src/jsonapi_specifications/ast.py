"""Predicate / FieldConstraint — the data-only filter tree."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Union

from .exceptions import SpecificationError
from .operators import LOGICAL_OPERATORS

if TYPE_CHECKING:
    from collections.abc import Iterable

# Reserved field name addressing a resource's identifier.
ID_FIELD = "id"


@dataclass(frozen=True)
class FieldConstraint:
    """A single ``field <operator> value`` comparison."""

    field: str
    operator: str
    value: Any = None

    def to_dict(self) -> dict[str, Any]:
        return {"field": self.field, "operator": self.operator, "value": self.value}


@dataclass(frozen=True)
class Predicate:
    """
    Boolean combinator over constraints or nested predicates.

    A predicate with no constituents places no constraint at all.
    """

    operator: str
    value: tuple[Union[Predicate, FieldConstraint], ...] = ()

    def __post_init__(self) -> None:
        if self.operator not in LOGICAL_OPERATORS:
            raise SpecificationError(
                f"Predicate operator must be one of {sorted(LOGICAL_OPERATORS)}, "
                f"got {self.operator!r}"
            )
        if not isinstance(self.value, tuple):
            object.__setattr__(self, "value", tuple(self.value))

    @property
    def is_empty(self) -> bool:
        return not self.value

    def to_dict(self) -> dict[str, Any]:
        return {"operator": self.operator, "value": [it.to_dict() for it in self.value]}


FilterNode = Union[Predicate, FieldConstraint]


def and_(*nodes: FilterNode) -> Predicate:
    return Predicate("and", nodes)


def or_(*nodes: FilterNode) -> Predicate:
    return Predicate("or", nodes)


def from_dict(data: dict[str, Any]) -> FilterNode:
    """Rebuild a node from its :meth:`to_dict` form."""
    op = str(data.get("operator", "")).lower()
    if op in LOGICAL_OPERATORS:
        return Predicate(op, tuple(from_dict(it) for it in data.get("value", [])))
    if "field" not in data:
        raise SpecificationError(f"Constraint missing 'field': {data!r}")
    return FieldConstraint(data["field"], op, data.get("value"))


def combine(nodes: Iterable[FilterNode] | None) -> Predicate:
    """Wrap a top-level filter list in an implicit AND."""
    return Predicate("and", tuple(nodes or ()))
