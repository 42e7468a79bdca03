"""Mongo query builder from Predicate / FieldConstraint trees."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from jsonapi_specifications.ast import ID_FIELD, FieldConstraint, Predicate, combine
from jsonapi_specifications.operators import FilterOperator

from .exceptions import MongoQueryError

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping, Sequence

    from jsonapi_specifications.ast import FilterNode

    ValueCaster = Callable[[str, Any], Any]

MONGO_ID_FIELD = "_id"


def to_mongo_field(field: str) -> str:
    return MONGO_ID_FIELD if field == ID_FIELD else field


def _identity(_field: str, value: Any) -> Any:
    return value


def to_mongo_criteria(node: FilterNode, cast: ValueCaster | None = None) -> dict[str, Any]:
    """Compile one node into a MongoDB filter document.

    ``and``/``or`` with no members compile to ``{}`` (match everything), as
    Mongo rejects empty ``$and``/``$or`` arrays. ``eq`` is a direct
    assignment and ``neq`` becomes ``$ne``; every other operator is passed
    through as ``$<op>``. *cast* converts values per field, e.g. string ids
    to ``ObjectId``.
    """
    cast = cast or _identity
    if isinstance(node, Predicate):
        if node.is_empty:
            return {}
        return {f"${node.operator}": [to_mongo_criteria(it, cast) for it in node.value]}
    if not isinstance(node, FieldConstraint):
        raise MongoQueryError(f"Cannot compile filter node: {node!r}")

    field = to_mongo_field(node.field)
    value = cast(node.field, node.value)
    if node.operator == FilterOperator.EQ.value:
        return {field: value}
    op = FilterOperator.NE.value if node.operator == FilterOperator.NEQ.value else node.operator
    return {field: {f"${op}": value}}


class MongoQueryBuilder:
    """Compiles filter lists, sort fields and sparse fieldsets for one collection."""

    def __init__(self, cast: ValueCaster | None = None) -> None:
        self._cast = cast

    def build_match(
        self,
        filters: Sequence[FilterNode] = (),
        extra: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """AND the top-level filters together, then merge *extra* criteria."""
        match = to_mongo_criteria(combine(filters), self._cast) if filters else {}
        if extra:
            match = {"$and": [dict(extra), match]} if match else dict(extra)
        return match

    def build_sort(self, order_by: Iterable[tuple[str, str]] | None) -> list[tuple[str, int]]:
        """Build MongoDB sort tuples from ``[(field, "asc"|"desc")]``."""
        if not order_by:
            return []
        return [
            (to_mongo_field(field), -1 if str(direction).lower() == "desc" else 1)
            for field, direction in order_by
        ]

    def build_project(self, fields: Iterable[str] | None) -> dict[str, int] | None:
        """Build a projection: ``{field: 1, ...}``. None means no projection."""
        if fields is None:
            return None
        return dict.fromkeys((to_mongo_field(f) for f in fields), 1) or {MONGO_ID_FIELD: 1}
