"""InMemoryAdapter — dict-backed storage adapter for tests and embedding."""

from __future__ import annotations

import copy
import logging
from typing import TYPE_CHECKING, Any, ClassVar

from jsonapi_core.primitives.exceptions import (
    APIErrors,
    as_error_list,
    bad_request,
    not_found,
)
from jsonapi_core.primitives.id_generator import UUID4Generator
from jsonapi_core.query import (
    AddToRelationshipQuery,
    CreateQuery,
    DeleteQuery,
    FindQuery,
    FindResult,
    RemoveFromRelationshipQuery,
    UpdateQuery,
)
from jsonapi_core.resources import Collection, Relationship, Resource
from jsonapi_specifications.ast import combine
from jsonapi_specifications.evaluator import SpecificationEvaluator, build_default_registry

if TYPE_CHECKING:
    from collections.abc import Iterable

    from jsonapi_core.primitives.id_generator import IIDGenerator
    from jsonapi_core.query import Query
    from jsonapi_specifications.evaluator import MemoryOperatorRegistry

logger = logging.getLogger("jsonapi.persistence.memory")


class InMemoryAdapter:
    """In-memory implementation of ``IStorageAdapter``.

    Stores resources per type in plain dicts keyed by id. Results are deep
    copies, so callers never alias stored state.
    """

    unary_filter_operators: ClassVar[tuple[str, ...]] = ("and", "or")
    binary_filter_operators: ClassVar[tuple[str, ...]] = (
        "eq", "neq", "ne", "in", "nin", "lt", "gt", "lte", "gte",
    )

    def __init__(
        self,
        *,
        id_generator: IIDGenerator | None = None,
        operators: MemoryOperatorRegistry | None = None,
    ) -> None:
        self._store: dict[str, dict[str, Resource]] = {}
        self._ids = id_generator or UUID4Generator()
        self._evaluator = SpecificationEvaluator(operators or build_default_registry())

    def seed(self, *resources: Resource) -> None:
        """Insert resources as-is (ids included)."""
        for it in resources:
            if it.id is None:
                raise ValueError("Seeded resources need an id")
            self._table(it.type)[it.id] = copy.deepcopy(it)

    def _table(self, type_name: str) -> dict[str, Resource]:
        return self._store.setdefault(type_name, {})

    # ── Dispatch ─────────────────────────────────────────────────

    async def do_query(self, query: Query) -> Any:
        try:
            if isinstance(query, FindQuery):
                return self._find(query)
            if isinstance(query, CreateQuery):
                return self._create(query)
            if isinstance(query, UpdateQuery):
                return self._update(query)
            if isinstance(query, DeleteQuery):
                return self._delete(query)
            if isinstance(query, AddToRelationshipQuery):
                return self._add_to_relationship(query)
            if isinstance(query, RemoveFromRelationshipQuery):
                return self._remove_from_relationship(query)
        except Exception as exc:
            raise APIErrors(self.normalize_error(exc)) from exc
        raise TypeError(f"Unsupported query type: {type(query).__name__}")

    @staticmethod
    def normalize_error(err: BaseException) -> list[BaseException]:
        return as_error_list(err)

    # ── Reads ────────────────────────────────────────────────────

    def _find(self, query: FindQuery) -> FindResult:
        table = self._table(query.type)
        if query.singular:
            found = table.get(query.id_or_ids)  # type: ignore[arg-type]
            candidates = [found] if found is not None else []
        elif query.id_or_ids is not None:
            wanted = set(query.id_or_ids)
            candidates = [it for key, it in table.items() if key in wanted]
        else:
            candidates = list(table.values())

        criteria = combine(query.filters)
        matched = [it for it in candidates if self._evaluator.matches(criteria, it)]
        if query.singular and not matched:
            raise not_found()

        for field, direction in reversed(query.sort):
            matched.sort(
                key=lambda r, f=field: _sort_key(self._resolve(r, f)),
                reverse=direction == "desc",
            )

        total = len(matched)
        start = query.offset or 0
        end = start + query.limit if query.limit is not None else None
        page = matched[start:end]

        included = self._includes(page, query.populates)
        page = [self._select(it, query.select) for it in page]
        included = [self._select(it, query.select) for it in included]

        if query.singular:
            return FindResult(page[0] if page else None, Collection(included), None)
        return FindResult(Collection(page), Collection(included), total)

    def _includes(self, primaries: list[Resource], paths: Iterable[str]) -> list[Resource]:
        out: list[Resource] = []
        for path in paths:
            if "." in path:
                raise bad_request(f"Multi-level include paths are not supported: {path!r}.")
            for resource in primaries:
                rel = resource.relationships.get(path)
                if rel is None:
                    continue
                for ident in rel.identifiers:
                    related = self._table(ident.type).get(ident.id)
                    if related is not None:
                        out.append(copy.deepcopy(related))
        return list(Collection(out).deduplicated())

    @staticmethod
    def _select(resource: Resource, select: Any) -> Resource:
        resource = copy.deepcopy(resource)
        if not select or resource.type not in select:
            return resource
        wanted = set(select[resource.type])
        resource.attrs = {k: v for k, v in resource.attrs.items() if k in wanted}
        resource.relationships = {
            k: v for k, v in resource.relationships.items() if k in wanted
        }
        return resource

    def _resolve(self, resource: Resource, field: str) -> Any:
        return self._evaluator.resolve_field(resource, field)

    # ── Writes ───────────────────────────────────────────────────

    def _create(self, query: CreateQuery) -> Resource | Collection:
        def insert(resource: Resource) -> Resource:
            stored = copy.deepcopy(resource)
            stored.id = self._ids.next_id()
            self._table(stored.type)[stored.id] = stored
            logger.debug("Created %s/%s", stored.type, stored.id)
            return copy.deepcopy(stored)

        if isinstance(query.records, Collection):
            return Collection(insert(it) for it in query.records)
        return insert(query.records)

    def _update(self, query: UpdateQuery) -> Resource | Collection:
        def apply(patch: Resource) -> Resource:
            stored = self._table(patch.type).get(patch.id or "")
            if stored is None:
                raise not_found(f"No {patch.type} found with id {patch.id}.")
            stored.attrs.update(copy.deepcopy(patch.attrs))
            stored.relationships.update(copy.deepcopy(patch.relationships))
            return copy.deepcopy(stored)

        if isinstance(query.patch, Collection):
            return Collection(apply(it) for it in query.patch)
        return apply(query.patch)

    def _delete(self, query: DeleteQuery) -> None:
        table = self._table(query.type)
        ids = [query.id_or_ids] if isinstance(query.id_or_ids, str) else list(query.id_or_ids)
        removed = [table.pop(it) for it in ids if it in table]
        if not removed:
            raise not_found()

    def _relationship(self, query: AddToRelationshipQuery | RemoveFromRelationshipQuery) -> Relationship:
        stored = self._table(query.type).get(query.id)
        if stored is None:
            raise not_found()
        rel = stored.relationships.get(query.relationship_name)
        if rel is None:
            rel = stored.relationships[query.relationship_name] = Relationship([], to_many=True)
        if not rel.to_many:
            raise bad_request(
                f"{query.relationship_name!r} is a to-one relationship; use PATCH to replace it."
            )
        return rel

    def _add_to_relationship(self, query: AddToRelationshipQuery) -> None:
        rel = self._relationship(query)
        current = rel.identifiers
        rel.data = current + [it for it in query.linkage if it not in current]

    def _remove_from_relationship(self, query: RemoveFromRelationshipQuery) -> None:
        rel = self._relationship(query)
        rel.data = [it for it in rel.identifiers if it not in query.linkage]


def _sort_key(value: Any) -> tuple[int, Any]:
    # None sorts first; mixed types fall back to their string form.
    if value is None:
        return (0, "")
    if isinstance(value, (int, float, str)):
        return (1, value) if not isinstance(value, str) else (2, value)
    return (3, str(value))
