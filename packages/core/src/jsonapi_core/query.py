"""Query values handed to storage adapters.

One query is built per request by the verb-specific builders. Queries are
frozen; use :meth:`Query.evolve` to derive a modified copy.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, NamedTuple, TypeVar, Union

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Mapping

    from .http import Result
    from .resources import Collection, Resource, ResourceIdentifier

    Returning = Callable[[Any], Union[Result, Awaitable[Result]]]
    Catch = Callable[[BaseException], Union[Result, Awaitable[Result]]]

Q = TypeVar("Q", bound="Query")


@dataclass(frozen=True, kw_only=True)
class Query:
    """Base query: target type plus result/error mapping callbacks."""

    type: str
    returning: Returning
    catch: Catch | None = None

    def evolve(self: Q, **changes: Any) -> Q:
        return dataclasses.replace(self, **changes)


@dataclass(frozen=True, kw_only=True)
class FindQuery(Query):
    id_or_ids: str | list[str] | None = None
    filters: tuple[Any, ...] = ()
    sort: tuple[tuple[str, str], ...] = ()
    offset: int | None = None
    limit: int | None = None
    populates: tuple[str, ...] = ()
    select: Mapping[str, list[str]] | None = None

    @property
    def singular(self) -> bool:
        return isinstance(self.id_or_ids, str)


@dataclass(frozen=True, kw_only=True)
class CreateQuery(Query):
    records: Resource | Collection

    def with_records(self, records: Resource | Collection) -> CreateQuery:
        return self.evolve(records=records)


@dataclass(frozen=True, kw_only=True)
class UpdateQuery(Query):
    patch: Resource | Collection

    def with_records(self, patch: Resource | Collection) -> UpdateQuery:
        return self.evolve(patch=patch)


@dataclass(frozen=True, kw_only=True)
class DeleteQuery(Query):
    id_or_ids: str | list[str]

    @property
    def singular(self) -> bool:
        return isinstance(self.id_or_ids, str)


@dataclass(frozen=True, kw_only=True)
class AddToRelationshipQuery(Query):
    id: str
    relationship_name: str
    linkage: tuple[ResourceIdentifier, ...]


@dataclass(frozen=True, kw_only=True)
class RemoveFromRelationshipQuery(Query):
    id: str
    relationship_name: str
    linkage: tuple[ResourceIdentifier, ...]


class FindResult(NamedTuple):
    """Raw result of a :class:`FindQuery`."""

    primary: Resource | Collection | None
    included: Collection | None = None
    collection_size: int | None = None
