"""Unit tests for InMemoryAdapter."""

from __future__ import annotations

import pytest

from jsonapi_core.ports import IStorageAdapter
from jsonapi_core.primitives.exceptions import APIErrors, BadRequestError, NotFoundError
from jsonapi_core.query import (
    AddToRelationshipQuery,
    CreateQuery,
    DeleteQuery,
    FindQuery,
    RemoveFromRelationshipQuery,
    UpdateQuery,
)
from jsonapi_core.resources import Collection, Relationship, Resource, ResourceIdentifier
from jsonapi_persistence_memory import InMemoryAdapter
from jsonapi_specifications import FieldConstraint, Predicate


class SequentialIds:
    def __init__(self) -> None:
        self._n = 0

    def next_id(self) -> str:
        self._n += 1
        return str(self._n)


def _identity(value):
    return value


def find(type_: str = "people", **kwargs) -> FindQuery:
    return FindQuery(type=type_, returning=_identity, **kwargs)


@pytest.fixture
def adapter():
    adapter = InMemoryAdapter(id_generator=SequentialIds())
    adapter.seed(
        Resource("people", "p1", {"name": "Ann", "age": 31}),
        Resource("people", "p2", {"name": "Bob", "age": 17}),
        Resource("people", "p3", {"name": "Cid", "age": None}),
        Resource(
            "posts",
            "x1",
            {"title": "Hello"},
            {
                "author": Relationship.of("people", "p1"),
                "tags": Relationship.of("tags", ["t1"]),
            },
        ),
        Resource("tags", "t1", {"label": "py"}),
    )
    return adapter


def test_satisfies_adapter_protocol(adapter) -> None:
    assert isinstance(adapter, IStorageAdapter)


def test_seed_requires_ids() -> None:
    with pytest.raises(ValueError):
        InMemoryAdapter().seed(Resource("people"))


@pytest.mark.asyncio
async def test_find_collection_filters_sorts_and_counts(adapter) -> None:
    result = await adapter.do_query(
        find(
            filters=(Predicate("or", (
                FieldConstraint("age", "gte", 18),
                FieldConstraint("name", "eq", "Bob"),
            )),),
            sort=(("name", "desc"),),
        )
    )
    assert result.primary.ids() == ["p2", "p1"]
    assert result.collection_size == 2


@pytest.mark.asyncio
async def test_empty_predicate_matches_everything(adapter) -> None:
    result = await adapter.do_query(find(filters=(Predicate("and"),)))
    assert len(result.primary) == 3


@pytest.mark.asyncio
async def test_none_sorts_first(adapter) -> None:
    result = await adapter.do_query(find(sort=(("age", "asc"),)))
    assert result.primary.ids() == ["p3", "p2", "p1"]


@pytest.mark.asyncio
async def test_pagination_keeps_total(adapter) -> None:
    result = await adapter.do_query(find(sort=(("name", "asc"),), offset=1, limit=1))
    assert result.primary.ids() == ["p2"]
    assert result.collection_size == 3


@pytest.mark.asyncio
async def test_find_single_and_missing(adapter) -> None:
    result = await adapter.do_query(find(id_or_ids="p1"))
    assert result.primary.attrs["name"] == "Ann"

    with pytest.raises(APIErrors) as exc_info:
        await adapter.do_query(find(id_or_ids="nope"))
    assert isinstance(exc_info.value.errors[0], NotFoundError)


@pytest.mark.asyncio
async def test_filter_on_relationship_ids(adapter) -> None:
    result = await adapter.do_query(find("posts", filters=(FieldConstraint("author", "eq", "p1"),)))
    assert result.primary.ids() == ["x1"]


@pytest.mark.asyncio
async def test_includes_and_sparse_fields(adapter) -> None:
    result = await adapter.do_query(
        find("posts", id_or_ids="x1", populates=("author", "tags"), select={"people": ["name"]})
    )
    assert sorted((it.type, it.id) for it in result.included) == [("people", "p1"), ("tags", "t1")]
    person = next(it for it in result.included if it.type == "people")
    assert person.attrs == {"name": "Ann"}


@pytest.mark.asyncio
async def test_multi_level_include_rejected(adapter) -> None:
    with pytest.raises(APIErrors) as exc_info:
        await adapter.do_query(find("posts", populates=("author.friends",)))
    assert isinstance(exc_info.value.errors[0], BadRequestError)


@pytest.mark.asyncio
async def test_create_then_find_round_trip(adapter) -> None:
    created = await adapter.do_query(
        CreateQuery(
            type="people",
            returning=_identity,
            records=Collection([Resource("people", attrs={"name": "Dee"})]),
        )
    )
    assert created.ids() == ["1"]
    found = await adapter.do_query(find(id_or_ids="1"))
    assert found.primary.attrs == {"name": "Dee"}


@pytest.mark.asyncio
async def test_results_do_not_alias_storage(adapter) -> None:
    result = await adapter.do_query(find(id_or_ids="p1"))
    result.primary.attrs["name"] = "Mutated"
    again = await adapter.do_query(find(id_or_ids="p1"))
    assert again.primary.attrs["name"] == "Ann"


@pytest.mark.asyncio
async def test_update_merges_attrs(adapter) -> None:
    updated = await adapter.do_query(
        UpdateQuery(type="people", returning=_identity, patch=Resource("people", "p2", {"age": 18}))
    )
    assert updated.attrs == {"name": "Bob", "age": 18}


@pytest.mark.asyncio
async def test_delete_missing_is_404(adapter) -> None:
    await adapter.do_query(DeleteQuery(type="people", returning=_identity, id_or_ids=["p1", "p2"]))
    with pytest.raises(APIErrors) as exc_info:
        await adapter.do_query(DeleteQuery(type="people", returning=_identity, id_or_ids="p1"))
    assert isinstance(exc_info.value.errors[0], NotFoundError)


@pytest.mark.asyncio
async def test_relationship_membership(adapter) -> None:
    await adapter.do_query(
        AddToRelationshipQuery(
            type="posts", returning=_identity, id="x1", relationship_name="tags",
            linkage=(ResourceIdentifier("tags", "t1"), ResourceIdentifier("tags", "t2")),
        )
    )
    await adapter.do_query(
        RemoveFromRelationshipQuery(
            type="posts", returning=_identity, id="x1", relationship_name="tags",
            linkage=(ResourceIdentifier("tags", "t1"),),
        )
    )
    result = await adapter.do_query(find("posts", id_or_ids="x1"))
    assert result.primary.relationships["tags"].unwrap_ids() == ["t2"]


@pytest.mark.asyncio
async def test_to_one_membership_rejected(adapter) -> None:
    with pytest.raises(APIErrors) as exc_info:
        await adapter.do_query(
            AddToRelationshipQuery(
                type="posts", returning=_identity, id="x1", relationship_name="author",
                linkage=(ResourceIdentifier("people", "p2"),),
            )
        )
    assert isinstance(exc_info.value.errors[0], BadRequestError)
