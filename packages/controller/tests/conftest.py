"""Shared fixtures: the same registry over in-memory and mocked MongoDB storage."""

import pytest
from mongomock_motor import AsyncMongoMockClient
from pydantic import BaseModel

from jsonapi_controller import APIController
from jsonapi_core import Relationship, Request, Resource, ResourceTypeDescription, ResourceTypeRegistry
from jsonapi_core.http import JSON_API_MEDIA_TYPE
from jsonapi_core.registry import RelationshipSpec
from jsonapi_persistence_memory import InMemoryAdapter
from jsonapi_persistence_mongo import (
    MongoAdapter,
    MongoConnectionManager,
    MongoModel,
    RelationshipField,
)

pytest_plugins = ["pytest_asyncio"]


class CountingAdapter(InMemoryAdapter):
    """Records every query it is asked to run."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.queries = []

    async def do_query(self, query):
        self.queries.append(query)
        return await super().do_query(query)


class PersonAttributes(BaseModel):
    name: str
    age: int | None = None


@pytest.fixture
def adapter():
    adapter = CountingAdapter()
    adapter.seed(
        Resource("people", "p1", {"name": "Ann", "age": 31}),
        Resource("people", "p2", {"name": "Bob", "age": 17}),
        Resource(
            "posts",
            "x1",
            {"title": "Hello"},
            {
                "author": Relationship.of("people", "p1"),
                "tags": Relationship.of("tags", ["t1"]),
            },
        ),
    )
    return adapter


def _make_registry(adapter, posts_overrides=None, **people_overrides):
    people = {
        "adapter": adapter,
        "attributes": PersonAttributes,
        "relationships": {},
        **people_overrides,
    }
    return ResourceTypeRegistry(
        {
            "people": ResourceTypeDescription(**people),
            "posts": ResourceTypeDescription(
                adapter=adapter,
                relationships={
                    "author": RelationshipSpec("people"),
                    "tags": RelationshipSpec("tags", to_many=True),
                },
                **(posts_overrides or {}),
            ),
            "tags": ResourceTypeDescription(adapter=adapter),
        },
        base_url="https://api.example.com",
    )


@pytest.fixture
def registry(adapter):
    return _make_registry(adapter)


@pytest.fixture
def controller(registry):
    return APIController(registry)


def _make_request(method="get", type_="people", **kwargs):
    defaults = {
        "uri": f"https://api.example.com/{type_}",
        "method": method,
        "type": type_,
        "accepts": JSON_API_MEDIA_TYPE,
    }
    if "body" in kwargs:
        defaults.update(has_body=True, content_type=JSON_API_MEDIA_TYPE)
    defaults.update(kwargs)
    return Request(**defaults)


@pytest.fixture
def make_registry():
    return _make_registry


@pytest.fixture
def make_request():
    return _make_request


class StoredPerson(BaseModel):
    name: str
    email: str | None = None


@pytest.fixture
def mongo_connection():
    return MongoConnectionManager(database="controller_db", client=AsyncMongoMockClient())


@pytest.fixture
def mongo_registry(mongo_connection):
    """The same resource types, stored in (mocked) MongoDB."""
    adapter = MongoAdapter(
        mongo_connection,
        {
            "people": MongoModel("people", schema=StoredPerson),
            "posts": MongoModel("posts", {"author": RelationshipField("people")}),
        },
    )
    return ResourceTypeRegistry(
        {
            "people": ResourceTypeDescription(adapter=adapter, relationships={}),
            "posts": ResourceTypeDescription(
                adapter=adapter, relationships={"author": RelationshipSpec("people")}
            ),
        },
        base_url="https://api.example.com",
    )
