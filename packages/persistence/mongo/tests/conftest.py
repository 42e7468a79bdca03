"""Test configuration for the MongoDB adapter package."""

import pytest
from mongomock_motor import AsyncMongoMockClient

from jsonapi_persistence_mongo import (
    MongoAdapter,
    MongoConnectionManager,
    MongoModel,
    RelationshipField,
)

pytest_plugins = ["pytest_asyncio"]


@pytest.fixture
def mongo_connection():
    """Connection manager backed by mongomock instead of a live server."""
    return MongoConnectionManager(
        url="mongodb://mock:27017", database="test_db", client=AsyncMongoMockClient()
    )


@pytest.fixture
def models():
    return {
        "people": MongoModel("people"),
        "posts": MongoModel(
            "posts",
            {
                "author": RelationshipField("people"),
                "tags": RelationshipField("tags", to_many=True),
            },
        ),
        "tags": MongoModel("tags"),
    }


@pytest.fixture
def adapter(mongo_connection, models):
    return MongoAdapter(mongo_connection, models)
