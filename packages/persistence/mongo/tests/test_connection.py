"""Unit tests for MongoConnectionManager (without real MongoDB)."""

from __future__ import annotations

import pytest
from mongomock_motor import AsyncMongoMockClient

from jsonapi_persistence_mongo.connection import MongoConnectionManager
from jsonapi_persistence_mongo.exceptions import MongoConnectionError


def test_database_uses_configured_name() -> None:
    mgr = MongoConnectionManager(database="app", client=AsyncMongoMockClient())
    assert mgr.database_name == "app"
    assert mgr.database().name == "app"
    assert mgr.database("other").name == "other"


@pytest.mark.asyncio
async def test_client_is_created_lazily() -> None:
    mgr = MongoConnectionManager("mongodb://localhost:27017")
    assert not mgr.connected
    mgr.database()
    assert mgr.connected
    mgr.close()
    assert not mgr.connected


@pytest.mark.asyncio
async def test_invalid_url_raises_connection_error() -> None:
    mgr = MongoConnectionManager("postgres://nope")
    with pytest.raises(MongoConnectionError, match="Invalid MongoDB URL"):
        mgr.database()


def test_close_idempotent() -> None:
    mgr = MongoConnectionManager()
    mgr.close()
    mgr.close()
