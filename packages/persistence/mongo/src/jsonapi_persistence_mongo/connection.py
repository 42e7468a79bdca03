"""MongoConnectionManager — the shared Motor client and database selection."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from pymongo.errors import ConfigurationError

from .exceptions import MongoConnectionError

if TYPE_CHECKING:
    from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

logger = logging.getLogger("jsonapi.persistence.mongo")


class MongoConnectionManager:
    """
    Owns the one Motor client every ``MongoAdapter`` collection goes through.

    The client is created lazily on the first database lookup, so adapters
    can be built at boot before the event loop runs. Pass ``client`` to
    reuse an existing client (or a test double) instead of dialing ``url``.

    Usage::

        connection = MongoConnectionManager("mongodb://db:27017", database="app")
        people = connection.database()["people"]
        ...
        connection.close()
    """

    def __init__(
        self,
        url: str = "mongodb://localhost:27017",
        *,
        database: str = "jsonapi",
        server_selection_timeout_ms: int = 5000,
        connect_timeout_ms: int = 10000,
        client: AsyncIOMotorClient[Any] | None = None,
    ) -> None:
        self._url = url
        self._database = database
        self._timeouts = {
            "serverSelectionTimeoutMS": server_selection_timeout_ms,
            "connectTimeoutMS": connect_timeout_ms,
        }
        self._client = client

    @property
    def database_name(self) -> str:
        return self._database

    @property
    def connected(self) -> bool:
        return self._client is not None

    def _ensure_client(self) -> AsyncIOMotorClient[Any]:
        if self._client is None:
            from motor.motor_asyncio import AsyncIOMotorClient

            try:
                self._client = AsyncIOMotorClient(self._url, **self._timeouts)
            except ConfigurationError as e:
                raise MongoConnectionError(f"Invalid MongoDB URL {self._url!r}: {e}") from e
            logger.debug("Created Motor client for %s", self._url)
        return self._client

    def database(self, name: str | None = None) -> AsyncIOMotorDatabase[Any]:
        """Return database *name* (default: the configured one), creating the client if needed."""
        return self._ensure_client()[name or self._database]

    def close(self) -> None:
        """Release the client; the next lookup creates a fresh one."""
        if self._client is not None:
            self._client.close()
            self._client = None
