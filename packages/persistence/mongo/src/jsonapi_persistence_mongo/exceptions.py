"""MongoDB persistence exceptions."""

from __future__ import annotations

from jsonapi_core.primitives.exceptions import JSONAPIError


class MongoPersistenceError(JSONAPIError):
    """Base for MongoDB persistence errors."""


class MongoConnectionError(MongoPersistenceError):
    """Raised when connection to MongoDB fails."""


class MongoQueryError(MongoPersistenceError):
    """Raised when a filter tree cannot be compiled."""


class UnknownModelError(MongoPersistenceError):
    """Raised when a query targets a type with no declared ``MongoModel``."""
