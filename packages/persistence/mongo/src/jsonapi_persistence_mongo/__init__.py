"""jsonapi-persistence-mongo — MongoDB storage adapter on Motor."""

from __future__ import annotations

from .adapter import MongoAdapter
from .connection import MongoConnectionManager
from .errors import normalize_error
from .exceptions import (
    MongoConnectionError,
    MongoPersistenceError,
    MongoQueryError,
    UnknownModelError,
)
from .query_builder import MongoQueryBuilder, to_mongo_criteria
from .serialization import MongoModel, RelationshipField, doc_to_resource, resource_to_doc

__all__ = [
    "MongoAdapter",
    "MongoConnectionManager",
    "MongoModel",
    "RelationshipField",
    "MongoQueryBuilder",
    "to_mongo_criteria",
    "normalize_error",
    "doc_to_resource",
    "resource_to_doc",
    "MongoPersistenceError",
    "MongoConnectionError",
    "MongoQueryError",
    "UnknownModelError",
]
