"""jsonapi-core — Foundation package for the jsonapi pipeline.

Resources, documents, queries, the type registry and the adapter port.
Optional pydantic for attribute schemas.
"""

from __future__ import annotations

from .document import Document
from .http import (
    JSON_API_MEDIA_TYPE,
    JSON_MEDIA_TYPE,
    SUPPORTED_METHODS,
    HTTPResponse,
    Request,
    Result,
)
from .ports import IStorageAdapter
from .primitives.exceptions import APIError, APIErrors
from .query import (
    AddToRelationshipQuery,
    CreateQuery,
    DeleteQuery,
    FindQuery,
    FindResult,
    Query,
    RemoveFromRelationshipQuery,
    UpdateQuery,
)
from .registry import (
    RegistryError,
    RelationshipSpec,
    ResourceTypeDescription,
    ResourceTypeRegistry,
)
from .resources import Collection, Relationship, Resource, ResourceIdentifier

__all__ = [
    # Errors
    "APIError",
    "APIErrors",
    "RegistryError",
    # Resources
    "Collection",
    "Relationship",
    "Resource",
    "ResourceIdentifier",
    "Document",
    # HTTP shapes
    "HTTPResponse",
    "JSON_API_MEDIA_TYPE",
    "JSON_MEDIA_TYPE",
    "Request",
    "Result",
    "SUPPORTED_METHODS",
    # Queries
    "AddToRelationshipQuery",
    "CreateQuery",
    "DeleteQuery",
    "FindQuery",
    "FindResult",
    "Query",
    "RemoveFromRelationshipQuery",
    "UpdateQuery",
    # Registry
    "IStorageAdapter",
    "RelationshipSpec",
    "ResourceTypeDescription",
    "ResourceTypeRegistry",
]
