"""Resource <-> BSON document round-trip (ObjectId, UUID, Decimal)."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import TYPE_CHECKING, Any
from uuid import UUID

from bson import Decimal128, ObjectId

from jsonapi_core.resources import Relationship, Resource

from .query_builder import MONGO_ID_FIELD

if TYPE_CHECKING:
    from collections.abc import Mapping

    from pydantic import BaseModel


@dataclass(frozen=True)
class RelationshipField:
    """A document field holding the bare id(s) of related resources."""

    type: str
    to_many: bool = False


@dataclass(frozen=True)
class MongoModel:
    """Storage mapping for one resource type.

    ``schema`` is an optional pydantic model the attributes must satisfy
    before a document is inserted. ``strict_ids`` rejects ids that are not
    valid ObjectIds instead of storing them as plain strings.
    """

    collection: str
    relationships: Mapping[str, RelationshipField] = field(default_factory=dict)
    schema: type[BaseModel] | None = None
    strict_ids: bool = False

    def cast_id(self, value: Any) -> Any:
        if isinstance(value, str) and (self.strict_ids or ObjectId.is_valid(value)):
            return ObjectId(value)
        return value


def _serialize_value(value: Any) -> Any:
    """Convert Python types to BSON-safe types."""
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, Decimal):
        return Decimal128(value)
    if isinstance(value, dict):
        return {k: _serialize_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_serialize_value(v) for v in value]
    return value


def _deserialize_value(value: Any) -> Any:
    """Convert BSON types back to Python types."""
    if isinstance(value, Decimal128):
        return value.to_decimal()
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, dict):
        return {k: _deserialize_value(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_deserialize_value(v) for v in value]
    return value


def relationship_value(rel: Relationship, target: MongoModel | None) -> Any:
    """Store linkage as bare ids, cast the way the target collection keys them."""
    ids = rel.unwrap_ids()
    if target is None:
        return ids
    if isinstance(ids, list):
        return [target.cast_id(it) for it in ids]
    return target.cast_id(ids) if ids is not None else None


def resource_to_doc(
    resource: Resource,
    model: MongoModel,
    models: Mapping[str, MongoModel],
    *,
    attrs: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Build the document body for *resource*; ``_id`` is never included."""
    doc: dict[str, Any] = _serialize_value(dict(resource.attrs if attrs is None else attrs))
    for name, rel in resource.relationships.items():
        declared = model.relationships.get(name)
        target = models.get(declared.type) if declared is not None else None
        doc[name] = relationship_value(rel, target)
    doc.pop(MONGO_ID_FIELD, None)
    return doc


def doc_to_resource(type_name: str, doc: Mapping[str, Any], model: MongoModel) -> Resource:
    """Build a Resource; declared relationship fields become linkage."""
    attrs: dict[str, Any] = {}
    relationships: dict[str, Relationship] = {}
    for key, value in doc.items():
        if key == MONGO_ID_FIELD:
            continue
        declared = model.relationships.get(key)
        if declared is None:
            attrs[key] = _deserialize_value(value)
            continue
        ids = _deserialize_value(value)
        if declared.to_many:
            relationships[key] = Relationship.of(declared.type, ids or [])
        else:
            relationships[key] = Relationship.of(declared.type, ids)
    return Resource(
        type_name,
        str(doc[MONGO_ID_FIELD]),
        attrs,
        relationships,
    )
