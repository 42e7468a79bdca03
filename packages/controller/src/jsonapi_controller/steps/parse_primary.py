"""Turn the request document's ``data`` into Resources or linkage."""

from __future__ import annotations

from typing import Any

from jsonapi_core.primitives.exceptions import bad_request
from jsonapi_core.resources import Collection, Relationship, Resource, ResourceIdentifier


def to_linkage(data: Any) -> Relationship:
    if data is None:
        return Relationship(None, to_many=False)
    if isinstance(data, list):
        return Relationship([ResourceIdentifier(it["type"], it["id"]) for it in data], to_many=True)
    return Relationship(ResourceIdentifier(data["type"], data["id"]), to_many=False)


def to_resource(data: dict[str, Any]) -> Resource:
    relationships = {
        name: to_linkage(rel.get("data")) for name, rel in (data.get("relationships") or {}).items()
    }
    return Resource(
        data["type"],
        data.get("id"),
        dict(data.get("attributes") or {}),
        relationships,
        data.get("meta"),
    )


def parse_request_primary(data: Any, about_relationship: bool) -> Resource | Collection | Relationship:
    """Linkage for relationship endpoints, Resource/Collection otherwise.

    Expects a document that already passed ``validate_request_document``.
    """
    if about_relationship:
        return to_linkage(data)
    if data is None:
        raise bad_request("Primary data may only be null on relationship endpoints.")
    if isinstance(data, list):
        return Collection(to_resource(it) for it in data)
    return to_resource(data)
