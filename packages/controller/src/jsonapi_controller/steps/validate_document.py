"""Top-level request document shape, checked with Pydantic v2 models."""

from __future__ import annotations

from typing import Any, Union

from pydantic import BaseModel, ConfigDict, StrictStr, ValidationError

from jsonapi_core.primitives.exceptions import APIErrors, bad_request


class ResourceIdentifierObject(BaseModel):
    """A ``{type, id}`` linkage object."""

    model_config = ConfigDict(extra="forbid")

    type: StrictStr
    id: StrictStr
    meta: dict[str, Any] | None = None


class RelationshipObject(BaseModel):
    """A relationship object; ``data`` is required (may be null)."""

    data: Union[ResourceIdentifierObject, list[ResourceIdentifierObject], None]
    links: dict[str, Any] | None = None
    meta: dict[str, Any] | None = None


class ResourceObject(BaseModel):
    """A resource object; ``id`` is optional so new resources validate."""

    model_config = ConfigDict(extra="forbid")

    type: StrictStr
    id: StrictStr | None = None
    attributes: dict[str, Any] | None = None
    relationships: dict[str, RelationshipObject] | None = None
    links: dict[str, Any] | None = None
    meta: dict[str, Any] | None = None


class RequestDocument(BaseModel):
    """Envelope for resource requests: ``{data: resource | [resource]}``."""

    data: Union[ResourceObject, list[ResourceObject]]
    meta: dict[str, Any] | None = None
    jsonapi: dict[str, Any] | None = None


class LinkageDocument(BaseModel):
    """Envelope for relationship requests: ``{data: linkage}``."""

    data: Union[ResourceIdentifierObject, list[ResourceIdentifierObject], None]
    meta: dict[str, Any] | None = None
    jsonapi: dict[str, Any] | None = None


def validate_request_document(body: Any, *, about_relationship: bool = False) -> None:
    """Raise one 400 per structural problem found in *body*."""
    if not isinstance(body, dict):
        raise bad_request("Request body must be a JSON object.")
    if "data" not in body:
        raise bad_request("Request body must contain a top-level data member.")

    schema = LinkageDocument if about_relationship else RequestDocument
    try:
        schema.model_validate(body)
    except ValidationError as exc:
        errors = []
        for item in exc.errors():
            loc = ".".join(str(p) for p in item.get("loc", ()))
            errors.append(
                bad_request(f"Invalid request document at {loc or 'top level'}: {item['msg']}.")
            )
        raise APIErrors(errors) from exc
