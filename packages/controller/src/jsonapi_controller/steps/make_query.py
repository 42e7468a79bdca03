"""Per-verb query builders.

Each builder turns the validated request into exactly one query whose
``returning`` callback renders the adapter's raw result as a ``Result``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from jsonapi_core.http import Result
from jsonapi_core.primitives.exceptions import bad_request, forbidden, not_found
from jsonapi_core.query import (
    AddToRelationshipQuery,
    CreateQuery,
    DeleteQuery,
    FindQuery,
    RemoveFromRelationshipQuery,
    UpdateQuery,
)
from jsonapi_core.resources import Collection, Relationship, Resource

if TYPE_CHECKING:
    from collections.abc import Callable

    from jsonapi_core.document import Document
    from jsonapi_core.http import Request
    from jsonapi_core.query import FindResult, Query
    from jsonapi_core.registry import ResourceTypeRegistry

    MakeDoc = Callable[..., Document]
    QueryBuilder = Callable[[Request, ResourceTypeRegistry, MakeDoc], Query]


def _single_id(request: Request) -> str:
    if not isinstance(request.id_or_ids, str):
        raise bad_request("Relationship endpoints address exactly one resource by id.")
    return request.id_or_ids


def _check_relationship_endpoint(request: Request, registry: ResourceTypeRegistry) -> str:
    if not request.about_relationship:
        raise bad_request(
            "Related resource endpoints are not supported; "
            f"use /{request.type}/<id>/relationships/{request.relationship}."
        )
    name = request.relationship or ""
    declared = registry.relationships(request.type)
    if declared is not None and name not in declared:
        raise not_found(f"{name!r} is not a relationship of {request.type!r}.")
    return name


def _linkage_members(request: Request) -> tuple[Any, ...]:
    primary = request.primary
    if not isinstance(primary, Relationship) or not isinstance(primary.data, list):
        raise bad_request("To-many relationship changes require an array of linkage objects.")
    return tuple(primary.data)


def _no_content(_: Any) -> Result:
    return Result(status=204)


def make_get(request: Request, registry: ResourceTypeRegistry, make_doc: MakeDoc) -> FindQuery:
    params = request.query_params

    if request.relationship:
        name = _check_relationship_endpoint(request, registry)
        declared = registry.relationships(request.type) or {}

        def returning_linkage(result: FindResult) -> Result:
            owner = result.primary
            rel = owner.relationships.get(name) if isinstance(owner, Resource) else None
            if rel is None:
                to_many = name in declared and declared[name].to_many
                rel = Relationship([] if to_many else None, to_many=to_many)
            return Result(document=make_doc(primary=rel))

        return FindQuery(
            type=request.type,
            id_or_ids=_single_id(request),
            returning=returning_linkage,
        )

    def returning(result: FindResult) -> Result:
        meta = None
        if result.collection_size is not None:
            meta = {"total": result.collection_size}
        return Result(
            document=make_doc(primary=result.primary, included=result.included, meta=meta)
        )

    return FindQuery(
        type=request.type,
        id_or_ids=request.id_or_ids,
        filters=tuple(params.filter or ()),
        sort=tuple(params.sort or ()),
        offset=params.offset,
        limit=params.limit,
        populates=tuple(params.include or ()),
        select=params.fields,
        returning=returning,
    )


def make_post(request: Request, registry: ResourceTypeRegistry, make_doc: MakeDoc) -> Query:
    if request.relationship:
        name = _check_relationship_endpoint(request, registry)
        return AddToRelationshipQuery(
            type=request.type,
            id=_single_id(request),
            relationship_name=name,
            linkage=_linkage_members(request),
            returning=_no_content,
        )

    if request.id_or_ids is not None:
        raise bad_request("New resources must be POSTed to the collection endpoint.")
    records = request.primary
    if not isinstance(records, (Resource, Collection)):
        raise bad_request("Expected a resource or an array of resources.")
    resources = list(records) if isinstance(records, Collection) else [records]
    if any(it.id is not None for it in resources):
        raise forbidden("Client-generated ids are not supported.")

    self_template = registry.url_templates().get(request.type, {}).get("self")

    def returning(created: Resource | Collection) -> Result:
        headers: dict[str, str] = {}
        if isinstance(created, Resource) and created.id is not None and self_template:
            headers["location"] = self_template.format(id=created.id)
        return Result(document=make_doc(primary=created), status=201, headers=headers)

    return CreateQuery(type=request.type, records=records, returning=returning)


def make_patch(request: Request, registry: ResourceTypeRegistry, make_doc: MakeDoc) -> Query:
    if request.relationship:
        name = _check_relationship_endpoint(request, registry)
        linkage = request.primary
        if not isinstance(linkage, Relationship):
            raise bad_request("Expected relationship linkage.")
        patch = Resource(request.type, _single_id(request), relationships={name: linkage})
        return UpdateQuery(type=request.type, patch=patch, returning=_no_content)

    patch = request.primary
    if isinstance(patch, Resource):
        if patch.id is None:
            raise bad_request("Resources to update must include an id.")
        if isinstance(request.id_or_ids, str) and patch.id != request.id_or_ids:
            raise bad_request(
                f"The id in the body ({patch.id}) does not match the endpoint ({request.id_or_ids})."
            )
    elif isinstance(patch, Collection):
        if request.id_or_ids is not None:
            raise bad_request("Bulk updates must be sent to the collection endpoint.")
        if any(it.id is None for it in patch):
            raise bad_request("Resources to update must include an id.")
    else:
        raise bad_request("Expected a resource or an array of resources.")

    def returning(updated: Resource | Collection) -> Result:
        return Result(document=make_doc(primary=updated))

    return UpdateQuery(type=request.type, patch=patch, returning=returning)


def make_delete(request: Request, registry: ResourceTypeRegistry, make_doc: MakeDoc) -> Query:
    if request.relationship:
        name = _check_relationship_endpoint(request, registry)
        return RemoveFromRelationshipQuery(
            type=request.type,
            id=_single_id(request),
            relationship_name=name,
            linkage=_linkage_members(request),
            returning=_no_content,
        )

    if request.id_or_ids is None:
        raise bad_request("DELETE requests must address a resource by id.")
    return DeleteQuery(type=request.type, id_or_ids=request.id_or_ids, returning=_no_content)


QUERY_BUILDERS: dict[str, QueryBuilder] = {
    "get": make_get,
    "post": make_post,
    "patch": make_patch,
    "delete": make_delete,
}
