"""Check parsed resources against the registry before a write query is built."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import ValidationError

from jsonapi_core.primitives.exceptions import APIErrors, bad_request, conflict, invalid_field_value
from jsonapi_core.resources import Collection, Resource

if TYPE_CHECKING:
    from jsonapi_core.registry import ResourceTypeRegistry


def _attribute_errors(resource: Resource, registry: ResourceTypeRegistry, partial: bool) -> list[BaseException]:
    schema = registry.attributes_schema(resource.type)
    if schema is None:
        return []
    try:
        schema.model_validate(resource.attrs)
    except ValidationError as exc:
        errors: list[BaseException] = []
        for item in exc.errors():
            # A PATCH only carries the fields it changes.
            if partial and item.get("type") == "missing":
                continue
            loc = ".".join(str(p) for p in item.get("loc", ()))
            errors.append(
                invalid_field_value(f"{loc}: {item['msg']}" if loc else item["msg"], raw_error=exc)
            )
        return errors
    return []


def validate_resources(
    endpoint_type: str,
    primary: Resource | Collection,
    registry: ResourceTypeRegistry,
    *,
    partial: bool = False,
) -> None:
    """Raise every problem found across the resources as one batch.

    Unknown types are 400s, a type differing from the endpoint's is a 409,
    undeclared relationships are 400s and schema failures are 422s.
    """
    resources = list(primary) if isinstance(primary, Collection) else [primary]
    errors: list[BaseException] = []
    for resource in resources:
        if not registry.has_type(resource.type):
            errors.append(bad_request(f'"{resource.type}" is not a valid type.'))
            continue
        if resource.type != endpoint_type:
            errors.append(
                conflict(
                    f"Resource of type {resource.type!r} cannot be saved "
                    f"at the {endpoint_type!r} endpoint."
                )
            )
            continue

        declared = registry.relationships(resource.type)
        if declared is not None:
            errors.extend(
                bad_request(f"{name!r} is not a valid relationship of {resource.type!r}.")
                for name in resource.relationships
                if name not in declared
            )
        errors.extend(_attribute_errors(resource, registry, partial))

    if errors:
        raise APIErrors(errors)
