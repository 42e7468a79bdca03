"""ResourceTypeRegistry — boot-time lookup from type name to its description."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from .primitives.exceptions import JSONAPIError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Mapping

    from pydantic import BaseModel

    from .ports.adapter import IStorageAdapter
    from .resources import Resource

    LabelMapper = Callable[[Any, Any], Any]
    Transform = Callable[[Resource, Any], "Resource | None | Awaitable[Resource | None]"]

logger = logging.getLogger("jsonapi.registry")


class RegistryError(JSONAPIError):
    """Raised for registry misconfiguration or unknown types."""


def _empty_mapping() -> Mapping[str, Any]:
    return MappingProxyType({})


@dataclass(frozen=True)
class RelationshipSpec:
    """Declared relationship: target type and cardinality."""

    type: str
    to_many: bool = False


@dataclass(frozen=True)
class ResourceTypeDescription:
    """Everything the pipeline knows about one resource type.

    ``attributes`` is an optional pydantic model used to validate incoming
    attributes. ``relationships`` set to ``None`` disables relationship name
    checks for the type.
    """

    adapter: IStorageAdapter
    url_templates: Mapping[str, str] = field(default_factory=_empty_mapping)
    label_mappers: Mapping[str, LabelMapper] = field(default_factory=_empty_mapping)
    before_save: Transform | None = None
    before_render: Transform | None = None
    attributes: type[BaseModel] | None = None
    relationships: Mapping[str, RelationshipSpec] | None = None


class ResourceTypeRegistry:
    """Immutable after construction; safe to share across concurrent requests."""

    def __init__(
        self,
        types: Mapping[str, ResourceTypeDescription],
        *,
        base_url: str | None = None,
    ) -> None:
        resolved: dict[str, ResourceTypeDescription] = {}
        for name, description in types.items():
            if not name:
                raise RegistryError("Resource type names must be non-empty")
            templates = dict(description.url_templates)
            if base_url and "self" not in templates:
                templates["self"] = f"{base_url.rstrip('/')}/{name}/{{id}}"
            resolved[name] = ResourceTypeDescription(
                adapter=description.adapter,
                url_templates=MappingProxyType(templates),
                label_mappers=MappingProxyType(dict(description.label_mappers)),
                before_save=description.before_save,
                before_render=description.before_render,
                attributes=description.attributes,
                relationships=(
                    MappingProxyType(dict(description.relationships))
                    if description.relationships is not None
                    else None
                ),
            )
            logger.debug(
                "Registered resource type %s -> %s",
                name,
                type(description.adapter).__name__,
            )
        self._types: Mapping[str, ResourceTypeDescription] = MappingProxyType(resolved)
        self._url_templates: Mapping[str, Mapping[str, str]] = MappingProxyType(
            {name: d.url_templates for name, d in resolved.items()}
        )

    # ── Lookup ───────────────────────────────────────────────────

    def has_type(self, type_name: str | None) -> bool:
        return type_name is not None and type_name in self._types

    def type_names(self) -> list[str]:
        return list(self._types)

    def description(self, type_name: str) -> ResourceTypeDescription:
        try:
            return self._types[type_name]
        except KeyError:
            raise RegistryError(f"{type_name} is not a registered type") from None

    def adapter(self, type_name: str) -> IStorageAdapter:
        return self.description(type_name).adapter

    def url_templates(self) -> Mapping[str, Mapping[str, str]]:
        return self._url_templates

    def label_mappers(self, type_name: str) -> Mapping[str, LabelMapper]:
        return self.description(type_name).label_mappers

    def before_save(self, type_name: str) -> Transform | None:
        return self.description(type_name).before_save

    def before_render(self, type_name: str) -> Transform | None:
        return self.description(type_name).before_render

    def attributes_schema(self, type_name: str) -> type[BaseModel] | None:
        return self.description(type_name).attributes

    def relationships(self, type_name: str) -> Mapping[str, RelationshipSpec] | None:
        return self.description(type_name).relationships
