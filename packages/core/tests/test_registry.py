"""Tests for ResourceTypeRegistry."""

from __future__ import annotations

import logging
from typing import ClassVar

import pytest
from pydantic import BaseModel

from jsonapi_core.ports import IStorageAdapter
from jsonapi_core.registry import (
    RegistryError,
    RelationshipSpec,
    ResourceTypeDescription,
    ResourceTypeRegistry,
)


class NullAdapter:
    unary_filter_operators: ClassVar[tuple[str, ...]] = ("and",)
    binary_filter_operators: ClassVar[tuple[str, ...]] = ("eq",)

    async def do_query(self, query):
        return None

    @staticmethod
    def normalize_error(err):
        return [err]


class Person(BaseModel):
    name: str


def test_adapter_satisfies_port() -> None:
    assert isinstance(NullAdapter(), IStorageAdapter)


def test_registry_lookup(caplog) -> None:
    caplog.set_level(logging.DEBUG, logger="jsonapi.registry")
    adapter = NullAdapter()
    registry = ResourceTypeRegistry(
        {
            "people": ResourceTypeDescription(
                adapter,
                attributes=Person,
                relationships={"boss": RelationshipSpec("people")},
            ),
            "posts": ResourceTypeDescription(
                adapter, url_templates={"self": "/p/{id}", "related": "/p/{id}/{rel}"}
            ),
        },
        base_url="https://api.test/",
    )
    assert "Registered resource type people -> NullAdapter" in caplog.text

    assert registry.type_names() == ["people", "posts"]
    assert registry.has_type("people")
    assert not registry.has_type("unicorns")
    assert not registry.has_type(None)
    assert registry.adapter("people") is adapter
    assert registry.attributes_schema("people") is Person
    assert registry.relationships("people")["boss"].to_many is False
    assert registry.relationships("posts") is None
    assert registry.before_save("people") is None
    assert registry.label_mappers("posts") == {}

    templates = registry.url_templates()
    assert templates["people"] == {"self": "https://api.test/people/{id}"}
    assert templates["posts"]["self"] == "/p/{id}"


def test_registry_is_immutable() -> None:
    registry = ResourceTypeRegistry(
        {"people": ResourceTypeDescription(NullAdapter(), label_mappers={"me": lambda a, r: "1"})}
    )
    with pytest.raises(TypeError):
        registry.url_templates()["tags"] = {}  # type: ignore[index]
    with pytest.raises(TypeError):
        registry.label_mappers("people")["you"] = None  # type: ignore[index]
    assert registry.url_templates()["people"] == {}


def test_registry_errors() -> None:
    with pytest.raises(RegistryError):
        ResourceTypeRegistry({"": ResourceTypeDescription(NullAdapter())})
    with pytest.raises(RegistryError, match="unicorns"):
        ResourceTypeRegistry({}).description("unicorns")
