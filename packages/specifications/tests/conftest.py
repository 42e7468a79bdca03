"""Shared fixtures for specifications tests."""

from __future__ import annotations

import pytest

from jsonapi_core.resources import Relationship, Resource
from jsonapi_specifications import SpecificationEvaluator, build_default_registry


@pytest.fixture
def registry():
    """Default in-memory operator registry."""
    return build_default_registry()


@pytest.fixture
def evaluator(registry):
    return SpecificationEvaluator(registry)


@pytest.fixture
def ann():
    return Resource(
        "people",
        "p1",
        {"name": "Ann", "age": 31, "nickname": None, "address": {"city": "Athens"}},
        {
            "tags": Relationship.of("tags", ["t1", "t2"]),
            "boss": Relationship.of("people", "p9"),
        },
    )
