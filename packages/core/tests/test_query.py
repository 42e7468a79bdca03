"""Tests for query values."""

from __future__ import annotations

import dataclasses

import pytest

from jsonapi_core.http import Result
from jsonapi_core.query import CreateQuery, DeleteQuery, FindQuery, FindResult
from jsonapi_core.resources import Collection, Resource


def _ok(_):
    return Result(status=200)


def test_queries_are_frozen() -> None:
    query = FindQuery(type="people", returning=_ok)
    with pytest.raises(dataclasses.FrozenInstanceError):
        query.limit = 3  # type: ignore[misc]


def test_evolve_returns_modified_copy() -> None:
    query = FindQuery(type="people", returning=_ok, id_or_ids=["1", "2"])
    limited = query.evolve(limit=1)
    assert limited.limit == 1
    assert query.limit is None
    assert not limited.singular
    assert limited.evolve(id_or_ids="1").singular


def test_with_records() -> None:
    query = CreateQuery(type="people", returning=_ok, records=Resource("people"))
    replaced = query.with_records(Collection())
    assert isinstance(replaced, CreateQuery)
    assert replaced.records == Collection()
    assert isinstance(query.records, Resource)


def test_delete_singular_and_find_result_defaults() -> None:
    assert DeleteQuery(type="people", returning=_ok, id_or_ids="1").singular
    assert FindResult(None) == (None, None, None)
