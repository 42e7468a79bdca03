"""Unit tests for driver/validation error normalization."""

from __future__ import annotations

import pytest
from bson.errors import InvalidId
from pydantic import BaseModel, ValidationError
from pymongo.errors import BulkWriteError, DuplicateKeyError, WriteError

from jsonapi_core.primitives.exceptions import (
    APIErrors,
    BadRequestError,
    UniqueViolationError,
    UnprocessableEntityError,
    not_found,
)
from jsonapi_persistence_mongo.errors import normalize_error


class Person(BaseModel):
    name: str
    age: int


def _validation_error() -> ValidationError:
    with pytest.raises(ValidationError) as exc_info:
        Person.model_validate({"age": "old"})
    return exc_info.value


def test_validation_error_yields_one_422_per_field() -> None:
    errors = normalize_error(_validation_error())
    assert len(errors) == 2
    assert all(isinstance(e, UnprocessableEntityError) for e in errors)
    assert {e.code for e in errors} == {"invalid_field_value"}
    details = sorted(e.detail for e in errors)
    assert details[0].startswith("age:")
    assert details[1].startswith("name:")


def test_duplicate_key_is_unique_violation_with_code() -> None:
    raw = DuplicateKeyError("E11000 duplicate key", code=11000)
    [err] = normalize_error(raw)
    assert isinstance(err, UniqueViolationError)
    assert err.status == 409
    assert err.backend_code == 11000
    assert "code" not in err.to_dict()
    assert err.raw_error is raw


def test_document_validation_write_error_is_422() -> None:
    [err] = normalize_error(WriteError("Document failed validation", code=121))
    assert isinstance(err, UnprocessableEntityError)


def test_bulk_write_errors_mapped_individually() -> None:
    raw = BulkWriteError(
        {"writeErrors": [{"code": 11000, "errmsg": "dup"}, {"code": 121, "errmsg": "bad"}]}
    )
    errors = normalize_error(raw)
    assert [type(e) for e in errors] == [UniqueViolationError, UnprocessableEntityError]


def test_invalid_id_is_bad_request() -> None:
    [err] = normalize_error(InvalidId("'x' is not a valid ObjectId"))
    assert isinstance(err, BadRequestError)


def test_batches_are_flattened() -> None:
    a, b = not_found(), not_found("other")
    assert normalize_error(APIErrors([a, b])) == [a, b]


def test_unknown_errors_pass_through_raw() -> None:
    raw = RuntimeError("boom")
    assert normalize_error(raw) == [raw]
