"""Map driver and validation failures onto the API error taxonomy."""

from __future__ import annotations

import logging
from typing import Any

from bson.errors import InvalidId
from pydantic import ValidationError
from pymongo.errors import BulkWriteError, DuplicateKeyError, WriteError

from jsonapi_core.primitives.exceptions import (
    APIErrors,
    bad_request,
    invalid_field_value,
    unique_violation,
)

logger = logging.getLogger("jsonapi.persistence.mongo")

DUPLICATE_KEY = 11000
DOCUMENT_VALIDATION_FAILURE = 121


def _write_error(code: int | None, message: str, raw: BaseException) -> BaseException:
    if code == DUPLICATE_KEY:
        # code is kept for callers that switch on it in a custom catch
        return unique_violation(backend_code=DUPLICATE_KEY, raw_error=raw)
    if code == DOCUMENT_VALIDATION_FAILURE:
        return invalid_field_value(message or "Document failed validation.", raw_error=raw)
    return raw


def _validation_errors(err: ValidationError) -> list[BaseException]:
    out: list[BaseException] = []
    for item in err.errors():
        loc = ".".join(str(part) for part in item.get("loc", ()))
        detail = f"{loc}: {item['msg']}" if loc else str(item["msg"])
        out.append(invalid_field_value(detail, raw_error=err))
    return out


def normalize_error(err: BaseException) -> list[BaseException]:
    """Return one entry per underlying problem.

    Recognized failures become APIErrors; anything else is returned raw and
    left to the controller's generic mapping.
    """
    if isinstance(err, APIErrors):
        return list(err.errors)
    if isinstance(err, ValidationError):
        logger.debug("Schema validation failed with %d error(s)", err.error_count())
        return _validation_errors(err)
    if isinstance(err, BulkWriteError):
        details: Any = err.details or {}
        write_errors = details.get("writeErrors") or []
        logger.debug("Bulk write failed with %d write error(s)", len(write_errors))
        mapped = [_write_error(it.get("code"), it.get("errmsg", ""), err) for it in write_errors]
        return mapped or [err]
    if isinstance(err, DuplicateKeyError):
        logger.debug("Duplicate key: %s", err)
        return [unique_violation(backend_code=DUPLICATE_KEY, raw_error=err)]
    if isinstance(err, WriteError):
        logger.debug("Write error %s: %s", err.code, err)
        return [_write_error(err.code, str(err), err)]
    if isinstance(err, InvalidId):
        return [bad_request(str(err), raw_error=err)]
    return [err]
