"""Filtering package exceptions."""

from __future__ import annotations

from jsonapi_core.primitives.exceptions import BadRequestError


class FilterParseError(BadRequestError):
    """Raised when a filter expression or structure is invalid."""

    title = "Invalid Filter"


class QueryParamError(BadRequestError):
    """Raised when include/sort/page/fields or an unknown parameter is invalid."""

    title = "Invalid Query Parameter"
