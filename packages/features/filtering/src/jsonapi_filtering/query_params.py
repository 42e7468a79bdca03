"""Normalize include, sort, page and fields parameters."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any, NamedTuple

from .exceptions import QueryParamError
from .pagination import PaginationParser

if TYPE_CHECKING:
    from collections.abc import Mapping

    from jsonapi_specifications.ast import FilterNode

# Parameter names made only of a-z are reserved by JSON:API.
_RESERVED_NAME = re.compile(r"[a-z]+\Z")
KNOWN_PARAMS = frozenset({"include", "sort", "page", "fields", "filter"})


class QueryParams(NamedTuple):
    include: tuple[str, ...] | None = None
    sort: tuple[tuple[str, str], ...] | None = None
    offset: int | None = None
    limit: int | None = None
    fields: dict[str, list[str]] | None = None
    filter: list[FilterNode] | None = None
    custom: dict[str, Any] | None = None


def parse_query_params(
    params: Mapping[str, Any] | None,
    *,
    pagination: PaginationParser | None = None,
) -> QueryParams:
    """Validate and normalize everything but ``filter``.

    The filter value is left for the backend-aware filter parser.
    """
    params = dict(params or {})
    for name in params:
        if name not in KNOWN_PARAMS and _RESERVED_NAME.match(name):
            raise QueryParamError(
                detail=f"Unrecognized query parameter {name!r}; custom parameters "
                "must contain a character other than a-z."
            )

    page = (pagination or PaginationParser()).parse(params.get("page"))
    return QueryParams(
        include=_parse_include(params.get("include")),
        sort=_parse_sort(params.get("sort")),
        offset=page.offset,
        limit=page.limit,
        fields=_parse_fields(params.get("fields")),
        filter=None,
        custom={k: v for k, v in params.items() if k not in KNOWN_PARAMS},
    )


def _comma_list(raw: Any, name: str) -> list[str]:
    if not isinstance(raw, str):
        raise QueryParamError(detail=f"The {name} parameter must be a comma-separated string.")
    items = [part.strip() for part in raw.split(",")]
    if any(not it for it in items):
        raise QueryParamError(detail=f"The {name} parameter contains an empty entry.")
    return items


def _parse_include(raw: Any) -> tuple[str, ...] | None:
    if raw is None:
        return None
    return tuple(_comma_list(raw, "include"))


def _parse_sort(raw: Any) -> tuple[tuple[str, str], ...] | None:
    if raw is None:
        return None
    out: list[tuple[str, str]] = []
    for item in _comma_list(raw, "sort"):
        field, direction = (item[1:], "desc") if item.startswith("-") else (item, "asc")
        if not field:
            raise QueryParamError(detail="Sort fields cannot be empty.")
        out.append((field, direction))
    return tuple(out)


def _parse_fields(raw: Any) -> dict[str, list[str]] | None:
    if raw is None:
        return None
    if not isinstance(raw, dict):
        raise QueryParamError(detail="The fields parameter must be an object, e.g. fields[people]=name.")
    out: dict[str, list[str]] = {}
    for type_name, value in raw.items():
        if not isinstance(value, str):
            raise QueryParamError(detail=f"fields[{type_name}] must be a comma-separated string.")
        out[type_name] = [f.strip() for f in value.split(",") if f.strip()]
    return out
