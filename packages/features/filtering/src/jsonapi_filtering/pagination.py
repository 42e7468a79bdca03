"""PaginationParser — ``page[offset]`` / ``page[limit]`` from query params."""

from __future__ import annotations

from typing import Any, NamedTuple

from .exceptions import QueryParamError


class PaginationResult(NamedTuple):
    offset: int | None
    limit: int | None


class PaginationParser:
    """Parse and validate offset/limit pagination.

    Values must be non-negative integers; ``max_limit`` caps the limit when
    set.
    """

    def __init__(self, *, max_limit: int | None = None) -> None:
        self._max_limit = max_limit

    def parse(
        self,
        page: Any,
        *,
        offset_key: str = "offset",
        limit_key: str = "limit",
    ) -> PaginationResult:
        if page is None:
            return PaginationResult(offset=None, limit=None)
        if not isinstance(page, dict):
            raise QueryParamError(detail="The page parameter must be an object, e.g. page[limit]=10.")
        unknown = set(page) - {offset_key, limit_key}
        if unknown:
            raise QueryParamError(
                detail=f"Unsupported page parameter(s): {', '.join(sorted(unknown))}."
            )
        offset = self._non_negative(page.get(offset_key), offset_key)
        limit = self._non_negative(page.get(limit_key), limit_key)
        if limit is not None and self._max_limit is not None:
            limit = min(limit, self._max_limit)
        return PaginationResult(offset=offset, limit=limit)

    @staticmethod
    def _non_negative(v: Any, key: str) -> int | None:
        if v is None:
            return None
        try:
            value = int(v)
        except (TypeError, ValueError):
            value = -1
        if value < 0:
            raise QueryParamError(
                detail=f"page[{key}] must be a non-negative integer, got {v!r}."
            )
        return value
