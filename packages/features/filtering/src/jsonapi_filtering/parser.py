"""FilterParser — filter parameter -> validated Predicate / FieldConstraint list."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .exceptions import FilterParseError
from .query_string import get_raw_param_values
from .syntax import ExpressionSyntax, StructuredSyntax

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from jsonapi_specifications.ast import FilterNode


class FilterParser:
    """Parse the ``filter`` parameter against a backend's legal operators.

    The raw query string is preferred so that backtick literals survive
    untouched; a pre-structured ``filter`` object (bracketed keys) is used
    when no expression list is present.
    """

    def __init__(self, legal_unary: Sequence[str], legal_binary: Sequence[str]) -> None:
        self._expressions = ExpressionSyntax(legal_unary, legal_binary)
        self._structured = StructuredSyntax(legal_unary, legal_binary)

    def parse(
        self,
        raw_query: str | None,
        params: Mapping[str, Any] | None = None,
        *,
        filter_key: str = "filter",
    ) -> list[FilterNode] | None:
        """Return the top-level filter list, or ``None`` when no filter was sent."""
        raw_values = [v for v in get_raw_param_values(raw_query, filter_key) if v.strip()]
        if raw_values:
            nodes: list[FilterNode] = []
            for value in raw_values:
                if not value.lstrip().startswith("("):
                    raise FilterParseError(
                        detail="Filter parameter must be a list of parenthesized expressions."
                    )
                nodes.extend(self._expressions.parse_filter(value))
            return nodes

        structured = (params or {}).get(filter_key)
        if structured is None or structured == "":
            return None
        return self._structured.parse_filter(structured)

    def parse_expression(self, raw: str) -> list[FilterNode]:
        """Parse a bare expression list (no query string around it)."""
        return self._expressions.parse_filter(raw)


def parse_filter_param(
    legal_unary: Sequence[str],
    legal_binary: Sequence[str],
    raw_query: str | None,
    params: Mapping[str, Any] | None,
) -> list[FilterNode] | None:
    """Default filter parameter parser used by the controller."""
    return FilterParser(legal_unary, legal_binary).parse(raw_query, params)
