"""API query parsing — filter grammar, include, sort, pagination, sparse fields."""

from __future__ import annotations

from .exceptions import FilterParseError, QueryParamError
from .pagination import PaginationParser, PaginationResult
from .parser import FilterParser, parse_filter_param
from .query_params import QueryParams, parse_query_params
from .query_string import get_raw_param_values, parse_nested_query
from .syntax import ExpressionSyntax, FilterSyntax, StructuredSyntax

__all__ = [
    "ExpressionSyntax",
    "FilterParseError",
    "FilterParser",
    "FilterSyntax",
    "PaginationParser",
    "PaginationResult",
    "QueryParamError",
    "QueryParams",
    "StructuredSyntax",
    "get_raw_param_values",
    "parse_filter_param",
    "parse_nested_query",
    "parse_query_params",
]
