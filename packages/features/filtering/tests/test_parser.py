"""Tests for FilterParser and the filter syntaxes."""

from __future__ import annotations

import pytest

from jsonapi_filtering.exceptions import FilterParseError
from jsonapi_filtering.parser import FilterParser, parse_filter_param
from jsonapi_filtering.syntax import ExpressionSyntax, StructuredSyntax
from jsonapi_specifications import FieldConstraint, OperatorNotFoundError, Predicate

UNARY = ("and", "or")
BINARY = ("eq", "neq", "gt", "gte", "lt", "lte", "in", "nin")


@pytest.fixture
def expressions():
    return ExpressionSyntax(UNARY, BINARY)


@pytest.fixture
def structured():
    return StructuredSyntax(UNARY, BINARY)


def test_two_item_expression_means_equality(expressions) -> None:
    assert expressions.parse_filter("(name,`Ann`)") == [FieldConstraint("name", "eq", "Ann")]


def test_literals(expressions) -> None:
    nodes = expressions.parse_filter(
        "(age,gte,18)(score,lt,-1.5)(active,true)(nickname,null)(tags,in,[`a`,`b`])"
    )
    assert [n.value for n in nodes] == [18, -1.5, True, None, ["a", "b"]]


def test_nested_predicates(expressions) -> None:
    (node,) = expressions.parse_filter("(or,(name,`Ann`),(and,(age,lt,20),(age,gt,10)))")
    assert node == Predicate(
        "or",
        (
            FieldConstraint("name", "eq", "Ann"),
            Predicate("and", (FieldConstraint("age", "lt", 20), FieldConstraint("age", "gt", 10))),
        ),
    )


def test_backtick_escapes_and_whitespace(expressions) -> None:
    (node,) = expressions.parse_filter(" ( title , eq , `a\\`b, (c)` ) ")
    assert node == FieldConstraint("title", "eq", "a`b, (c)")


def test_same_filter_parses_to_equal_trees(expressions) -> None:
    raw = "(or,(name,`Ann`),(age,in,[1,2]))"
    assert expressions.parse_filter(raw) == expressions.parse_filter(raw)


@pytest.mark.parametrize(
    "raw",
    [
        "(age,like,`A%`)",
        "(a,between,[1,2])",
    ],
)
def test_illegal_operators_are_rejected(expressions, raw) -> None:
    with pytest.raises(OperatorNotFoundError) as exc_info:
        expressions.parse_filter(raw)
    assert exc_info.value.status == 400


def test_combinator_must_be_declared_by_backend() -> None:
    syntax = ExpressionSyntax(("or",), BINARY)
    with pytest.raises(OperatorNotFoundError):
        syntax.parse_filter("(and,(a,1))")


@pytest.mark.parametrize(
    "raw",
    [
        "name,`Ann`",
        "()",
        "(name,Ann)",
        "(tags,in,1)",
        "(name,`Ann`",
        "(name,`unterminated)",
        "(1,2)",
        "(a,eq,1,2)",
        "(a,eq,(b,1))",
        "(a,eq,$)",
    ],
)
def test_malformed_expressions(expressions, raw) -> None:
    with pytest.raises(FilterParseError):
        expressions.parse_filter(raw)


def test_structured_filters(structured) -> None:
    nodes = structured.parse_filter(
        {
            "name": "Ann",
            "age": {"gte": "18", "lt": "65"},
            "tags": {"in": "a, b"},
            "or": [{"nickname": "null"}, {"active": "true"}],
        }
    )
    assert nodes == [
        FieldConstraint("name", "eq", "Ann"),
        FieldConstraint("age", "gte", 18),
        FieldConstraint("age", "lt", 65),
        FieldConstraint("tags", "in", ["a", "b"]),
        Predicate(
            "or",
            (FieldConstraint("nickname", "eq", None), FieldConstraint("active", "eq", True)),
        ),
    ]


def test_structured_predicate_from_bracketed_keys(structured) -> None:
    (node,) = structured.parse_filter({"or": {"0": {"name": "a"}, "1": {"name": "b", "age": "2.5"}}})
    assert node.operator == "or"
    assert node.value[1] == Predicate(
        "and", (FieldConstraint("name", "eq", "b"), FieldConstraint("age", "eq", 2.5))
    )


def test_structured_rejects_illegal_operator(structured) -> None:
    with pytest.raises(OperatorNotFoundError):
        structured.parse_filter({"age": {"between": "1,2"}})
    with pytest.raises(FilterParseError):
        structured.parse_filter({"or": "x"})
    with pytest.raises(FilterParseError):
        structured.parse_filter("name")


def test_parser_prefers_raw_query_string() -> None:
    parser = FilterParser(UNARY, BINARY)
    nodes = parser.parse(
        "filter=(name,%60A+B%60)&filter=(age,gt,3)&page[limit]=2",
        {"filter": {"ignored": "1"}},
    )
    assert nodes == [FieldConstraint("name", "eq", "A+B"), FieldConstraint("age", "gt", 3)]


def test_parser_falls_back_to_structured_params() -> None:
    nodes = parse_filter_param(UNARY, BINARY, "filter[age][gte]=18", {"filter": {"age": {"gte": "18"}}})
    assert nodes == [FieldConstraint("age", "gte", 18)]


def test_parser_without_filter_returns_none() -> None:
    parser = FilterParser(UNARY, BINARY)
    assert parser.parse(None) is None
    assert parser.parse("sort=name", {"sort": "name"}) is None
    assert parser.parse("filter=", {"filter": ""}) is None


def test_parser_requires_parenthesized_list() -> None:
    with pytest.raises(FilterParseError):
        FilterParser(UNARY, BINARY).parse("filter=name", {"filter": "name"})
