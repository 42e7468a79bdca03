"""FilterSyntax — pluggable filter syntaxes (parenthesized expressions, structured objects)."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

from jsonapi_specifications.ast import FieldConstraint, Predicate
from jsonapi_specifications.exceptions import OperatorNotFoundError
from jsonapi_specifications.operators import LIST_OPERATORS, LOGICAL_OPERATORS, FilterOperator

from .exceptions import FilterParseError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from jsonapi_specifications.ast import FilterNode

_SYMBOL = re.compile(r"[A-Za-z_][A-Za-z0-9_.\-]*\Z")
_NUMBER = re.compile(r"-?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?\Z")
_PUNCTUATION = "()[],"


class Symbol(str):
    """A bare identifier: a field or operator name."""


class Expression(tuple):
    """A parenthesized ``(item, item, ...)`` group."""


class FilterSyntax:
    """Base for filter syntax parsers.

    ``legal_unary`` are combinators written operator-first, ``legal_binary``
    are comparisons written ``field, operator, value``.
    """

    def __init__(self, legal_unary: Sequence[str], legal_binary: Sequence[str]) -> None:
        self.legal_unary = tuple(legal_unary)
        self.legal_binary = tuple(legal_binary)

    def parse_filter(self, raw: Any) -> list[FilterNode]:
        """Parse raw input into top-level Predicate / FieldConstraint nodes."""
        raise NotImplementedError

    def _check_binary(self, op: str) -> str:
        if op not in self.legal_binary:
            raise OperatorNotFoundError(op, list(self.legal_binary))
        return op

    def _check_unary(self, op: str) -> str:
        if op not in self.legal_unary:
            raise OperatorNotFoundError(op, list(self.legal_unary))
        return op


# ── Parenthesized expressions ────────────────────────────────────────


def tokenize(raw: str) -> list[Any]:
    """Split *raw* into punctuation, string literals and atoms."""
    tokens: list[Any] = []
    i, n = 0, len(raw)
    while i < n:
        ch = raw[i]
        if ch.isspace():
            i += 1
        elif ch in _PUNCTUATION:
            tokens.append(ch)
            i += 1
        elif ch == "`":
            value, i = _read_string(raw, i + 1)
            tokens.append(("string", value))
        else:
            start = i
            while i < n and not raw[i].isspace() and raw[i] not in _PUNCTUATION and raw[i] != "`":
                i += 1
            tokens.append(("atom", raw[start:i]))
    return tokens


def _read_string(raw: str, i: int) -> tuple[str, int]:
    chars: list[str] = []
    while i < len(raw):
        ch = raw[i]
        if ch == "\\" and i + 1 < len(raw):
            chars.append(raw[i + 1])
            i += 2
        elif ch == "`":
            return "".join(chars), i + 1
        else:
            chars.append(ch)
            i += 1
    raise FilterParseError(detail="Unterminated string literal in filter.")


def _atom_value(text: str) -> Any:
    lowered = text.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    if lowered == "null":
        return None
    if _NUMBER.match(text):
        return float(text) if any(c in text for c in ".eE") else int(text)
    if _SYMBOL.match(text):
        return Symbol(text)
    raise FilterParseError(detail=f"Unexpected token {text!r} in filter.")


class _TokenStream:
    def __init__(self, tokens: list[Any]) -> None:
        self._tokens = tokens
        self._pos = 0

    def peek(self) -> Any:
        return self._tokens[self._pos] if self._pos < len(self._tokens) else None

    def next(self) -> Any:
        tok = self.peek()
        if tok is None:
            raise FilterParseError(detail="Unexpected end of filter expression.")
        self._pos += 1
        return tok

    def expect(self, tok: str) -> None:
        got = self.next()
        if got != tok:
            raise FilterParseError(detail=f"Expected {tok!r} in filter, got {_describe(got)}.")


def _describe(tok: Any) -> str:
    return repr(tok[1]) if isinstance(tok, tuple) else repr(tok)


def parse_expressions(raw: str) -> list[Expression]:
    """Parse one or more concatenated ``(...)`` groups."""
    stream = _TokenStream(tokenize(raw))
    out: list[Expression] = []
    while stream.peek() is not None:
        if stream.peek() != "(":
            raise FilterParseError(
                detail=f"Filter expressions must be parenthesized, got {_describe(stream.peek())}."
            )
        out.append(_parse_group(stream, "(", ")", Expression))
    if not out:
        raise FilterParseError(detail="Filter parameter is empty.")
    return out


def _parse_group(stream: _TokenStream, open_: str, close: str, kind: type) -> Any:
    stream.expect(open_)
    items: list[Any] = []
    if stream.peek() == close:
        stream.next()
        return kind(items)
    while True:
        items.append(_parse_item(stream))
        tok = stream.next()
        if tok == close:
            return kind(items)
        if tok != ",":
            raise FilterParseError(detail=f"Expected ',' or {close!r} in filter, got {_describe(tok)}.")


def _parse_item(stream: _TokenStream) -> Any:
    tok = stream.peek()
    if tok == "(":
        return _parse_group(stream, "(", ")", Expression)
    if tok == "[":
        return _parse_group(stream, "[", "]", list)
    tok = stream.next()
    if isinstance(tok, tuple):
        kind, text = tok
        return text if kind == "string" else _atom_value(text)
    raise FilterParseError(detail=f"Unexpected {tok!r} in filter.")


class ExpressionSyntax(FilterSyntax):
    """Parse ``(field,op,value)`` / ``(field,value)`` / ``(and,(...),(...))`` lists.

    String values are backtick-quoted, lists use ``[a,b]``; numbers, ``true``,
    ``false`` and ``null`` are literals. Concatenated groups are AND-ed by the
    caller.
    """

    def parse_filter(self, raw: Any) -> list[FilterNode]:
        if not isinstance(raw, str):
            raise FilterParseError(detail="Filter expression must be a string.")
        return [self._to_node(expr) for expr in parse_expressions(raw)]

    def _to_node(self, expr: Any) -> FilterNode:
        if not isinstance(expr, Expression):
            raise FilterParseError(detail="Expected a parenthesized filter expression.")
        if not expr:
            raise FilterParseError(detail="Empty filter expression '()'.")

        head = expr[0]
        if not isinstance(head, Symbol):
            raise FilterParseError(
                detail="Filter expressions must start with a field or operator name."
            )

        if head in self.legal_unary or head in LOGICAL_OPERATORS:
            op = self._check_unary(str(head))
            return Predicate(op, tuple(self._to_node(arg) for arg in expr[1:]))

        if len(expr) == 2:
            op, value = self._check_binary(FilterOperator.EQ.value), expr[1]
        elif len(expr) == 3:
            if not isinstance(expr[1], Symbol):
                raise FilterParseError(detail=f"Invalid operator in filter on field {head!r}.")
            op, value = self._check_binary(str(expr[1])), expr[2]
        else:
            raise FilterParseError(
                detail=f"Filter on field {head!r} must have the form (field,value) or (field,operator,value)."
            )
        return FieldConstraint(str(head), op, self._to_value(value, op, str(head)))

    def _to_value(self, value: Any, op: str, field: str) -> Any:
        if isinstance(value, Expression):
            raise FilterParseError(detail=f"Nested expression is not a valid value for field {field!r}.")
        if isinstance(value, Symbol):
            raise FilterParseError(
                detail=f"Bare identifier {value!r} is not a valid value for field {field!r}; "
                "quote strings with backticks."
            )
        if op in LIST_OPERATORS and not isinstance(value, list):
            raise FilterParseError(detail=f"The {op!r} operator requires a list value.")
        if isinstance(value, list):
            return [self._to_value(it, FilterOperator.EQ.value, field) for it in value]
        return value


# ── Structured objects ───────────────────────────────────────────────


class StructuredSyntax(FilterSyntax):
    """Parse pre-structured filter objects.

    ``{"name": "x"}`` means equality, ``{"age": {"gte": "18"}}`` applies that
    operator, ``{"or": [{...}, {...}]}`` builds a predicate. String values
    are coerced the way query strings are read (numbers, booleans, null),
    and ``in``/``nin`` split comma-separated strings.
    """

    def parse_filter(self, raw: Any) -> list[FilterNode]:
        if not isinstance(raw, dict):
            raise FilterParseError(detail="Filter parameter must be an object or an expression list.")
        nodes: list[FilterNode] = []
        for key, val in raw.items():
            if key in LOGICAL_OPERATORS or key in self.legal_unary:
                op = self._check_unary(key)
                if isinstance(val, dict):
                    members = list(val.values())
                elif isinstance(val, list):
                    members = val
                else:
                    raise FilterParseError(detail=f"The {key!r} filter requires a list of filters.")
                nodes.append(Predicate(op, tuple(self._member(it) for it in members)))
            elif isinstance(val, dict):
                for op_name, op_val in val.items():
                    op = self._check_binary(str(op_name).lower())
                    nodes.append(FieldConstraint(key, op, self._parse_value(op_val, op)))
            else:
                op = self._check_binary(FilterOperator.EQ.value)
                nodes.append(FieldConstraint(key, op, self._parse_value(val, op)))
        return nodes

    def _member(self, raw: Any) -> FilterNode:
        nodes = self.parse_filter(raw)
        return nodes[0] if len(nodes) == 1 else Predicate("and", tuple(nodes))

    def _parse_value(self, val: Any, op: str) -> Any:
        if isinstance(val, list):
            return [self._parse_simple_value(v) for v in val]
        if not isinstance(val, str):
            return val
        if op in LIST_OPERATORS:
            return [self._parse_simple_value(v.strip()) for v in val.split(",") if v.strip()]
        return self._parse_simple_value(val)

    def _parse_simple_value(self, s: Any) -> Any:
        """Parse single value (bool, null, int, float, or string)."""
        if not isinstance(s, str):
            return s
        if s.lower() == "true":
            return True
        if s.lower() == "false":
            return False
        if s.lower() == "null":
            return None
        try:
            return int(s)
        except ValueError:
            pass
        try:
            return float(s)
        except ValueError:
            pass
        return s
