"""Raw query string helpers — bracketed keys and undecoded parameter access."""

from __future__ import annotations

import re
from typing import Any
from urllib.parse import parse_qsl, unquote

from .exceptions import QueryParamError

_KEY_PART = re.compile(r"\[([^\[\]]*)\]")


def split_key(key: str) -> list[str]:
    """``page[offset]`` -> ``["page", "offset"]``; ``a[]`` -> ``["a", ""]``."""
    head, bracket, _ = key.partition("[")
    if not bracket:
        return [key]
    rest = key[len(head):]
    parts = _KEY_PART.findall(rest)
    if "".join(f"[{p}]" for p in parts) != rest:
        return [key]
    return [head, *parts]


def parse_nested_query(raw: str | None) -> dict[str, Any]:
    """Parse a query string, nesting bracketed keys into dicts.

    Repeated plain keys and ``key[]`` keys collect into lists.
    """
    out: dict[str, Any] = {}
    for key, value in parse_qsl(raw or "", keep_blank_values=True):
        _assign(out, split_key(key), value, key)
    return out


def _assign(target: dict[str, Any], path: list[str], value: str, full_key: str) -> None:
    name, rest = path[0], path[1:]
    if not rest:
        if name in target:
            existing = target[name]
            if isinstance(existing, dict):
                raise QueryParamError(detail=f"Conflicting values for parameter {full_key!r}.")
            target[name] = [*existing, value] if isinstance(existing, list) else [existing, value]
        else:
            target[name] = value
        return

    if rest == [""]:
        existing = target.setdefault(name, [])
        if not isinstance(existing, list):
            existing = target[name] = [existing]
        existing.append(value)
        return

    child = target.setdefault(name, {})
    if not isinstance(child, dict):
        raise QueryParamError(detail=f"Conflicting values for parameter {full_key!r}.")
    _assign(child, rest, value, full_key)


def get_raw_param_values(raw: str | None, name: str) -> list[str]:
    """Values of parameter *name*, percent-decoded but with ``+`` kept literal."""
    if not raw:
        return []
    values = []
    for pair in raw.split("&"):
        key, sep, value = pair.partition("=")
        if sep and unquote(key) == name:
            values.append(unquote(value))
    return values
