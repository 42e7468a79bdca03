"""jsonapi-persistence-memory — dict-backed storage adapter."""

from __future__ import annotations

from .adapter import InMemoryAdapter

__all__ = ["InMemoryAdapter"]
