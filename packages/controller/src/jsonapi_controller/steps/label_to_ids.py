"""Resolve a label such as ``mine`` in the id slot to concrete ids."""

from __future__ import annotations

import inspect
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from jsonapi_core.registry import ResourceTypeRegistry


async def label_to_ids(
    type_name: str,
    label: str | list[str] | None,
    registry: ResourceTypeRegistry,
    framework_req: Any = None,
) -> str | list[str] | None:
    """Return the ids a registered label maps to, or *label* itself.

    Mappers are called as ``mapper(adapter, framework_req)`` and may be
    sync or async. Labels with no mapper are treated as plain ids.
    """
    if not isinstance(label, str):
        return label
    mapper = registry.label_mappers(type_name).get(label)
    if mapper is None:
        return label
    mapped = mapper(registry.adapter(type_name), framework_req)
    if inspect.isawaitable(mapped):
        mapped = await mapped
    if mapped is None or isinstance(mapped, str):
        return mapped
    return [str(it) for it in mapped]
