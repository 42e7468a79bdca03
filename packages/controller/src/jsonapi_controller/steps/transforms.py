"""beforeSave / beforeRender hook runner."""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Literal

from jsonapi_core.resources import Collection, Resource

if TYPE_CHECKING:
    from jsonapi_core.document import PrimaryData
    from jsonapi_core.http import Request
    from jsonapi_core.registry import ResourceTypeRegistry

HookName = Literal["before_save", "before_render"]


@dataclass(frozen=True)
class TransformContext:
    """Second argument handed to every hook."""

    framework_req: Any
    framework_res: Any
    request: Request
    registry: ResourceTypeRegistry


async def _transform_one(resource: Resource, hook: HookName, ctx: TransformContext) -> Resource | None:
    if not ctx.registry.has_type(resource.type):
        return resource
    fn = getattr(ctx.registry, hook)(resource.type)
    if fn is None:
        return resource
    out = fn(resource, ctx)
    if inspect.isawaitable(out):
        out = await out
    return out


async def apply_transform(data: PrimaryData, hook: HookName, ctx: TransformContext) -> Any:
    """Run *hook* over every resource in *data*.

    A hook returning ``None`` drops the resource from a Collection and nulls
    a single primary. Linkage and ``None`` pass through unchanged.
    """
    if isinstance(data, Resource):
        return await _transform_one(data, hook, ctx)
    if isinstance(data, Collection):
        out = [await _transform_one(it, hook, ctx) for it in data]
        return Collection(it for it in out if it is not None)
    return data
