"""jsonapi-controller — the request → query → response pipeline."""

from __future__ import annotations

from .controller import APIController, pick_status
from .request_builder import RequestBuilderOptions, build_request
from .steps import TransformContext

__all__ = [
    "APIController",
    "RequestBuilderOptions",
    "TransformContext",
    "build_request",
    "pick_status",
]
