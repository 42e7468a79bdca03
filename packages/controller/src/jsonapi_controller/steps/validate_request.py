"""Cheap request checks run before anything touches the registry."""

from __future__ import annotations

from typing import TYPE_CHECKING

from jsonapi_core.http import SUPPORTED_METHODS
from jsonapi_core.primitives.exceptions import bad_request, method_not_allowed

if TYPE_CHECKING:
    from jsonapi_core.http import Request


def check_method(request: Request) -> None:
    method = (request.method or "").lower()
    if method in SUPPORTED_METHODS:
        return
    if method == "put":
        raise method_not_allowed(
            "PUT is not supported; use PATCH to update a resource (partially or fully)."
        )
    raise method_not_allowed(f"The method {method.upper()!r} is not supported.")


def check_body_existence(request: Request) -> None:
    needs_body = request.method in ("post", "patch") or (
        request.method == "delete" and request.about_relationship
    )
    if needs_body and not request.has_body:
        raise bad_request("This request needs a body, but didn't have one.")
    if not needs_body and request.has_body:
        raise bad_request("This request should not have a body, but does.")
