"""Build a pipeline ``Request`` from framework-neutral HTTP parts."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from jsonapi_core.http import Request
from jsonapi_core.primitives.exceptions import bad_request
from jsonapi_filtering.query_string import parse_nested_query

from .steps.negotiation import parse_media_type

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger("jsonapi.controller.request")


@dataclass(frozen=True)
class RequestBuilderOptions:
    """
    ``tunnel`` enables ``X-HTTP-Method-Override: PATCH`` on POST requests.
    ``host`` should be set in production: without it the client-controlled
    Host header is used to build the request URI.
    """

    tunnel: bool = False
    host: str | None = None
    protocol: str = "http"

    def __post_init__(self) -> None:
        if not self.host:
            logger.warning(
                "Unsafe: missing `host` option for request building. This is unsafe "
                "unless you have reason to trust the (X-Forwarded-)Host header."
            )


def _has_body(headers: Mapping[str, str]) -> bool:
    if "transfer-encoding" in headers:
        return True
    length = headers.get("content-length")
    return length is not None and length.strip().isdigit()


def build_request(
    method: str,
    url: str,
    headers: Mapping[str, str],
    body: bytes | str | None,
    params: Mapping[str, Any],
    *,
    options: RequestBuilderOptions,
) -> Request:
    """
    Translate one HTTP request into a ``Request``.

    Args:
        method: HTTP verb as received.
        url: Path plus optional query string, e.g. ``/people?sort=name``.
        headers: Request headers; names are matched case-insensitively.
        body: The raw, unread body (or ``None`` when there is none).
        params: Route parameters: ``type``, ``id``, ``id_or_label``,
            ``relationship``, ``related``.
        options: Tunneling, trusted host and protocol settings.

    Raises:
        BadRequestError: On a refused method override or an invalid JSON body.
    """
    headers = {k.lower(): v for k, v in headers.items()}
    path, sep, raw_query = url.partition("?")
    raw_query_string = raw_query if sep and raw_query else None

    request = Request()
    request.query_params = parse_nested_query(raw_query_string) if raw_query_string else {}
    request.raw_query_string = raw_query_string

    request.allow_label = bool(params.get("id_or_label") and not params.get("id"))
    request.id_or_ids = params.get("id") or params.get("id_or_label")
    request.type = params.get("type") or ""
    request.about_relationship = bool(params.get("relationship"))
    request.relationship = params.get("related") or params.get("relationship")

    host = options.host or headers.get("host", "")
    request.uri = f"{options.protocol}://{host}{url}"
    request.method = method.lower()
    request.accepts = headers.get("accept")

    # Only PATCH may be tunneled, and only when switched on.
    requested = headers.get("x-http-method-override", "").lower()
    if options.tunnel and request.method == "post" and requested == "patch":
        request.method = "patch"
    elif requested:
        raise bad_request(f'Cannot tunnel to the method "{requested.upper()}".')

    if not _has_body(headers) or body is None:
        request.has_body = False
        request.body = None
        return request

    request.content_type = headers.get("content-type")
    if len(body) == 0:
        request.has_body = False
        request.body = None
        return request

    _, type_params = parse_media_type(request.content_type or "")
    try:
        text = body.decode(type_params.get("charset", "utf-8")) if isinstance(body, bytes) else body
        request.body = json.loads(text)
    except (UnicodeDecodeError, LookupError, ValueError) as exc:
        raise bad_request("Request contains invalid JSON.", raw_error=exc) from exc
    request.has_body = True
    return request
