"""APIController — runs one request through the pipeline to an HTTPResponse."""

from __future__ import annotations

import inspect
import logging
from typing import TYPE_CHECKING, Any, ClassVar

from jsonapi_core.document import Document
from jsonapi_core.http import JSON_API_MEDIA_TYPE, HTTPResponse, Result
from jsonapi_core.primitives.exceptions import APIError, as_error_list, not_found
from jsonapi_core.resources import Collection
from jsonapi_filtering.parser import parse_filter_param
from jsonapi_filtering.query_params import parse_query_params

from .steps import (
    QUERY_BUILDERS,
    TransformContext,
    apply_transform,
    check_body_existence,
    check_method,
    label_to_ids,
    negotiate_content_type,
    parse_request_primary,
    validate_content_type,
    validate_request_document,
    validate_resources,
)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Iterable, Mapping, Sequence

    from jsonapi_core.http import Request
    from jsonapi_core.query import Query
    from jsonapi_core.registry import ResourceTypeRegistry
    from jsonapi_filtering.pagination import PaginationParser
    from jsonapi_specifications.ast import FilterNode

    FilterParamParser = Callable[
        [Sequence[str], Sequence[str], "str | None", "Mapping[str, Any] | None"],
        "list[FilterNode] | None",
    ]
    QueryTransform = Callable[[Query], "Query | Awaitable[Query]"]

logger = logging.getLogger("jsonapi.controller")


async def _resolve(value: Any) -> Any:
    return await value if inspect.isawaitable(value) else value


def pick_status(statuses: Iterable[int]) -> int:
    """The first error's status represents the whole response."""
    return next(iter(statuses))


def _make_result_from_errors(
    make_doc: Callable[..., Document], errors: BaseException | Iterable[BaseException]
) -> Result:
    api_errors = [APIError.from_error(it) for it in as_error_list(errors)]
    return Result(
        document=make_doc(errors=api_errors),
        status=pick_status(it.status for it in api_errors),
    )


def _result_to_http_response(result: Result, negotiated_media_type: str | None) -> HTTPResponse:
    headers = {
        # Bodies are always JSON:API, even when nothing could be negotiated.
        "content-type": negotiated_media_type or JSON_API_MEDIA_TYPE,
        "vary": "Accept",
        **result.headers,
    }
    if result.status:
        status = result.status
    elif result.document is not None:
        errors = result.document.errors
        status = pick_status(it.status for it in errors) if errors else 200
    else:
        status = 204
    body = str(result.document) if result.document is not None else None
    return HTTPResponse(status=status, headers=headers, body=body)


class APIController:
    """
    Protocol-agnostic JSON:API request handler.

    Runs method and body checks, content negotiation, label resolution,
    query-parameter and body parsing, hooks, one adapter query, and response
    rendering. ``handle`` never raises: every failure becomes an error
    document with the first error's status.

    Usage::

        controller = APIController(registry)
        response = await controller.handle(request)
    """

    supported_ext: ClassVar[tuple[str, ...]] = ()

    def __init__(
        self,
        registry: ResourceTypeRegistry,
        *,
        filter_parser: FilterParamParser | None = None,
        supported_ext: Sequence[str] | None = None,
        pagination: PaginationParser | None = None,
    ) -> None:
        self._registry = registry
        self._filter_parser = filter_parser or self.default_filter_param_parser
        self._supported_ext = tuple(supported_ext) if supported_ext is not None else self.supported_ext
        self._pagination = pagination

    async def handle(
        self,
        request: Request,
        framework_req: Any = None,
        framework_res: Any = None,
        query_transform: QueryTransform | None = None,
    ) -> HTTPResponse:
        registry = self._registry
        templates = registry.url_templates()

        def make_doc(**data: Any) -> Document:
            return Document(req_uri=request.uri, url_templates=templates, **data)

        content_type: str | None = None
        try:
            check_method(request)
            request.method = request.method.lower()
            check_body_existence(request)

            # Negotiate early so clients we cannot serve fail fast.
            content_type = negotiate_content_type(request.accepts, [JSON_API_MEDIA_TYPE])

            if not registry.has_type(request.type):
                raise not_found(f"{request.type} is not a valid type.")

            label_mapped_to_nothing = False
            mapped_label: Any = None
            if request.id_or_ids and request.allow_label:
                mapped_label = await label_to_ids(
                    request.type, request.id_or_ids, registry, framework_req
                )
                request.id_or_ids = mapped_label
                label_mapped_to_nothing = mapped_label is None or mapped_label == []

            adapter = registry.adapter(request.type)
            raw_params = request.query_params
            request.query_params = parse_query_params(
                raw_params, pagination=self._pagination
            )._replace(
                filter=self._filter_parser(
                    adapter.unary_filter_operators,
                    adapter.binary_filter_operators,
                    request.raw_query_string,
                    raw_params,
                )
            )

            ctx = TransformContext(framework_req, framework_res, request, registry)
            if request.has_body:
                validate_content_type(request, self._supported_ext)
                validate_request_document(
                    request.body, about_relationship=request.about_relationship
                )
                primary = parse_request_primary(
                    request.body["data"], request.about_relationship
                )
                if not request.about_relationship:
                    validate_resources(
                        request.type, primary, registry, partial=request.method == "patch"
                    )
                request.primary = await apply_transform(primary, "before_save", ctx)

            # Nothing to address: no query is built, transformed or run.
            if label_mapped_to_nothing:
                result = Result(
                    document=make_doc(
                        primary=Collection() if isinstance(mapped_label, list) else None
                    )
                )
            else:
                query = QUERY_BUILDERS[request.method](request, registry, make_doc)
                if query_transform is not None:
                    query = await _resolve(query_transform(query))
                result = await self._run_query(query, make_doc)

            if result.document is not None:
                document = result.document
                document.primary = await apply_transform(document.primary, "before_render", ctx)
                document.included = await apply_transform(document.included, "before_render", ctx)

        except Exception as err:
            for it in as_error_list(err):
                logger.info("API controller caught error: %r", it, exc_info=it)
            result = _make_result_from_errors(make_doc, err)

        return _result_to_http_response(result, content_type)

    async def _run_query(self, query: Query, make_doc: Callable[..., Document]) -> Result:
        adapter = self._registry.adapter(query.type)
        try:
            raw = await adapter.do_query(query)
        except Exception as exc:
            if query.catch is not None:
                return await _resolve(query.catch(exc))
            return _make_result_from_errors(make_doc, exc)
        return await _resolve(query.returning(raw))

    @staticmethod
    async def response_from_external_error(
        errors: BaseException | Iterable[BaseException],
        accepts: str | None,
    ) -> HTTPResponse:
        """Render errors raised outside the pipeline (e.g. while building the Request)."""
        try:
            content_type = negotiate_content_type(accepts, [JSON_API_MEDIA_TYPE])
        except APIError:
            # HTTP allows ignoring Accept when nothing fits.
            content_type = JSON_API_MEDIA_TYPE
        return _result_to_http_response(
            _make_result_from_errors(lambda **data: Document(**data), errors),
            content_type,
        )

    @staticmethod
    def default_filter_param_parser(
        legal_unary: Sequence[str],
        legal_binary: Sequence[str],
        raw_query: str | None,
        params: Mapping[str, Any] | None,
    ) -> list[FilterNode] | None:
        return parse_filter_param(legal_unary, legal_binary, raw_query, params)
