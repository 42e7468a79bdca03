"""Error taxonomy for the jsonapi pipeline.

Every failure that reaches a client is an :class:`APIError`. Stages raise a
single ``APIError`` or an :class:`APIErrors` batch; anything else is coerced
with :meth:`APIError.from_error` at the controller's final catch.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterable

UNKNOWN_ERROR_TITLE = "An unknown error occurred while trying to process this request."


class JSONAPIError(Exception):
    """Root exception for the entire jsonapi toolkit."""


class APIError(JSONAPIError):
    """An error that can be rendered into a JSON:API error object.

    ``code`` is the application-level code sent to clients. ``backend_code``
    (e.g. a driver error number) and ``raw_error`` are kept for diagnostics
    only and are never serialized.
    """

    status: int = 500
    title: str | None = None

    def __init__(
        self,
        status: int | None = None,
        title: str | None = None,
        detail: str | None = None,
        *,
        code: str | int | None = None,
        backend_code: str | int | None = None,
        raw_error: BaseException | None = None,
    ) -> None:
        self.status = int(status) if status is not None else type(self).status
        self.title = title if title is not None else type(self).title
        self.detail = detail
        self.code = code
        self.backend_code = backend_code
        self.raw_error = raw_error
        super().__init__(detail or self.title or str(self.status))

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"status": str(self.status)}
        if self.code is not None:
            out["code"] = str(self.code)
        if self.title is not None:
            out["title"] = self.title
        if self.detail is not None:
            out["detail"] = self.detail
        return out

    @classmethod
    def from_error(cls, err: BaseException | Any) -> APIError:
        """Coerce any raised value into an APIError."""
        if isinstance(err, APIError):
            return err

        status = getattr(err, "status", None) or getattr(err, "status_code", None)
        try:
            status = int(status) if status is not None else 500
        except (TypeError, ValueError):
            status = 500

        title = getattr(err, "title", None)
        detail = getattr(err, "detail", None)
        return APIError(
            status,
            title if isinstance(title, str) else UNKNOWN_ERROR_TITLE,
            detail if isinstance(detail, str) else None,
            backend_code=getattr(err, "code", None),
            raw_error=err if isinstance(err, BaseException) else None,
        )

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(status={self.status!r}, "
            f"title={self.title!r}, detail={self.detail!r})"
        )


class APIErrors(JSONAPIError):
    """A batch of errors raised together (e.g. one per invalid field)."""

    def __init__(self, errors: Iterable[BaseException]) -> None:
        self.errors: tuple[BaseException, ...] = tuple(errors)
        if not self.errors:
            raise ValueError("APIErrors requires at least one error")
        super().__init__(f"{len(self.errors)} error(s): {self.errors[0]}")


def as_error_list(err: BaseException | Iterable[BaseException]) -> list[BaseException]:
    """Flatten a single error, an APIErrors batch, or a plain list."""
    if isinstance(err, APIErrors):
        return list(err.errors)
    if isinstance(err, BaseException):
        return [err]
    return list(err)


# ── Taxonomy ─────────────────────────────────────────────────────────


class BadRequestError(APIError):
    """Malformed body, JSON, filter, parameter or tunneled method."""

    status = 400
    title = "Bad Request"


class ForbiddenError(APIError):
    status = 403
    title = "Forbidden"


class NotFoundError(APIError):
    """Unknown resource type, unresolvable label or missing resource."""

    status = 404
    title = "Not Found"


class MethodNotAllowedError(APIError):
    status = 405
    title = "Method Not Allowed"


class NotAcceptableError(APIError):
    """Content negotiation failed."""

    status = 406
    title = "Not Acceptable"


class ConflictError(APIError):
    status = 409
    title = "Conflict"


class UniqueViolationError(ConflictError):
    """A backend uniqueness constraint rejected the write."""

    title = "Unique Constraint Violation"


class UnsupportedMediaTypeError(APIError):
    status = 415
    title = "Unsupported Media Type"


class UnprocessableEntityError(APIError):
    """A resource field failed schema validation."""

    status = 422
    title = "Invalid Field Value"


class InternalError(APIError):
    status = 500
    title = "Internal Server Error"


# ── Factories ────────────────────────────────────────────────────────


def bad_request(detail: str, **kwargs: Any) -> BadRequestError:
    return BadRequestError(detail=detail, **kwargs)


def forbidden(detail: str, **kwargs: Any) -> ForbiddenError:
    return ForbiddenError(detail=detail, **kwargs)


def not_found(detail: str | None = None, **kwargs: Any) -> NotFoundError:
    return NotFoundError(detail=detail or "No matching resource found.", **kwargs)


def method_not_allowed(detail: str, **kwargs: Any) -> MethodNotAllowedError:
    return MethodNotAllowedError(detail=detail, **kwargs)


def not_acceptable(detail: str | None = None, **kwargs: Any) -> NotAcceptableError:
    return NotAcceptableError(
        detail=detail or "No acceptable Content-Type could be found.", **kwargs
    )


def conflict(detail: str, **kwargs: Any) -> ConflictError:
    return ConflictError(detail=detail, **kwargs)


def unique_violation(detail: str | None = None, **kwargs: Any) -> UniqueViolationError:
    return UniqueViolationError(
        detail=detail or "A resource with one of the provided unique values already exists.",
        **kwargs,
    )


def unsupported_media_type(detail: str, **kwargs: Any) -> UnsupportedMediaTypeError:
    return UnsupportedMediaTypeError(detail=detail, **kwargs)


def invalid_field_value(detail: str, **kwargs: Any) -> UnprocessableEntityError:
    kwargs.setdefault("code", "invalid_field_value")
    return UnprocessableEntityError(detail=detail, **kwargs)


def internal_error(detail: str | None = None, **kwargs: Any) -> InternalError:
    return InternalError(detail=detail, **kwargs)
