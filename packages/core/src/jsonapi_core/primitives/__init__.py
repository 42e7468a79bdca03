from .exceptions import (
    APIError,
    APIErrors,
    BadRequestError,
    ConflictError,
    ForbiddenError,
    InternalError,
    JSONAPIError,
    MethodNotAllowedError,
    NotAcceptableError,
    NotFoundError,
    UniqueViolationError,
    UnprocessableEntityError,
    UnsupportedMediaTypeError,
    as_error_list,
)

__all__ = [
    "APIError",
    "APIErrors",
    "BadRequestError",
    "ConflictError",
    "ForbiddenError",
    "InternalError",
    "JSONAPIError",
    "MethodNotAllowedError",
    "NotAcceptableError",
    "NotFoundError",
    "UniqueViolationError",
    "UnprocessableEntityError",
    "UnsupportedMediaTypeError",
    "as_error_list",
]
