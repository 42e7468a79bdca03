"""Pipeline stages, in the order the controller runs them."""

from __future__ import annotations

from .label_to_ids import label_to_ids
from .make_query import QUERY_BUILDERS, make_delete, make_get, make_patch, make_post
from .negotiation import negotiate_content_type, parse_accept, parse_media_type, validate_content_type
from .parse_primary import parse_request_primary
from .transforms import TransformContext, apply_transform
from .validate_document import validate_request_document
from .validate_request import check_body_existence, check_method
from .validate_resources import validate_resources

__all__ = [
    "QUERY_BUILDERS",
    "TransformContext",
    "apply_transform",
    "check_body_existence",
    "check_method",
    "label_to_ids",
    "make_delete",
    "make_get",
    "make_patch",
    "make_post",
    "negotiate_content_type",
    "parse_accept",
    "parse_media_type",
    "parse_request_primary",
    "validate_content_type",
    "validate_request_document",
    "validate_resources",
]
