"""Protocol-agnostic request, result and response shapes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Literal

if TYPE_CHECKING:
    from .document import Document, PrimaryData

JSON_API_MEDIA_TYPE = "application/vnd.api+json"
JSON_MEDIA_TYPE = "application/json"

Method = Literal["get", "post", "patch", "delete"]
SUPPORTED_METHODS: tuple[str, ...] = ("get", "post", "patch", "delete")


def _empty_params() -> dict[str, Any]:
    return {}


@dataclass
class Request:
    """The request as seen by the pipeline.

    Filled in progressively by the builder and the controller's stages; owned
    by a single pipeline invocation.
    """

    uri: str = ""
    method: str = "get"
    type: str = ""
    id_or_ids: str | list[str] | None = None
    allow_label: bool = False
    relationship: str | None = None
    about_relationship: bool = False
    query_params: Any = field(default_factory=_empty_params)
    raw_query_string: str | None = None
    accepts: str | None = None
    content_type: str | None = None
    has_body: bool = False
    body: Any = None
    primary: PrimaryData = None


@dataclass
class Result:
    """Outcome of one pipeline run, before HTTP rendering."""

    document: Document | None = None
    status: int | None = None
    headers: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class HTTPResponse:
    status: int
    headers: dict[str, str]
    body: str | None = None
