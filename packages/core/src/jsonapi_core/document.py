"""Document — the JSON:API top-level envelope."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, Union

from .resources import Collection, Relationship, Resource

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from .primitives.exceptions import APIError

PrimaryData = Union[Resource, Collection, Relationship, None]


class Document:
    """Holds either primary data (plus included resources) or errors."""

    def __init__(
        self,
        *,
        primary: PrimaryData = None,
        included: Iterable[Resource] | Collection | None = None,
        errors: Iterable[APIError] | None = None,
        meta: dict[str, Any] | None = None,
        req_uri: str | None = None,
        url_templates: Mapping[str, Mapping[str, str]] | None = None,
    ) -> None:
        self.primary = primary
        self.included: Collection | None = (
            included if isinstance(included, Collection) or included is None
            else Collection(included)
        )
        self.errors: list[APIError] | None = list(errors) if errors is not None else None
        self.meta = meta
        self.req_uri = req_uri
        self.url_templates = url_templates or {}

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.meta:
            out["meta"] = dict(self.meta)
        if self.req_uri:
            out["links"] = {"self": self.req_uri}

        if self.errors is not None:
            out["errors"] = [err.to_dict() for err in self.errors]
            return out

        primary = self.primary
        if isinstance(primary, Relationship):
            out.update(primary.to_dict())
        elif isinstance(primary, Collection):
            out["data"] = [it.to_dict(self.url_templates) for it in primary]
        elif isinstance(primary, Resource):
            out["data"] = primary.to_dict(self.url_templates)
        else:
            out["data"] = None

        if self.included is not None and len(self.included):
            out["included"] = [
                it.to_dict(self.url_templates) for it in self.included.deduplicated()
            ]
        return out

    def __str__(self) -> str:
        return json.dumps(self.to_dict(), default=str)
