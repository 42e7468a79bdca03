"""Content negotiation for responses and Content-Type checks for request bodies."""

from __future__ import annotations

from typing import TYPE_CHECKING, NamedTuple

from jsonapi_core.http import JSON_API_MEDIA_TYPE, JSON_MEDIA_TYPE
from jsonapi_core.primitives.exceptions import not_acceptable, unsupported_media_type

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from jsonapi_core.http import Request


class MediaRange(NamedTuple):
    type: str
    params: dict[str, str]
    q: float


def parse_media_type(value: str) -> tuple[str, dict[str, str]]:
    """Split ``type/subtype; k=v`` into the lowercased type and its parameters."""
    head, *rest = value.split(";")
    params: dict[str, str] = {}
    for part in rest:
        key, sep, val = part.partition("=")
        if sep:
            params[key.strip().lower()] = val.strip().strip('"')
    return head.strip().lower(), params


def parse_accept(header: str | None) -> list[MediaRange]:
    """Parse an Accept header; a missing header accepts anything."""
    ranges: list[MediaRange] = []
    for item in (header or "*/*").split(","):
        if not item.strip():
            continue
        media_type, params = parse_media_type(item)
        try:
            q = float(params.pop("q", "1"))
        except ValueError:
            q = 0.0
        ranges.append(MediaRange(media_type, params, q))
    return ranges


def _quality(candidate: str, ranges: Iterable[MediaRange]) -> float:
    # The most specific matching range decides: exact, then type/*, then */*.
    family = candidate.split("/")[0] + "/*"
    best: tuple[int, float] | None = None
    for it in ranges:
        if it.type == candidate:
            if candidate == JSON_API_MEDIA_TYPE and it.params:
                continue
            rank = 3
        elif it.type == family:
            rank = 2
        elif it.type == "*/*":
            rank = 1
        else:
            continue
        if best is None or rank > best[0]:
            best = (rank, it.q)
    return best[1] if best is not None else 0.0


def negotiate_content_type(
    accepts: str | None,
    available: Sequence[str] = (JSON_API_MEDIA_TYPE,),
) -> str:
    """Pick the response media type.

    JSON:API ranges carrying media-type parameters are not acceptable;
    ``application/json`` is the fallback when the client cannot take the
    JSON:API type. Raises a 406 when nothing fits.
    """
    ranges = parse_accept(accepts)
    candidates = [*available, JSON_MEDIA_TYPE]
    scored = [(_quality(it, ranges), -idx, it) for idx, it in enumerate(candidates)]
    q, _, best = max(scored)
    if q <= 0:
        raise not_acceptable()
    return best


def validate_content_type(request: Request, supported_ext: Sequence[str] = ()) -> None:
    """Require ``application/vnd.api+json`` with no parameters but a supported ``ext``."""
    media_type, params = parse_media_type(request.content_type or "")
    if media_type != JSON_API_MEDIA_TYPE:
        raise unsupported_media_type(
            f"The request's Content-Type must be {JSON_API_MEDIA_TYPE}, "
            f"but you provided {request.content_type or 'none'}."
        )
    ext = params.pop("ext", None)
    if params:
        raise unsupported_media_type(
            f"The request's Content-Type must not carry parameters other than ext; "
            f"got {', '.join(sorted(params))}."
        )
    if ext is not None:
        unsupported = [it for it in ext.split(",") if it.strip() not in supported_ext]
        if unsupported:
            raise unsupported_media_type(
                f"Unsupported extension(s): {', '.join(unsupported)}."
            )
