"""Resource, linkage and Collection value types."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Union

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator, Mapping


def _empty_attrs() -> dict[str, Any]:
    return {}


def _empty_relationships() -> dict[str, Relationship]:
    return {}


@dataclass(frozen=True)
class ResourceIdentifier:
    """A ``{type, id}`` pointer to another resource."""

    type: str
    id: str

    def to_dict(self) -> dict[str, str]:
        return {"type": self.type, "id": self.id}


Linkage = Union[ResourceIdentifier, list[ResourceIdentifier], None]


@dataclass
class Relationship:
    """Relationship linkage; resolvable to bare ids, never to objects."""

    data: Linkage = None
    to_many: bool | None = None

    def __post_init__(self) -> None:
        if self.to_many is None:
            self.to_many = isinstance(self.data, list)

    @property
    def identifiers(self) -> list[ResourceIdentifier]:
        if self.data is None:
            return []
        if isinstance(self.data, list):
            return list(self.data)
        return [self.data]

    def unwrap_ids(self) -> str | list[str] | None:
        """Return the linkage as bare ids, keeping its cardinality."""
        if isinstance(self.data, list):
            return [it.id for it in self.data]
        return self.data.id if self.data is not None else None

    def to_dict(self) -> dict[str, Any]:
        if isinstance(self.data, list):
            return {"data": [it.to_dict() for it in self.data]}
        return {"data": self.data.to_dict() if self.data is not None else None}

    @classmethod
    def of(cls, type_: str, ids: str | Iterable[str] | None) -> Relationship:
        """Build linkage of *type_* from a bare id or ids."""
        if ids is None:
            return cls(None, to_many=False)
        if isinstance(ids, str):
            return cls(ResourceIdentifier(type_, ids), to_many=False)
        return cls([ResourceIdentifier(type_, str(i)) for i in ids], to_many=True)


@dataclass
class Resource:
    """A typed, identified unit of data with attributes and relationships."""

    type: str
    id: str | None = None
    attrs: dict[str, Any] = field(default_factory=_empty_attrs)
    relationships: dict[str, Relationship] = field(default_factory=_empty_relationships)
    meta: dict[str, Any] | None = None

    @property
    def identifier(self) -> ResourceIdentifier:
        if self.id is None:
            raise ValueError(f"Resource of type {self.type!r} has no id")
        return ResourceIdentifier(self.type, self.id)

    def to_dict(self, url_templates: Mapping[str, Mapping[str, str]] | None = None) -> dict[str, Any]:
        out: dict[str, Any] = {"type": self.type}
        if self.id is not None:
            out["id"] = self.id
        out["attributes"] = dict(self.attrs)
        if self.relationships:
            out["relationships"] = {
                name: rel.to_dict() for name, rel in self.relationships.items()
            }
        if self.meta:
            out["meta"] = dict(self.meta)
        self_template = (url_templates or {}).get(self.type, {}).get("self")
        if self_template and self.id is not None:
            out["links"] = {"self": self_template.format(id=self.id)}
        return out


class Collection:
    """Ordered sequence of resources."""

    def __init__(self, resources: Iterable[Resource] = ()) -> None:
        self.resources: list[Resource] = list(resources)

    def __iter__(self) -> Iterator[Resource]:
        return iter(self.resources)

    def __len__(self) -> int:
        return len(self.resources)

    def __getitem__(self, index: int) -> Resource:
        return self.resources[index]

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Collection) and self.resources == other.resources

    def __repr__(self) -> str:
        return f"Collection({self.resources!r})"

    def ids(self) -> list[str | None]:
        return [it.id for it in self.resources]

    def map(self, fn: Callable[[Resource], Resource | None]) -> Collection:
        """Apply *fn* to every resource, dropping ``None`` results."""
        out = (fn(it) for it in self.resources)
        return Collection(it for it in out if it is not None)

    def deduplicated(self) -> Collection:
        """Drop later duplicates by ``(type, id)``."""
        seen: set[tuple[str, str | None]] = set()
        out: list[Resource] = []
        for it in self.resources:
            key = (it.type, it.id)
            if key in seen:
                continue
            seen.add(key)
            out.append(it)
        return Collection(out)
