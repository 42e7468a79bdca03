import uuid
from typing import Protocol


class IIDGenerator(Protocol):
    """
    Protocol for id generation strategies used by adapters that assign
    resource ids themselves.
    """

    def next_id(self) -> str:
        """Generates the next unique resource id."""
        ...


class UUID4Generator(IIDGenerator):
    """Default id generator: string UUIDv4."""

    def next_id(self) -> str:
        return str(uuid.uuid4())
