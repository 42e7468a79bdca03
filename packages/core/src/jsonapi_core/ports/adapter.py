"""IStorageAdapter — the contract every storage backend satisfies."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ..query import Query


@runtime_checkable
class IStorageAdapter(Protocol):
    """
    Executes queries against one backend.

    Adapters declare the filter operators they can translate. The controller
    hands these lists to the filter parser, so a filter using anything else
    is rejected before a query is built:

    * ``unary_filter_operators``: combinators written ``(op, expr, ...)``.
    * ``binary_filter_operators``: comparisons written ``(field, op, value)``.

    ``do_query`` raises a single error or an
    :class:`~jsonapi_core.primitives.exceptions.APIErrors` batch.
    ``normalize_error`` maps backend-native failures into the error taxonomy.
    """

    unary_filter_operators: ClassVar[tuple[str, ...]]
    binary_filter_operators: ClassVar[tuple[str, ...]]

    async def do_query(self, query: Query) -> Any: ...

    @staticmethod
    def normalize_error(err: BaseException) -> list[BaseException]: ...
