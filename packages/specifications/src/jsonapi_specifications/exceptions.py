"""
Specification exception hierarchy with fuzzy-match suggestions.

All exceptions are 400-class :class:`~jsonapi_core.primitives.exceptions.APIError`
values, so they render directly into error documents.
"""

from __future__ import annotations

from difflib import get_close_matches

from jsonapi_core.primitives.exceptions import BadRequestError


class SpecificationError(BadRequestError):
    """Base exception for all specification errors."""

    title = "Invalid Filter"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(detail=message)


class OperatorNotFoundError(SpecificationError):
    """
    Operator outside the allowed list.

    Provides fuzzy-matched suggestions for likely intended operators.
    """

    def __init__(self, operator: str, valid_operators: list[str]) -> None:
        self.operator = operator
        self.valid_operators = valid_operators
        self.suggestions = get_close_matches(operator, valid_operators, n=3, cutoff=0.6)

        message = f"Unknown or unsupported filter operator: '{operator}'."
        if self.suggestions:
            message += f" Did you mean: {', '.join(self.suggestions)}?"
        message += f" Valid operators: {', '.join(sorted(valid_operators))}."
        super().__init__(message)
