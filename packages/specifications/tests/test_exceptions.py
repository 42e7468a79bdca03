"""Tests for specification exceptions."""

from __future__ import annotations

from jsonapi_core.primitives.exceptions import BadRequestError
from jsonapi_specifications import OperatorNotFoundError


def test_operator_not_found_fuzzy_suggestion() -> None:
    err = OperatorNotFoundError("eqq", ["eq", "neq", "gt"])
    assert isinstance(err, BadRequestError)
    assert err.status == 400
    assert "eq" in err.suggestions
    assert "Did you mean" in err.detail
    assert err.to_dict()["title"] == "Invalid Filter"


def test_operator_not_found_no_matches() -> None:
    err = OperatorNotFoundError("zzzzz", ["gt", "eq"])
    assert err.suggestions == []
    assert "Did you mean" not in err.detail
    assert err.detail.endswith("Valid operators: eq, gt.")
