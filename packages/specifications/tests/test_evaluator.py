"""Tests for in-memory predicate evaluation."""

from __future__ import annotations

import pytest

from jsonapi_specifications import (
    FieldConstraint,
    FilterOperator,
    MemoryOperatorRegistry,
    Predicate,
    SpecificationEvaluator,
    and_,
    or_,
)


@pytest.mark.parametrize(
    ("constraint", "expected"),
    [
        (FieldConstraint("name", "eq", "Ann"), True),
        (FieldConstraint("name", "neq", "Ann"), False),
        (FieldConstraint("name", "ne", "Bob"), True),
        (FieldConstraint("age", "gt", 30), True),
        (FieldConstraint("age", "lte", 30), False),
        (FieldConstraint("age", "gte", "x"), False),
        (FieldConstraint("nickname", "lt", 5), False),
        (FieldConstraint("nickname", "eq", None), True),
        (FieldConstraint("age", "in", [1, 31]), True),
        (FieldConstraint("age", "nin", [1, 31]), False),
        (FieldConstraint("id", "eq", "p1"), True),
        (FieldConstraint("address.city", "eq", "Athens"), True),
        (FieldConstraint("address.zip", "eq", None), True),
        (FieldConstraint("tags", "eq", "t2"), True),
        (FieldConstraint("tags", "in", ["t3", "t1"]), True),
        (FieldConstraint("boss", "eq", "p9"), True),
    ],
)
def test_constraints(evaluator, ann, constraint, expected) -> None:
    assert evaluator.matches(constraint, ann) is expected


def test_empty_predicates_always_match(evaluator, ann) -> None:
    assert evaluator.matches(Predicate("and"), ann)
    assert evaluator.matches(Predicate("or"), ann)


def test_combinators(evaluator, ann) -> None:
    hit = FieldConstraint("name", "eq", "Ann")
    miss = FieldConstraint("age", "lt", 3)
    assert evaluator.matches(or_(miss, hit), ann)
    assert not evaluator.matches(and_(miss, hit), ann)
    assert evaluator.matches(and_(hit, or_(miss, FieldConstraint("age", "gt", 3))), ann)


def test_resolve_field_order(ann) -> None:
    assert SpecificationEvaluator.resolve_field(ann, "id") == "p1"
    assert SpecificationEvaluator.resolve_field(ann, "tags") == ["t1", "t2"]
    assert SpecificationEvaluator.resolve_field(ann, "name.first") is None


def test_registry_lookup(registry) -> None:
    assert FilterOperator.NIN in registry.supported_operators
    assert registry.get("bogus") is None
    assert registry.evaluate("eq", 1, 1)
    with pytest.raises(ValueError, match="Unsupported operator"):
        MemoryOperatorRegistry().evaluate(FilterOperator.EQ, 1, 1)


def test_evaluator_requires_registry() -> None:
    with pytest.raises(ValueError):
        SpecificationEvaluator(None)  # type: ignore[arg-type]
