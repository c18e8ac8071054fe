"""Tests for PredicateApplier dispatch and relation routing."""

from __future__ import annotations

import pytest

from cqrs_ddd_searchable import (
    CombinationMode,
    ConstraintOperator,
    PredicateApplier,
    parse_constraint,
    split_relation,
)
from cqrs_ddd_searchable.adapters.memory import ClauseKind, MemoryFilterQuery


@pytest.fixture
def applier() -> PredicateApplier:
    return PredicateApplier()


class TestSplitRelation:
    def test_plain_field(self) -> None:
        assert split_relation("field1") is None

    def test_relation_field(self) -> None:
        assert split_relation("relationA:field1") == ("relationA", "field1", False)

    def test_negated_relation(self) -> None:
        assert split_relation("!relationA:field1") == ("relationA", "field1", True)

    def test_multiple_segments_join_into_one_path(self) -> None:
        assert split_relation("a:b:field") == ("a.b", "field", False)
        assert split_relation("!a:b:field") == ("a.b", "field", True)


class TestDispatch:
    def test_basic(self, applier: PredicateApplier, query: MemoryFilterQuery) -> None:
        applier.apply(query, parse_constraint("(ge)5"), "field1")
        (where,) = query.wheres
        assert where.kind is ClauseKind.BASIC
        assert where.column == "field1"
        assert where.operator is ConstraintOperator.GREATER_EQUAL
        assert where.value == "5"
        assert where.boolean is CombinationMode.AND

    def test_in(self, applier: PredicateApplier, query: MemoryFilterQuery) -> None:
        applier.apply(query, parse_constraint("a,b"), "field1", CombinationMode.OR)
        (where,) = query.wheres
        assert where.kind is ClauseKind.IN
        assert where.value == ["a", "b"]
        assert where.negate is False
        assert where.boolean is CombinationMode.OR

    def test_not_in(self, applier: PredicateApplier, query: MemoryFilterQuery) -> None:
        applier.apply(query, parse_constraint("!a,b"), "field1")
        (where,) = query.wheres
        assert where.kind is ClauseKind.IN
        assert where.negate is True

    def test_null(self, applier: PredicateApplier, query: MemoryFilterQuery) -> None:
        applier.apply(query, parse_constraint("(null)"), "field1")
        applier.apply(query, parse_constraint("!(null)"), "field2")
        first, second = query.wheres
        assert (first.kind, first.negate) == (ClauseKind.NULL, False)
        assert (second.kind, second.negate) == (ClauseKind.NULL, True)

    def test_negation_marker_on_plain_field_is_dropped(
        self, applier: PredicateApplier, query: MemoryFilterQuery
    ) -> None:
        applier.apply(query, parse_constraint("5"), "!field1")
        assert query.wheres[0].column == "field1"


class TestRelations:
    def test_relation_is_existence_scoped(
        self, applier: PredicateApplier, query: MemoryFilterQuery
    ) -> None:
        applier.apply(query, parse_constraint("5"), "relationA:field1")
        (where,) = query.wheres
        assert where.kind is ClauseKind.EXISTS
        assert where.column == "relationA"
        assert where.negate is False
        assert where.query is not None
        (inner,) = where.query.wheres
        assert inner.column == "field1"
        assert inner.operator is ConstraintOperator.EQUAL
        assert inner.value == "5"

    def test_negated_relation_has_identical_inner_predicate(
        self, applier: PredicateApplier
    ) -> None:
        plain, negated = MemoryFilterQuery(), MemoryFilterQuery()
        applier.apply(plain, parse_constraint("5"), "relationA:field1")
        applier.apply(negated, parse_constraint("5"), "!relationA:field1")
        assert negated.wheres[0].negate is True
        assert plain.wheres[0].query is not None
        assert negated.wheres[0].query is not None
        assert plain.wheres[0].query.wheres == negated.wheres[0].query.wheres

    def test_mode_propagates_into_relation(
        self, applier: PredicateApplier, query: MemoryFilterQuery
    ) -> None:
        applier.apply(query, parse_constraint("a,b"), "relationA:field1", CombinationMode.OR)
        (where,) = query.wheres
        assert where.boolean is CombinationMode.OR
        assert where.query is not None
        assert where.query.wheres[0].boolean is CombinationMode.OR

    def test_chained_relation_uses_dotted_path(
        self, applier: PredicateApplier, query: MemoryFilterQuery
    ) -> None:
        applier.apply(query, parse_constraint("x"), "a:b:field")
        assert query.wheres[0].column == "a.b"
