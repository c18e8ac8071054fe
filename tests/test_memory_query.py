"""Tests for in-memory evaluation of filtered queries."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

import pytest

from cqrs_ddd_searchable import (
    CombinationMode,
    ConstraintOperator,
    Searchable,
    SearchableConfig,
)
from cqrs_ddd_searchable.adapters.memory import (
    MemoryFilterQuery,
    build_default_registry,
    resolve_path,
)

Op = ConstraintOperator


@dataclass
class Tag:
    name: str


@dataclass
class Author:
    name: str
    country: str | None = None


@dataclass
class Book:
    title: str
    pages: int
    price: Decimal
    author: Author | None = None
    tags: list[Tag] = field(default_factory=list)
    subtitle: str | None = None


BOOKS = [
    Book(
        "Dune",
        412,
        Decimal("9.99"),
        Author("Herbert", "US"),
        [Tag("scifi"), Tag("classic")],
    ),
    Book("Emma", 474, Decimal("4.50"), Author("Austen", "UK"), [Tag("classic")]),
    Book("Neuromancer", 271, Decimal("7.25"), None, [Tag("scifi")], "Sprawl"),
]


@pytest.fixture
def books_searchable() -> Searchable:
    return Searchable(SearchableConfig(searchable=frozenset({"*"})))


def titles(books: list[Book]) -> list[str]:
    return [b.title for b in books]


class TestEvaluation:
    @pytest.mark.parametrize(
        ("params", "expected"),
        [
            ({"title": "Dune"}, ["Dune"]),
            ({"title": "!Dune"}, ["Emma", "Neuromancer"]),
            ({"pages": "(gt)300"}, ["Dune", "Emma"]),
            ({"pages": "!(gt)412"}, ["Dune", "Neuromancer"]),
            ({"pages": ["(ge)300", "(lt)450"]}, ["Dune"]),
            ({"price": "(lt)8"}, ["Emma", "Neuromancer"]),
            ({"title": "%m%"}, ["Emma", "Neuromancer"]),
            ({"title": "!N%"}, ["Dune", "Emma"]),
            ({"title": "Dune,Emma"}, ["Dune", "Emma"]),
            ({"title": "!Dune,Emma"}, ["Neuromancer"]),
            ({"subtitle": "(null)"}, ["Dune", "Emma"]),
            ({"subtitle": "!(null)"}, ["Neuromancer"]),
            ({"pages": "412,271"}, ["Dune", "Neuromancer"]),
        ],
    )
    def test_filters(
        self,
        books_searchable: Searchable,
        params: dict[str, object],
        expected: list[str],
    ) -> None:
        query = books_searchable.filtered(MemoryFilterQuery(), params)
        assert titles(query.filter(BOOKS)) == expected

    def test_and_mode(self, books_searchable: Searchable) -> None:
        query = books_searchable.filtered(
            MemoryFilterQuery(), {"title": "Dune", "pages": "(lt)300"}
        )
        assert query.filter(BOOKS) == []

    def test_or_mode(self, books_searchable: Searchable) -> None:
        query = books_searchable.filtered(
            MemoryFilterQuery(), {"title": "Dune", "pages": "(lt)300", "mode": "or"}
        )
        assert titles(query.filter(BOOKS)) == ["Dune", "Neuromancer"]

    def test_no_predicates_matches_everything(self) -> None:
        assert MemoryFilterQuery().filter(BOOKS) == BOOKS


class TestRelations:
    def test_to_one_relation(self, books_searchable: Searchable) -> None:
        query = books_searchable.filtered(MemoryFilterQuery(), {"author:country": "UK"})
        assert titles(query.filter(BOOKS)) == ["Emma"]

    def test_negated_to_one_relation_includes_missing(
        self, books_searchable: Searchable
    ) -> None:
        query = books_searchable.filtered(
            MemoryFilterQuery(), {"!author:country": "UK"}
        )
        assert titles(query.filter(BOOKS)) == ["Dune", "Neuromancer"]

    def test_to_many_relation(self, books_searchable: Searchable) -> None:
        query = books_searchable.filtered(MemoryFilterQuery(), {"tags:name": "scifi"})
        assert titles(query.filter(BOOKS)) == ["Dune", "Neuromancer"]

    def test_negated_to_many_relation(self, books_searchable: Searchable) -> None:
        query = books_searchable.filtered(MemoryFilterQuery(), {"!tags:name": "scifi"})
        assert titles(query.filter(BOOKS)) == ["Emma"]

    def test_dict_records(self, books_searchable: Searchable) -> None:
        records = [
            {"id": 1, "owner": {"groups": [{"name": "admin"}]}},
            {"id": 2, "owner": {"groups": [{"name": "staff"}]}},
        ]
        query = books_searchable.filtered(
            MemoryFilterQuery(), {"owner:groups:name": "admin"}
        )
        assert query.filter(records) == [records[0]]


class TestRegistry:
    def test_resolve_path(self) -> None:
        assert resolve_path(BOOKS[0], "author.name") == "Herbert"
        assert resolve_path(BOOKS[2], "author.name") is None
        assert resolve_path({"a": {"b": 1}}, "a.b") == 1

    def test_numeric_condition_is_cast(self) -> None:
        registry = build_default_registry()
        assert registry.evaluate(Op.GREATER, 10, "9") is True
        assert registry.evaluate(Op.EQUAL, 1.5, "1.5") is True

    def test_uncastable_condition_compares_as_text(self) -> None:
        registry = build_default_registry()
        assert registry.evaluate(Op.EQUAL, 10, "ten") is False

    def test_decimal_text_against_int_field(self) -> None:
        registry = build_default_registry()
        assert registry.evaluate(Op.EQUAL, 5, "5.0") is True
        assert registry.evaluate(Op.GREATER, 5, "4.5") is True
        assert registry.evaluate(Op.IN, 5, ["5.0", "6"]) is True
        assert registry.evaluate(Op.EQUAL, 5, "nan") is False

    def test_like_escapes_regex_characters(self) -> None:
        registry = build_default_registry()
        assert registry.evaluate(Op.LIKE, "a.c", "a.%") is True
        assert registry.evaluate(Op.LIKE, "abc", "a.%") is False
        assert registry.evaluate(Op.LIKE, "abc", "a_c") is True

    def test_null_never_satisfies_comparisons(self) -> None:
        registry = build_default_registry()
        for operator in (Op.NOT_EQUAL, Op.GREATER, Op.LIKE, Op.IN, Op.NOT_IN):
            value = ["x"] if operator.is_membership else "x"
            assert registry.evaluate(operator, None, value) is False

    def test_or_clause_after_and_clause(self) -> None:
        query = MemoryFilterQuery()
        query.where("title", Op.EQUAL, "Emma")
        query.where("title", Op.EQUAL, "Dune", boolean=CombinationMode.OR)
        assert titles(query.filter(BOOKS)) == ["Dune", "Emma"]
