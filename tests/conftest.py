"""Shared fixtures for searchable tests."""

from __future__ import annotations

import pytest

from cqrs_ddd_searchable import Searchable, SearchableConfig
from cqrs_ddd_searchable.adapters.memory import MemoryFilterQuery


@pytest.fixture
def query() -> MemoryFilterQuery:
    """Empty in-memory query that records its where clauses."""
    return MemoryFilterQuery()


@pytest.fixture
def searchable() -> Searchable:
    """Orchestrator over ``field1``/``field2`` with sort/page reserved."""
    return Searchable(
        SearchableConfig(
            searchable=frozenset({"field1", "field2"}),
            reserved=frozenset({"sort", "page"}),
            owner="TestModel",
        )
    )
