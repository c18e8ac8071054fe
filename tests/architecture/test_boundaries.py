from pytest_archon import archrule


def test_core_is_storage_agnostic() -> None:
    """
    Grammar and orchestration only speak to IFilterQuery.
    They must not import adapters, contrib integrations, or SQLAlchemy.
    """
    (
        archrule("core_is_storage_agnostic")
        .match("cqrs_ddd_searchable.operators")
        .match("cqrs_ddd_searchable.constraint")
        .match("cqrs_ddd_searchable.parser")
        .match("cqrs_ddd_searchable.config")
        .match("cqrs_ddd_searchable.ports")
        .match("cqrs_ddd_searchable.applier")
        .match("cqrs_ddd_searchable.searchable")
        .match("cqrs_ddd_searchable.query_string")
        .match("cqrs_ddd_searchable.exceptions")
        .should_not_import("cqrs_ddd_searchable.adapters*")
        .should_not_import("cqrs_ddd_searchable.contrib*")
        .should_not_import("sqlalchemy*")
        .check("cqrs_ddd_searchable")
    )


def test_memory_adapter_independence() -> None:
    """The in-memory adapter must work without SQLAlchemy installed."""
    (
        archrule("memory_adapter_independence")
        .match("cqrs_ddd_searchable.adapters*")
        .should_not_import("cqrs_ddd_searchable.contrib*")
        .should_not_import("sqlalchemy*")
        .check("cqrs_ddd_searchable")
    )


def test_contrib_does_not_reach_into_adapters() -> None:
    """Contrib integrations build on the core, not on other adapters."""
    (
        archrule("contrib_independence")
        .match("cqrs_ddd_searchable.contrib*")
        .should_not_import("cqrs_ddd_searchable.adapters*")
        .check("cqrs_ddd_searchable")
    )
