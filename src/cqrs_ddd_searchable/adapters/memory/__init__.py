from .operators import (
    MemoryPredicate,
    MemoryPredicateRegistry,
    build_default_registry,
)
from .query import ClauseKind, MemoryFilterQuery, WhereClause, resolve_path

__all__ = [
    "ClauseKind",
    "MemoryFilterQuery",
    "MemoryPredicate",
    "MemoryPredicateRegistry",
    "WhereClause",
    "build_default_registry",
    "resolve_path",
]
