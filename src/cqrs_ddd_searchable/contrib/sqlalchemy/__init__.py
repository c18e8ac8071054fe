from .mixin import SearchableMixin
from .operators import (
    DEFAULT_SQLA_REGISTRY,
    SQLAlchemyOperator,
    SQLAlchemyOperatorRegistry,
    build_default_registry,
)
from .query import SQLAlchemyFilterQuery

__all__ = [
    "DEFAULT_SQLA_REGISTRY",
    "SQLAlchemyFilterQuery",
    "SQLAlchemyOperator",
    "SQLAlchemyOperatorRegistry",
    "SearchableMixin",
    "build_default_registry",
]
