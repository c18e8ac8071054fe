"""URL query parameters to composable filter predicates."""

from __future__ import annotations

from .applier import PredicateApplier, split_relation
from .config import SearchableConfig, intercepts
from .constraint import Constraint
from .exceptions import (
    MalformedFilterError,
    SearchabilityConfigurationMissingError,
    SearchableError,
    UnknownFieldError,
)
from .operators import CombinationMode, ConstraintOperator, negate
from .parser import (
    ComparisonRecognizer,
    ConstraintParser,
    ConstraintRecognizer,
    EqualityRecognizer,
    NullRecognizer,
    PatternRecognizer,
    parse_constraint,
)
from .ports import IFilterQuery, Interceptor
from .query_string import QueryStringBuilder, parse_query_string
from .searchable import FilterPlan, Searchable

__all__ = [
    # Grammar
    "CombinationMode",
    "ComparisonRecognizer",
    "Constraint",
    "ConstraintOperator",
    "ConstraintParser",
    "ConstraintRecognizer",
    "EqualityRecognizer",
    "NullRecognizer",
    "PatternRecognizer",
    "negate",
    "parse_constraint",
    # Orchestration
    "FilterPlan",
    "IFilterQuery",
    "Interceptor",
    "PredicateApplier",
    "Searchable",
    "SearchableConfig",
    "intercepts",
    "split_relation",
    # Query strings
    "QueryStringBuilder",
    "parse_query_string",
    # Exceptions
    "MalformedFilterError",
    "SearchabilityConfigurationMissingError",
    "SearchableError",
    "UnknownFieldError",
]
