"""Apply a request's filter parameters to a query."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, NamedTuple

from .applier import PredicateApplier
from .exceptions import SearchabilityConfigurationMissingError
from .operators import CombinationMode
from .parser import ConstraintParser

if TYPE_CHECKING:
    from .config import SearchableConfig
    from .constraint import Constraint
    from .ports import Q

logger = logging.getLogger("cqrs_ddd.searchable")


class FilterPlan(NamedTuple):
    """Constraints derived from one request, in parameter order."""

    mode: CombinationMode
    constraints: list[tuple[str, Constraint]]


class Searchable:
    """
    Orchestrates parsing and application of filter parameters.

    The configuration is validated once, here; a host without any
    searchability rules is a configuration fault.
    """

    def __init__(
        self,
        config: SearchableConfig,
        *,
        parser: ConstraintParser | None = None,
        applier: PredicateApplier | None = None,
    ) -> None:
        if not config.is_configured:
            raise SearchabilityConfigurationMissingError(config.owner)
        self._config = config
        self._parser = parser or ConstraintParser()
        self._applier = applier or PredicateApplier()

    @property
    def config(self) -> SearchableConfig:
        return self._config

    def plan(self, params: Mapping[str, Any] | Any) -> FilterPlan:
        """Resolve the mode and parse every eligible parameter."""
        items = _param_items(params)
        mode = CombinationMode.from_param(
            next((v for k, v in items if k == self._config.mode_key), None)
        )
        reserved = self._config.reserved_keys
        constraints: list[tuple[str, Constraint]] = []
        for field, raw in items:
            if field in reserved:
                continue
            if not self._config.is_searchable(field):
                logger.debug("Skipping non-searchable parameter %r", field)
                continue
            values = raw if isinstance(raw, list | tuple) else [raw]
            constraints.extend((field, self._parser.parse(v)) for v in values)
        return FilterPlan(mode=mode, constraints=constraints)

    def filtered(self, query: Q, params: Mapping[str, Any] | Any) -> Q:
        """
        Apply ``params`` to ``query`` and return the same query.

        Every parameter is parsed before any is applied, so a malformed
        value leaves ``query`` untouched.
        """
        plan = self.plan(params)
        for field, constraint in plan.constraints:
            if self._intercept(query, field, constraint, plan.mode):
                continue
            self._applier.apply(query, constraint, field, plan.mode)
        return query

    def _intercept(
        self,
        query: Any,
        field: str,
        constraint: Constraint,
        mode: CombinationMode,
    ) -> bool:
        interceptor = self._config.interceptor_for(field)
        if interceptor is None:
            return False
        if interceptor(query, constraint, mode):
            logger.debug(
                "Constraint %s on %r handled by interceptor",
                constraint.operator.value,
                field,
            )
            return True
        return False


def _param_items(params: Mapping[str, Any] | Any) -> list[tuple[str, Any]]:
    """
    Normalise a parameter container to ordered ``(key, value)`` pairs.

    Multi-dicts exposing ``multi_items()`` (Starlette ``QueryParams``)
    have repeated keys grouped into lists.
    """
    if hasattr(params, "multi_items"):
        grouped: dict[str, Any] = {}
        for key, value in params.multi_items():
            if key not in grouped:
                grouped[key] = value
            elif isinstance(grouped[key], list):
                grouped[key].append(value)
            else:
                grouped[key] = [grouped[key], value]
        return list(grouped.items())
    return list(params.items())
