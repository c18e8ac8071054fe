"""The query abstraction constraints are applied to."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any, Protocol, TypeVar, runtime_checkable

from .operators import CombinationMode

if TYPE_CHECKING:
    from .constraint import Constraint
    from .operators import ConstraintOperator

Q = TypeVar("Q", bound="IFilterQuery")


@runtime_checkable
class IFilterQuery(Protocol):
    """
    Mutable query that accumulates predicates.

    Every method joins its predicate to the predicates already present
    in the same scope with ``boolean``: a conjunction for ``AND``, a
    disjunction for ``OR``.
    """

    def where(
        self,
        field: str,
        operator: ConstraintOperator,
        value: Any,
        *,
        boolean: CombinationMode = CombinationMode.AND,
    ) -> Any:
        """Comparison or pattern predicate on ``field``."""
        ...

    def where_in(
        self,
        field: str,
        values: Sequence[Any],
        *,
        negate: bool = False,
        boolean: CombinationMode = CombinationMode.AND,
    ) -> Any:
        """Membership (or non-membership) predicate."""
        ...

    def where_null(
        self,
        field: str,
        *,
        negate: bool = False,
        boolean: CombinationMode = CombinationMode.AND,
    ) -> Any:
        """Null (or not-null) predicate."""
        ...

    def where_has(
        self,
        relation: str,
        callback: Callable[[Any], None],
        *,
        negate: bool = False,
        boolean: CombinationMode = CombinationMode.AND,
    ) -> Any:
        """
        Existence of a related row satisfying ``callback``'s predicates.

        ``relation`` may be a dotted path. ``callback`` receives a query
        scoped to the related model. With ``negate`` the record must have
        no such row.
        """
        ...


Interceptor = Callable[[Any, "Constraint", CombinationMode], "bool | None"]
"""Handler ``(query, constraint, mode)``; a truthy return means handled."""
