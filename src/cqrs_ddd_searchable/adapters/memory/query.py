"""IFilterQuery over plain Python records."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, TypeVar

from ...operators import CombinationMode, ConstraintOperator
from .operators import MemoryPredicateRegistry, build_default_registry

R = TypeVar("R")


class ClauseKind(str, Enum):
    BASIC = "basic"
    IN = "in"
    NULL = "null"
    EXISTS = "exists"


@dataclass(frozen=True)
class WhereClause:
    """One recorded predicate, in the order it was added."""

    kind: ClauseKind
    column: str
    boolean: CombinationMode = CombinationMode.AND
    operator: ConstraintOperator | None = None
    value: Any = None
    negate: bool = False
    query: MemoryFilterQuery | None = None


def resolve_path(record: Any, path: str) -> Any:
    """
    Resolve a dot-separated attribute path on a dict or object.

    Missing attributes resolve to ``None``.
    """
    value = record
    for part in path.split("."):
        if value is None:
            return None
        value = value.get(part) if isinstance(value, Mapping) else getattr(value, part, None)
    return value


def _related(record: Any, path: str) -> list[Any]:
    """Collect related records along ``path``, flattening to-many links."""
    current = [record]
    for part in path.split("."):
        following: list[Any] = []
        for item in current:
            value = resolve_path(item, part)
            if value is None:
                continue
            if isinstance(value, Iterable) and not isinstance(value, str | bytes | Mapping):
                following.extend(v for v in value if v is not None)
            else:
                following.append(value)
        current = following
    return current


class MemoryFilterQuery:
    """
    Record predicates and evaluate them against in-memory records.

    Clauses fold left to right: an ``AND`` clause must hold together with
    everything before it, an ``OR`` clause is an alternative to it.
    """

    def __init__(self, registry: MemoryPredicateRegistry | None = None) -> None:
        self._registry = registry or build_default_registry()
        self.wheres: list[WhereClause] = []

    # -- IFilterQuery --------------------------------------------------------

    def where(
        self,
        field: str,
        operator: ConstraintOperator,
        value: Any,
        *,
        boolean: CombinationMode = CombinationMode.AND,
    ) -> MemoryFilterQuery:
        self.wheres.append(
            WhereClause(
                ClauseKind.BASIC,
                field,
                boolean,
                operator=ConstraintOperator(operator),
                value=value,
            )
        )
        return self

    def where_in(
        self,
        field: str,
        values: Sequence[Any],
        *,
        negate: bool = False,
        boolean: CombinationMode = CombinationMode.AND,
    ) -> MemoryFilterQuery:
        self.wheres.append(
            WhereClause(ClauseKind.IN, field, boolean, value=list(values), negate=negate)
        )
        return self

    def where_null(
        self,
        field: str,
        *,
        negate: bool = False,
        boolean: CombinationMode = CombinationMode.AND,
    ) -> MemoryFilterQuery:
        self.wheres.append(WhereClause(ClauseKind.NULL, field, boolean, negate=negate))
        return self

    def where_has(
        self,
        relation: str,
        callback: Callable[[Any], None],
        *,
        negate: bool = False,
        boolean: CombinationMode = CombinationMode.AND,
    ) -> MemoryFilterQuery:
        nested = MemoryFilterQuery(self._registry)
        callback(nested)
        self.wheres.append(
            WhereClause(ClauseKind.EXISTS, relation, boolean, negate=negate, query=nested)
        )
        return self

    # -- evaluation ----------------------------------------------------------

    def matches(self, record: Any) -> bool:
        result: bool | None = None
        for clause in self.wheres:
            outcome = self._evaluate(clause, record)
            if result is None:
                result = outcome
            elif clause.boolean is CombinationMode.OR:
                result = result or outcome
            else:
                result = result and outcome
        return True if result is None else result

    def filter(self, records: Iterable[R]) -> list[R]:
        return [record for record in records if self.matches(record)]

    def _evaluate(self, clause: WhereClause, record: Any) -> bool:
        if clause.kind is ClauseKind.EXISTS:
            assert clause.query is not None
            found = any(clause.query.matches(r) for r in _related(record, clause.column))
            return not found if clause.negate else found
        actual = resolve_path(record, clause.column)
        if clause.kind is ClauseKind.IN:
            operator = ConstraintOperator.NOT_IN if clause.negate else ConstraintOperator.IN
            return self._registry.evaluate(operator, actual, clause.value)
        if clause.kind is ClauseKind.NULL:
            operator = (
                ConstraintOperator.IS_NOT_NULL if clause.negate else ConstraintOperator.IS_NULL
            )
            return self._registry.evaluate(operator, actual, None)
        assert clause.operator is not None
        return self._registry.evaluate(clause.operator, actual, clause.value)
