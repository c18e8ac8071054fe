"""Translate constraints into query calls."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from .constraint import NEGATION_MARKER
from .operators import CombinationMode, ConstraintOperator

if TYPE_CHECKING:
    from .constraint import Constraint
    from .ports import IFilterQuery

logger = logging.getLogger("cqrs_ddd.searchable")

RELATION_SEPARATOR = ":"


def split_relation(field: str) -> tuple[str, str, bool] | None:
    """
    Split ``relation:field`` into ``(relation_path, leaf, negated)``.

    Everything before the last separator is the relation path, with
    segments joined by dots. Returns ``None`` for plain fields.
    """
    if RELATION_SEPARATOR not in field:
        return None
    relation, _, leaf = field.rpartition(RELATION_SEPARATOR)
    negated = relation.startswith(NEGATION_MARKER)
    if negated:
        relation = relation[len(NEGATION_MARKER) :]
    return ".".join(relation.split(RELATION_SEPARATOR)), leaf, negated


class PredicateApplier:
    """Apply one constraint to one field of an :class:`IFilterQuery`."""

    def apply(
        self,
        query: IFilterQuery,
        constraint: Constraint,
        field: str,
        mode: CombinationMode = CombinationMode.AND,
    ) -> None:
        relation = split_relation(field)
        if relation is None:
            # the negation marker only means something on a relation
            self._apply_field(
                query, constraint, field.removeprefix(NEGATION_MARKER), mode
            )
            return

        relation_path, leaf, negated = relation
        logger.debug(
            "Scoping %s constraint on %r to relation %r (negated=%s)",
            constraint.operator.value,
            leaf,
            relation_path,
            negated,
        )

        def scoped(sub_query: Any) -> None:
            self.apply(sub_query, constraint, leaf, mode)

        query.where_has(relation_path, scoped, negate=negated, boolean=mode)

    def _apply_field(
        self,
        query: IFilterQuery,
        constraint: Constraint,
        field: str,
        mode: CombinationMode,
    ) -> None:
        operator = constraint.operator
        if operator.is_membership:
            query.where_in(
                field,
                list(constraint.value or ()),
                negate=operator is ConstraintOperator.NOT_IN,
                boolean=mode,
            )
        elif operator.is_null_check:
            query.where_null(
                field,
                negate=operator is ConstraintOperator.IS_NOT_NULL,
                boolean=mode,
            )
        else:
            query.where(field, operator, constraint.value, boolean=mode)
