from __future__ import annotations

from enum import Enum
from typing import Any


class ConstraintOperator(str, Enum):
    """Operators a parsed constraint can carry."""

    EQUAL = "="
    NOT_EQUAL = "<>"
    GREATER = ">"
    GREATER_EQUAL = ">="
    LESS = "<"
    LESS_EQUAL = "<="
    LIKE = "like"
    NOT_LIKE = "not like"
    IN = "in"
    NOT_IN = "not in"
    IS_NULL = "is null"
    IS_NOT_NULL = "is not null"

    @property
    def is_membership(self) -> bool:
        return self in (ConstraintOperator.IN, ConstraintOperator.NOT_IN)

    @property
    def is_null_check(self) -> bool:
        return self in (ConstraintOperator.IS_NULL, ConstraintOperator.IS_NOT_NULL)


def negate(operator: ConstraintOperator) -> ConstraintOperator:
    """
    Return the logical complement of *operator*.

    Comparisons flip to their complement (``>`` becomes ``<=``) rather
    than being wrapped in a NOT.
    """
    if operator is ConstraintOperator.EQUAL:
        return ConstraintOperator.NOT_EQUAL
    if operator is ConstraintOperator.NOT_EQUAL:
        return ConstraintOperator.EQUAL
    if operator is ConstraintOperator.GREATER:
        return ConstraintOperator.LESS_EQUAL
    if operator is ConstraintOperator.LESS_EQUAL:
        return ConstraintOperator.GREATER
    if operator is ConstraintOperator.GREATER_EQUAL:
        return ConstraintOperator.LESS
    if operator is ConstraintOperator.LESS:
        return ConstraintOperator.GREATER_EQUAL
    if operator is ConstraintOperator.LIKE:
        return ConstraintOperator.NOT_LIKE
    if operator is ConstraintOperator.NOT_LIKE:
        return ConstraintOperator.LIKE
    if operator is ConstraintOperator.IN:
        return ConstraintOperator.NOT_IN
    if operator is ConstraintOperator.NOT_IN:
        return ConstraintOperator.IN
    if operator is ConstraintOperator.IS_NULL:
        return ConstraintOperator.IS_NOT_NULL
    if operator is ConstraintOperator.IS_NOT_NULL:
        return ConstraintOperator.IS_NULL
    raise ValueError(f"Unknown operator: {operator!r}")


class CombinationMode(str, Enum):
    """How every predicate of one request joins the query."""

    AND = "and"
    OR = "or"

    @classmethod
    def from_param(cls, raw: Any) -> CombinationMode:
        """
        Resolve the mode from a raw request parameter.

        Repeated parameters use the last value. Anything that is not
        ``and``/``or`` (case-insensitive) falls back to ``AND``.
        """
        if isinstance(raw, list | tuple):
            raw = raw[-1] if raw else None
        if not isinstance(raw, str):
            return cls.AND
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return cls.AND
