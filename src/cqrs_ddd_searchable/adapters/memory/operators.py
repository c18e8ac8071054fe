"""
In-memory predicate evaluation strategy.

Each :class:`ConstraintOperator` is an isolated class with a single
``evaluate`` method, registered in a :class:`MemoryPredicateRegistry`.

Condition values arrive as strings. When the record holds a number the
condition is cast to the same type, or to ``Decimal`` when that fails
(``"5.0"`` against an ``int``), before comparing. Otherwise both sides are
compared as strings.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from decimal import Decimal, InvalidOperation
from typing import Any

from ...operators import ConstraintOperator


def _coerce(field_value: Any, condition_value: Any) -> tuple[Any, Any]:
    if field_value is None or not isinstance(condition_value, str):
        return field_value, condition_value
    if isinstance(field_value, bool):
        return field_value, condition_value.strip().lower() in ("1", "true", "yes")
    if isinstance(field_value, int | float | Decimal):
        try:
            return field_value, type(field_value)(condition_value)
        except (ValueError, InvalidOperation):
            pass
        # "5.0" against an int field still compares as a number
        try:
            number = Decimal(condition_value.strip())
        except InvalidOperation:
            return str(field_value), condition_value
        if number.is_finite():
            return field_value, number
        return str(field_value), condition_value
    if not isinstance(field_value, str):
        return str(field_value), condition_value
    return field_value, condition_value


def _like_to_regex(pattern: str) -> re.Pattern[str]:
    """Convert a SQL LIKE pattern (``%``, ``_``) to an anchored regex."""
    parts = []
    for char in pattern:
        if char == "%":
            parts.append(".*")
        elif char == "_":
            parts.append(".")
        else:
            parts.append(re.escape(char))
    return re.compile("".join(parts), re.DOTALL)


class MemoryPredicate(ABC):
    @property
    @abstractmethod
    def name(self) -> ConstraintOperator:
        """The operator this strategy handles."""
        ...

    @abstractmethod
    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        ...


class EqualPredicate(MemoryPredicate):
    @property
    def name(self) -> ConstraintOperator:
        return ConstraintOperator.EQUAL

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        actual, expected = _coerce(field_value, condition_value)
        return bool(actual == expected)


class NotEqualPredicate(MemoryPredicate):
    @property
    def name(self) -> ConstraintOperator:
        return ConstraintOperator.NOT_EQUAL

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        # SQL semantics: NULL <> x is not true
        if field_value is None:
            return False
        actual, expected = _coerce(field_value, condition_value)
        return bool(actual != expected)


class _OrderingPredicate(MemoryPredicate):
    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        if field_value is None:
            return False
        actual, expected = _coerce(field_value, condition_value)
        try:
            return bool(self._compare(actual, expected))
        except TypeError:
            return bool(self._compare(str(actual), str(expected)))

    @abstractmethod
    def _compare(self, actual: Any, expected: Any) -> bool:
        ...


class GreaterPredicate(_OrderingPredicate):
    @property
    def name(self) -> ConstraintOperator:
        return ConstraintOperator.GREATER

    def _compare(self, actual: Any, expected: Any) -> bool:
        return bool(actual > expected)


class GreaterEqualPredicate(_OrderingPredicate):
    @property
    def name(self) -> ConstraintOperator:
        return ConstraintOperator.GREATER_EQUAL

    def _compare(self, actual: Any, expected: Any) -> bool:
        return bool(actual >= expected)


class LessPredicate(_OrderingPredicate):
    @property
    def name(self) -> ConstraintOperator:
        return ConstraintOperator.LESS

    def _compare(self, actual: Any, expected: Any) -> bool:
        return bool(actual < expected)


class LessEqualPredicate(_OrderingPredicate):
    @property
    def name(self) -> ConstraintOperator:
        return ConstraintOperator.LESS_EQUAL

    def _compare(self, actual: Any, expected: Any) -> bool:
        return bool(actual <= expected)


class LikePredicate(MemoryPredicate):
    @property
    def name(self) -> ConstraintOperator:
        return ConstraintOperator.LIKE

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        if field_value is None:
            return False
        return _like_to_regex(str(condition_value)).fullmatch(str(field_value)) is not None


class NotLikePredicate(MemoryPredicate):
    @property
    def name(self) -> ConstraintOperator:
        return ConstraintOperator.NOT_LIKE

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        if field_value is None:
            return False
        return _like_to_regex(str(condition_value)).fullmatch(str(field_value)) is None


class InPredicate(MemoryPredicate):
    @property
    def name(self) -> ConstraintOperator:
        return ConstraintOperator.IN

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        if field_value is None:
            return False
        return any(
            EqualPredicate().evaluate(field_value, candidate)
            for candidate in condition_value
        )


class NotInPredicate(MemoryPredicate):
    @property
    def name(self) -> ConstraintOperator:
        return ConstraintOperator.NOT_IN

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        if field_value is None:
            return False
        return not InPredicate().evaluate(field_value, condition_value)


class IsNullPredicate(MemoryPredicate):
    @property
    def name(self) -> ConstraintOperator:
        return ConstraintOperator.IS_NULL

    def evaluate(self, field_value: Any, _condition_value: Any) -> bool:
        return field_value is None


class IsNotNullPredicate(MemoryPredicate):
    @property
    def name(self) -> ConstraintOperator:
        return ConstraintOperator.IS_NOT_NULL

    def evaluate(self, field_value: Any, _condition_value: Any) -> bool:
        return field_value is not None


class MemoryPredicateRegistry:
    """Registry of :class:`MemoryPredicate` instances keyed by operator."""

    def __init__(self) -> None:
        self._predicates: dict[ConstraintOperator, MemoryPredicate] = {}

    def register(self, predicate: MemoryPredicate) -> None:
        self._predicates[predicate.name] = predicate

    def register_all(self, *predicates: MemoryPredicate) -> None:
        for predicate in predicates:
            self.register(predicate)

    def get(self, name: ConstraintOperator) -> MemoryPredicate | None:
        return self._predicates.get(name)

    def evaluate(
        self,
        name: ConstraintOperator,
        field_value: Any,
        condition_value: Any,
    ) -> bool:
        """
        Look up the operator and evaluate.

        Raises:
            ValueError: If the operator is not registered.
        """
        predicate = self.get(name)
        if predicate is None:
            raise ValueError(f"Unsupported operator for in-memory evaluation: {name}")
        return predicate.evaluate(field_value, condition_value)


def build_default_registry() -> MemoryPredicateRegistry:
    """Create a registry with every built-in predicate."""
    registry = MemoryPredicateRegistry()
    registry.register_all(
        EqualPredicate(),
        NotEqualPredicate(),
        GreaterPredicate(),
        GreaterEqualPredicate(),
        LessPredicate(),
        LessEqualPredicate(),
        LikePredicate(),
        NotLikePredicate(),
        InPredicate(),
        NotInPredicate(),
        IsNullPredicate(),
        IsNotNullPredicate(),
    )
    return registry
