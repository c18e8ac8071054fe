"""
SQLAlchemy operator compilation strategy.

Provides the ``SQLAlchemyOperator`` interface, a registry, and one
implementation per :class:`ConstraintOperator`.
"""

from __future__ import annotations

import operator as op_module
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, cast

from ...operators import ConstraintOperator

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement


class SQLAlchemyOperator(ABC):
    """
    Strategy interface for compiling a constraint operator
    into a SQLAlchemy ``ColumnElement[bool]``.
    """

    @property
    @abstractmethod
    def name(self) -> ConstraintOperator:
        """The operator this strategy handles."""
        ...

    @abstractmethod
    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        ...


class _BinaryOperator(SQLAlchemyOperator):
    _name: ConstraintOperator
    _func: Any

    @property
    def name(self) -> ConstraintOperator:
        return self._name

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", type(self)._func(column, value))


class EqualOperator(_BinaryOperator):
    _name = ConstraintOperator.EQUAL
    _func = op_module.eq


class NotEqualOperator(_BinaryOperator):
    _name = ConstraintOperator.NOT_EQUAL
    _func = op_module.ne


class GreaterOperator(_BinaryOperator):
    _name = ConstraintOperator.GREATER
    _func = op_module.gt


class GreaterEqualOperator(_BinaryOperator):
    _name = ConstraintOperator.GREATER_EQUAL
    _func = op_module.ge


class LessOperator(_BinaryOperator):
    _name = ConstraintOperator.LESS
    _func = op_module.lt


class LessEqualOperator(_BinaryOperator):
    _name = ConstraintOperator.LESS_EQUAL
    _func = op_module.le


class LikeOperator(SQLAlchemyOperator):
    @property
    def name(self) -> ConstraintOperator:
        return ConstraintOperator.LIKE

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", column.like(value))


class NotLikeOperator(SQLAlchemyOperator):
    @property
    def name(self) -> ConstraintOperator:
        return ConstraintOperator.NOT_LIKE

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", column.not_like(value))


class InOperator(SQLAlchemyOperator):
    @property
    def name(self) -> ConstraintOperator:
        return ConstraintOperator.IN

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", column.in_(value))


class NotInOperator(SQLAlchemyOperator):
    @property
    def name(self) -> ConstraintOperator:
        return ConstraintOperator.NOT_IN

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", column.not_in(value))


class IsNullOperator(SQLAlchemyOperator):
    @property
    def name(self) -> ConstraintOperator:
        return ConstraintOperator.IS_NULL

    def apply(self, column: Any, _value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", column.is_(None))


class IsNotNullOperator(SQLAlchemyOperator):
    @property
    def name(self) -> ConstraintOperator:
        return ConstraintOperator.IS_NOT_NULL

    def apply(self, column: Any, _value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", column.is_not(None))


class SQLAlchemyOperatorRegistry:
    """Registry of ``SQLAlchemyOperator`` instances keyed by operator."""

    def __init__(self) -> None:
        self._operators: dict[ConstraintOperator, SQLAlchemyOperator] = {}

    def register(self, operator: SQLAlchemyOperator) -> None:
        self._operators[operator.name] = operator

    def register_all(self, *operators: SQLAlchemyOperator) -> None:
        for op in operators:
            self.register(op)

    def get(self, name: ConstraintOperator) -> SQLAlchemyOperator | None:
        return self._operators.get(name)

    @property
    def supported_operators(self) -> set[ConstraintOperator]:
        return set(self._operators.keys())

    def apply(
        self,
        name: ConstraintOperator,
        column: Any,
        value: Any,
    ) -> ColumnElement[bool]:
        """
        Look up the operator and apply.

        Raises:
            ValueError: If the operator is not registered.
        """
        op = self.get(name)
        if op is None:
            raise ValueError(f"Unsupported operator for SQLAlchemy: {name}")
        return op.apply(column, value)


def build_default_registry() -> SQLAlchemyOperatorRegistry:
    registry = SQLAlchemyOperatorRegistry()
    registry.register_all(
        EqualOperator(),
        NotEqualOperator(),
        GreaterOperator(),
        GreaterEqualOperator(),
        LessOperator(),
        LessEqualOperator(),
        LikeOperator(),
        NotLikeOperator(),
        InOperator(),
        NotInOperator(),
        IsNullOperator(),
        IsNotNullOperator(),
    )
    return registry


DEFAULT_SQLA_REGISTRY = build_default_registry()
