"""
IFilterQuery implementation that builds a SQLAlchemy WHERE clause.

Relation scopes compile to correlated ``EXISTS`` sub-queries through
``relationship.any()`` (to-many) or ``relationship.has()`` (to-one);
dotted relation paths nest one ``EXISTS`` per segment.

Example::

    query = SQLAlchemyFilterQuery(UserRecord)
    searchable.filtered(query, {"name": "jo%", "posts:title": "(null)"})
    stmt = query.apply(select(UserRecord))
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import and_, or_
from sqlalchemy import inspect as sa_inspect

from ...exceptions import UnknownFieldError
from ...operators import CombinationMode, ConstraintOperator
from .operators import DEFAULT_SQLA_REGISTRY

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from sqlalchemy import ColumnElement, Select

    from .operators import SQLAlchemyOperatorRegistry

logger = logging.getLogger("cqrs_ddd.searchable.sqlalchemy")


class SQLAlchemyFilterQuery:
    """Accumulate filter predicates for one mapped model."""

    def __init__(
        self,
        model: type[Any],
        *,
        registry: SQLAlchemyOperatorRegistry | None = None,
    ) -> None:
        self.model = model
        self._registry = registry or DEFAULT_SQLA_REGISTRY
        self._mapper = sa_inspect(model)
        self._clauses: list[tuple[CombinationMode, ColumnElement[bool]]] = []

    # -- IFilterQuery --------------------------------------------------------

    def where(
        self,
        field: str,
        operator: ConstraintOperator,
        value: Any,
        *,
        boolean: CombinationMode = CombinationMode.AND,
    ) -> SQLAlchemyFilterQuery:
        column = self._column(field)
        return self.add(
            self._registry.apply(ConstraintOperator(operator), column, value),
            boolean=boolean,
        )

    def where_in(
        self,
        field: str,
        values: Sequence[Any],
        *,
        negate: bool = False,
        boolean: CombinationMode = CombinationMode.AND,
    ) -> SQLAlchemyFilterQuery:
        operator = ConstraintOperator.NOT_IN if negate else ConstraintOperator.IN
        return self.add(
            self._registry.apply(operator, self._column(field), list(values)),
            boolean=boolean,
        )

    def where_null(
        self,
        field: str,
        *,
        negate: bool = False,
        boolean: CombinationMode = CombinationMode.AND,
    ) -> SQLAlchemyFilterQuery:
        operator = (
            ConstraintOperator.IS_NOT_NULL if negate else ConstraintOperator.IS_NULL
        )
        return self.add(
            self._registry.apply(operator, self._column(field), None),
            boolean=boolean,
        )

    def where_has(
        self,
        relation: str,
        callback: Callable[[Any], None],
        *,
        negate: bool = False,
        boolean: CombinationMode = CombinationMode.AND,
    ) -> SQLAlchemyFilterQuery:
        name, _, rest = relation.partition(".")
        rel_attr = self._relationship(name)
        nested = SQLAlchemyFilterQuery(
            rel_attr.property.mapper.class_, registry=self._registry
        )
        if rest:
            nested.where_has(rest, callback)
        else:
            callback(nested)

        criterion = nested.expression
        if rel_attr.property.uselist:
            exists = cast("ColumnElement[bool]", rel_attr.any(criterion))
        else:
            exists = cast("ColumnElement[bool]", rel_attr.has(criterion))
        return self.add(~exists if negate else exists, boolean=boolean)

    # -- composition ---------------------------------------------------------

    def add(
        self,
        expression: ColumnElement[bool],
        *,
        boolean: CombinationMode = CombinationMode.AND,
    ) -> SQLAlchemyFilterQuery:
        """Append a ready-made SQLAlchemy expression (used by interceptors)."""
        self._clauses.append((boolean, expression))
        return self

    @property
    def expression(self) -> ColumnElement[bool] | None:
        """The folded WHERE expression, or ``None`` when nothing was added."""
        result: ColumnElement[bool] | None = None
        for boolean, clause in self._clauses:
            if result is None:
                result = clause
            elif boolean is CombinationMode.OR:
                result = or_(result, clause)
            else:
                result = and_(result, clause)
        return result

    def apply(self, stmt: Select[Any]) -> Select[Any]:
        """Return ``stmt`` with the accumulated filter applied."""
        expression = self.expression
        if expression is None:
            return stmt
        return stmt.where(expression)

    # -- resolution ----------------------------------------------------------

    def _column(self, field: str) -> Any:
        descriptors = self._mapper.all_orm_descriptors
        if field not in descriptors or field in self._mapper.relationships:
            raise UnknownFieldError(
                field,
                self.model.__name__,
                [
                    key
                    for key in descriptors.keys()
                    if key != "__mapper__" and key not in self._mapper.relationships
                ],
            )
        return getattr(self.model, field)

    def _relationship(self, name: str) -> Any:
        if name not in self._mapper.relationships:
            raise UnknownFieldError(
                name,
                self.model.__name__,
                list(self._mapper.relationships.keys()),
                relation=True,
            )
        logger.debug("Resolving relationship %s.%s", self.model.__name__, name)
        return getattr(self.model, name)
