"""``Model.filtered(params)`` for declarative models."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from weakref import WeakKeyDictionary

from sqlalchemy import select

from ...config import SearchableConfig
from ...searchable import Searchable
from .query import SQLAlchemyFilterQuery

if TYPE_CHECKING:
    from collections.abc import Mapping

    from sqlalchemy import Select

_searchables: WeakKeyDictionary[type[Any], Searchable] = WeakKeyDictionary()


class SearchableMixin:
    """
    Declarative mixin exposing request filtering as a classmethod.

    Configure with class attributes::

        class Product(Base, SearchableMixin):
            __tablename__ = "products"
            __searchable__ = ("name", "price", "category:name")
            __not_searchable__ = ("secret",)
            __reserved_params__ = ("sort", "page")
    """

    __searchable__ = None
    __not_searchable__ = None
    __reserved_params__ = ()

    @classmethod
    def searchable(cls) -> Searchable:
        """The orchestrator for this model, built once per class."""
        searchable = _searchables.get(cls)
        if searchable is None:
            searchable = Searchable(SearchableConfig.from_model(cls))
            _searchables[cls] = searchable
        return searchable

    @classmethod
    def filtered(
        cls,
        params: Mapping[str, Any] | Any,
        stmt: Select[Any] | None = None,
    ) -> Select[Any]:
        """Return ``stmt`` (default ``select(cls)``) filtered by ``params``."""
        query = SQLAlchemyFilterQuery(cls)
        cls.searchable().filtered(query, params)
        return query.apply(stmt if stmt is not None else select(cls))
