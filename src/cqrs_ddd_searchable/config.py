"""Which fields a host exposes, and who intercepts them."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from .constraint import NEGATION_MARKER

WILDCARD = "*"
DEFAULT_MODE_KEY = "mode"

F = TypeVar("F", bound=Callable[..., Any])


class SearchableConfig(BaseModel):
    """
    Searchability rules for one record type.

    Attributes:
        searchable: Allow-list of field names; ``"*"`` allows every field.
            ``None`` means the host gave no allow-list.
        not_searchable: Deny-list; ``"*"`` denies every field. Wins over
            the allow-list.
        reserved: Parameter names owned by sibling concerns (sorting,
            paging, eager loading). Never treated as fields.
        mode_key: Parameter carrying the combination mode.
        interceptors: Field name -> handler ``(query, constraint, mode)``.
        owner: Name used in error messages.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    searchable: frozenset[str] | None = None
    not_searchable: frozenset[str] | None = None
    reserved: frozenset[str] = frozenset()
    mode_key: str = DEFAULT_MODE_KEY
    interceptors: dict[str, Callable[..., Any]] = Field(default_factory=dict)
    owner: str | None = None

    @property
    def is_configured(self) -> bool:
        return self.searchable is not None or self.not_searchable is not None

    @property
    def reserved_keys(self) -> frozenset[str]:
        return self.reserved | {self.mode_key}

    def is_searchable(self, field: str) -> bool:
        """
        Decide whether ``field`` may be filtered on.

        A leading negation marker is ignored for the lookup, so
        ``!relation:field`` follows the rules of ``relation:field``.
        """
        name = field.removeprefix(NEGATION_MARKER)
        if field in self.reserved_keys or name in self.reserved_keys:
            return False
        denied = self.not_searchable or frozenset()
        if WILDCARD in denied or name in denied:
            return False
        if self.searchable is None:
            return True
        return WILDCARD in self.searchable or name in self.searchable

    def interceptor_for(self, field: str) -> Callable[..., Any] | None:
        return self.interceptors.get(field)

    @classmethod
    def from_model(
        cls,
        model: type[Any],
        *,
        reserved: Iterable[str] = (),
        mode_key: str = DEFAULT_MODE_KEY,
    ) -> SearchableConfig:
        """
        Build the configuration from a host class.

        Reads ``__searchable__`` and ``__not_searchable__`` class
        attributes and collects methods decorated with :func:`intercepts`.
        ``__reserved_params__`` on the class extends ``reserved``.
        """
        searchable = getattr(model, "__searchable__", None)
        not_searchable = getattr(model, "__not_searchable__", None)
        reserved_names = _names(reserved) | _names(
            getattr(model, "__reserved_params__", ())
        )
        return cls(
            searchable=_names(searchable) if searchable is not None else None,
            not_searchable=(
                _names(not_searchable) if not_searchable is not None else None
            ),
            reserved=reserved_names,
            mode_key=mode_key,
            interceptors=_collect_interceptors(model),
            owner=model.__name__,
        )


def intercepts(*fields: str) -> Callable[[F], classmethod[Any, Any, Any]]:
    """
    Mark a host method as the interceptor for ``fields``.

    The method becomes a classmethod called as
    ``(cls, query, constraint, mode)``; returning a truthy value skips the
    default application of that constraint::

        class Product(Base, SearchableMixin):
            __searchable__ = ("name", "tags")

            @intercepts("tags")
            def _filter_tags(cls, query, constraint, mode):
                ...
                return True
    """
    if not fields:
        raise ValueError("intercepts() needs at least one field name")

    def decorator(func: F) -> classmethod[Any, Any, Any]:
        func.__intercepts__ = tuple(fields)  # type: ignore[attr-defined]
        return classmethod(func)

    return decorator


def _collect_interceptors(model: type[Any]) -> dict[str, Callable[..., Any]]:
    interceptors: dict[str, Callable[..., Any]] = {}
    seen: set[str] = set()
    for klass in model.__mro__:
        for name, attr in vars(klass).items():
            if name in seen:
                continue
            seen.add(name)
            if not isinstance(attr, classmethod):
                continue
            fields = getattr(attr.__func__, "__intercepts__", None)
            if not fields:
                continue
            bound = getattr(model, name)
            for field in fields:
                interceptors.setdefault(field, bound)
    return interceptors


def _names(value: str | Iterable[str]) -> frozenset[str]:
    # a lone string is one name, not a set of characters
    if isinstance(value, str):
        return frozenset({value})
    return frozenset(value)
