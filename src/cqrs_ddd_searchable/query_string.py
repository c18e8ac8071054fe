"""Query string <-> parameter map (request parsing, HATEOAS links)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from urllib.parse import parse_qsl, urlencode

from .config import DEFAULT_MODE_KEY

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .constraint import Constraint
    from .operators import CombinationMode

_LIST_SUFFIX = "[]"


def parse_query_string(query_string: str) -> dict[str, Any]:
    """
    Parse a raw query string into an ordered parameter map.

    Repeated keys, and keys written as ``key[]``, become lists of
    strings in the order they appear. Blank values are kept.
    """
    params: dict[str, Any] = {}
    for key, value in parse_qsl(query_string.lstrip("?"), keep_blank_values=True):
        as_list = key.endswith(_LIST_SUFFIX)
        if as_list:
            key = key[: -len(_LIST_SUFFIX)]
        existing = params.get(key)
        if existing is None:
            params[key] = [value] if as_list else value
        elif isinstance(existing, list):
            existing.append(value)
        else:
            params[key] = [existing, value]
    return params


class QueryStringBuilder:
    """Build a query string from ``(field, constraint)`` pairs."""

    def build(
        self,
        constraints: Iterable[tuple[str, Constraint]],
        *,
        mode: CombinationMode | None = None,
        mode_key: str = DEFAULT_MODE_KEY,
        extra: dict[str, Any] | None = None,
    ) -> str:
        """Produce a query string; fields with several constraints repeat."""
        pairs: list[tuple[str, str]] = [
            (field, constraint.to_raw()) for field, constraint in constraints
        ]
        if mode is not None:
            pairs.append((mode_key, mode.value))
        if extra:
            pairs.extend((key, str(value)) for key, value in extra.items())
        return urlencode(pairs) if pairs else ""
