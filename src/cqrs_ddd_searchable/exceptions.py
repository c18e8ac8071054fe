"""
Searchable exception hierarchy.

All exceptions inherit from ``SearchableError`` and provide
``to_dict()`` for API-friendly error responses.
"""

from __future__ import annotations

from difflib import get_close_matches
from typing import Any


class SearchableError(Exception):
    """Base exception for all searchable errors."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "message": str(self),
        }


class MalformedFilterError(SearchableError, ValueError):
    """Raised when no recognizer can classify a raw filter value."""

    def __init__(self, raw: Any, reason: str | None = None) -> None:
        self.raw = raw
        self.reason = reason
        message = f"Cannot parse filter value {raw!r}"
        if reason:
            message += f": {reason}"
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "MALFORMED_FILTER",
            "value": self.raw if isinstance(self.raw, str) else repr(self.raw),
            "reason": self.reason,
        }


class SearchabilityConfigurationMissingError(SearchableError):
    """
    The host defines neither an allow-list nor a deny-list.

    This is a configuration fault, distinct from parse failures; it is
    never treated as "no field is searchable".
    """

    def __init__(self, owner: str | None = None) -> None:
        self.owner = owner or "<unnamed>"
        super().__init__(
            f"'{self.owner}' must define searchable fields "
            "(an allow-list, a deny-list, or both)"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "SEARCHABILITY_CONFIGURATION_MISSING",
            "owner": self.owner,
        }


class UnknownFieldError(SearchableError, AttributeError):
    """
    A field or relation does not exist on the queried model.

    Uses fuzzy matching to suggest similar valid names.
    """

    def __init__(
        self,
        field: str,
        model_name: str,
        available_fields: list[str],
        *,
        relation: bool = False,
    ) -> None:
        self.field = field
        self.model_name = model_name
        self.available_fields = available_fields
        self.relation = relation
        self.suggestions = get_close_matches(field, available_fields, n=3, cutoff=0.6)

        kind = "relationship" if relation else "field"
        message = f"Unknown {kind} '{field}' on '{model_name}'."
        if self.suggestions:
            message += f" Did you mean: {', '.join(self.suggestions)}?"
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "UNKNOWN_RELATION" if self.relation else "UNKNOWN_FIELD",
            "field": self.field,
            "model": self.model_name,
            "suggestions": self.suggestions,
            "available_fields": sorted(self.available_fields),
        }
