"""
Constraint grammar.

A raw value is trimmed, an optional leading ``!`` is consumed as the
negation marker, and the remaining content is offered to an ordered
sequence of recognizers. The first recognizer that matches decides the
operator and value:

1. ``(gt)5``, ``(ge)5``, ``(lt)5``, ``(le)5``: comparison tags
2. ``(null)``: null check
3. ``%abc``, ``abc%``, ``%abc%``: pattern match
4. ``a,b,c``: membership, otherwise plain equality

Recognizers are strategy objects; new ones are added with
``ConstraintParser.register()``.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from .constraint import NEGATION_MARKER, NULL_LITERAL, Constraint
from .exceptions import MalformedFilterError
from .operators import ConstraintOperator, negate

if TYPE_CHECKING:
    from collections.abc import Iterable

TRIM_CHARACTERS = ", \t\n\r\0\x0b"


class ConstraintRecognizer(ABC):
    """Strategy interface for one rule of the grammar."""

    @abstractmethod
    def recognize(self, content: str, negated: bool) -> Constraint | None:
        """
        Classify *content* (already trimmed, negation marker removed).

        Returns:
            A constraint, or ``None`` to let the next recognizer try.
        """
        ...


class ComparisonRecognizer(ConstraintRecognizer):
    _pattern = re.compile(r"\((gt|ge|lt|le)\)(.+)")
    _operators: dict[str, ConstraintOperator] = {
        "gt": ConstraintOperator.GREATER,
        "ge": ConstraintOperator.GREATER_EQUAL,
        "lt": ConstraintOperator.LESS,
        "le": ConstraintOperator.LESS_EQUAL,
    }

    def recognize(self, content: str, negated: bool) -> Constraint | None:
        match = self._pattern.fullmatch(content)
        if match is None:
            return None
        operator = self._operators[match.group(1)]
        return Constraint(
            operator=negate(operator) if negated else operator,
            value=match.group(2),
            negated=negated,
        )


class NullRecognizer(ConstraintRecognizer):
    def recognize(self, content: str, negated: bool) -> Constraint | None:
        if content != NULL_LITERAL:
            return None
        return Constraint(
            operator=(
                ConstraintOperator.IS_NOT_NULL if negated else ConstraintOperator.IS_NULL
            ),
            negated=negated,
        )


class PatternRecognizer(ConstraintRecognizer):
    """``%`` at either end; the markers stay in the value."""

    _pattern = re.compile(r"(^%.+)|(.+%$)")

    def recognize(self, content: str, negated: bool) -> Constraint | None:
        if self._pattern.search(content) is None:
            return None
        return Constraint(
            operator=ConstraintOperator.NOT_LIKE if negated else ConstraintOperator.LIKE,
            value=content,
            negated=negated,
        )


class EqualityRecognizer(ConstraintRecognizer):
    """Fallback: always matches."""

    def recognize(self, content: str, negated: bool) -> Constraint | None:
        if "," in content:
            return Constraint(
                operator=(
                    ConstraintOperator.NOT_IN if negated else ConstraintOperator.IN
                ),
                value=tuple(content.split(",")),
                negated=negated,
            )
        return Constraint(
            operator=(
                ConstraintOperator.NOT_EQUAL if negated else ConstraintOperator.EQUAL
            ),
            value=content,
            negated=negated,
        )


def default_recognizers() -> list[ConstraintRecognizer]:
    """Return the built-in recognizers in precedence order."""
    return [
        ComparisonRecognizer(),
        NullRecognizer(),
        PatternRecognizer(),
        EqualityRecognizer(),
    ]


class ConstraintParser:
    """Turn raw request values into :class:`Constraint` objects."""

    def __init__(self, recognizers: Iterable[ConstraintRecognizer] | None = None) -> None:
        self._recognizers: list[ConstraintRecognizer] = (
            list(recognizers) if recognizers is not None else default_recognizers()
        )

    @property
    def recognizers(self) -> tuple[ConstraintRecognizer, ...]:
        return tuple(self._recognizers)

    def register(
        self,
        recognizer: ConstraintRecognizer,
        *,
        before: type[ConstraintRecognizer] | None = None,
    ) -> None:
        """
        Add a recognizer.

        Without ``before`` it is consulted first. With ``before`` it is
        inserted ahead of the first recognizer of that type, or appended
        if there is none.
        """
        if before is None:
            self._recognizers.insert(0, recognizer)
            return
        for index, existing in enumerate(self._recognizers):
            if isinstance(existing, before):
                self._recognizers.insert(index, recognizer)
                return
        self._recognizers.append(recognizer)

    def parse(self, raw: Any) -> Constraint:
        if raw is None:
            raise MalformedFilterError(raw, "value is missing")
        if not isinstance(raw, str):
            raw = str(raw)
        content = raw.strip(TRIM_CHARACTERS)
        negated = content.startswith(NEGATION_MARKER)
        if negated:
            content = content[len(NEGATION_MARKER) :]
        for recognizer in self._recognizers:
            constraint = recognizer.recognize(content, negated)
            if constraint is not None:
                return constraint
        raise MalformedFilterError(raw, "no recognizer matched")


_default_parser = ConstraintParser()


def parse_constraint(raw: Any) -> Constraint:
    """Parse *raw* with the shared default parser."""
    return _default_parser.parse(raw)
