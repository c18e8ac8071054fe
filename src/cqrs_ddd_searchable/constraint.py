"""Immutable operator/value pair parsed from one raw value."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator

from .operators import ConstraintOperator, negate

NEGATION_MARKER = "!"

_COMPARISON_TAGS: dict[ConstraintOperator, str] = {
    ConstraintOperator.GREATER: "gt",
    ConstraintOperator.GREATER_EQUAL: "ge",
    ConstraintOperator.LESS: "lt",
    ConstraintOperator.LESS_EQUAL: "le",
}

NULL_LITERAL = "(null)"

_NEGATED_FORMS = frozenset(
    {
        ConstraintOperator.NOT_EQUAL,
        ConstraintOperator.NOT_LIKE,
        ConstraintOperator.NOT_IN,
        ConstraintOperator.IS_NOT_NULL,
    }
)


class Constraint(BaseModel):
    """
    A single filter constraint.

    ``value`` is a tuple for ``IN``/``NOT_IN``, ``None`` for the null
    checks and a plain string otherwise. ``negated`` records whether the
    raw value carried a leading ``!``, even though the operator already
    reflects it.
    """

    model_config = ConfigDict(frozen=True)

    operator: ConstraintOperator
    value: str | tuple[str, ...] | None = None
    negated: bool = False

    @model_validator(mode="after")
    def _check_value_shape(self) -> Constraint:
        if self.operator.is_membership != isinstance(self.value, tuple):
            raise ValueError(
                f"Operator {self.operator.value!r} requires "
                f"{'a tuple' if self.operator.is_membership else 'a scalar'} value"
            )
        if self.operator.is_null_check != (self.value is None):
            raise ValueError(
                f"Operator {self.operator.value!r} "
                f"{'takes no' if self.operator.is_null_check else 'requires a'} value"
            )
        return self

    @classmethod
    def make(cls, raw: Any) -> Constraint:
        """Parse *raw* with the default grammar."""
        from .parser import parse_constraint

        return parse_constraint(raw)

    def to_raw(self) -> str:
        """
        Render this constraint back into the filter grammar.

        The operator alone decides what the rendered value parses to.
        ``negated`` only picks the spelling of a comparison, ``!(gt)5``
        rather than ``(le)5``.
        """
        if self.operator in _COMPARISON_TAGS:
            if self.negated:
                tag = _COMPARISON_TAGS[negate(self.operator)]
                return f"{NEGATION_MARKER}({tag}){self.value}"
            return f"({_COMPARISON_TAGS[self.operator]}){self.value}"
        prefix = NEGATION_MARKER if self.operator in _NEGATED_FORMS else ""
        if self.operator.is_null_check:
            return f"{prefix}{NULL_LITERAL}"
        if isinstance(self.value, tuple):
            return prefix + ",".join(self.value)
        return f"{prefix}{self.value}"
