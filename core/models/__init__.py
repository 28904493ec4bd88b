"""Pydantic data models shared across all components."""

from core.models.expression import (
    ALIASES,
    CONSTRAINTS,
    DAYS_IN_MONTH,
    FIELD_NAMES,
    PARSE_DEFAULTS,
    PREDEFINED,
    CompiledExpression,
    FieldConstraint,
)
from core.models.calendar import CalendarComponents

__all__ = [
    "ALIASES",
    "CONSTRAINTS",
    "DAYS_IN_MONTH",
    "FIELD_NAMES",
    "PARSE_DEFAULTS",
    "PREDEFINED",
    "CompiledExpression",
    "FieldConstraint",
    "CalendarComponents",
]
