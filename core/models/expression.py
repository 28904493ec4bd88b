"""Expression models -- field constraints, static tables and compiled expressions.

The tables here are read-only: aliases, constraints and predefined
expressions never change at runtime.
"""

from __future__ import annotations

from types import MappingProxyType

from pydantic import BaseModel, ConfigDict, model_validator


class FieldConstraint(BaseModel):
    """Inclusive (min, max) bounds for one field."""

    model_config = ConfigDict(frozen=True)

    min: int
    max: int

    @property
    def span(self) -> str:
        """The constraint written as a range, e.g. '0-59'."""
        return f"{self.min}-{self.max}"

    def contains(self, value: int) -> bool:
        return self.min <= value <= self.max


# Field order as written in an expression.
FIELD_NAMES: tuple[str, ...] = (
    "second",
    "minute",
    "hour",
    "day_of_month",
    "month",
    "day_of_week",
)

CONSTRAINTS = MappingProxyType({
    "second": FieldConstraint(min=0, max=59),
    "minute": FieldConstraint(min=0, max=59),
    "hour": FieldConstraint(min=0, max=23),
    "day_of_month": FieldConstraint(min=1, max=31),
    "month": FieldConstraint(min=1, max=12),
    "day_of_week": FieldConstraint(min=0, max=7),  # 7 is Sunday again
})

ALIASES = MappingProxyType({
    "month": MappingProxyType({
        "jan": 1,
        "feb": 2,
        "mar": 3,
        "apr": 4,
        "may": 5,
        "jun": 6,
        "jul": 7,
        "aug": 8,
        "sep": 9,
        "oct": 10,
        "nov": 11,
        "dec": 12,
    }),
    "day_of_week": MappingProxyType({
        "sun": 0,
        "mon": 1,
        "tue": 2,
        "wed": 3,
        "thu": 4,
        "fri": 5,
        "sat": 6,
    }),
})

PREDEFINED = MappingProxyType({
    "@yearly": "0 0 1 1 *",
    "@monthly": "0 0 1 * *",
    "@weekly": "0 0 * * 0",
    "@daily": "0 0 * * *",
    "@hourly": "0 * * * *",
})

PARSE_DEFAULTS: tuple[str, ...] = ("*",) * len(FIELD_NAMES)

# Non-leap year, January first.
DAYS_IN_MONTH: tuple[int, ...] = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)


class CompiledExpression(BaseModel):
    """Six ascending, duplicate-free value sequences. Immutable once built."""

    model_config = ConfigDict(frozen=True)

    second: tuple[int, ...]
    minute: tuple[int, ...]
    hour: tuple[int, ...]
    day_of_month: tuple[int, ...]
    month: tuple[int, ...]
    day_of_week: tuple[int, ...]

    # Source text, after predefined-name expansion.
    expression: str = ""

    @model_validator(mode="after")
    def _check_sequences(self) -> CompiledExpression:
        for name in FIELD_NAMES:
            values = getattr(self, name)
            constraint = CONSTRAINTS[name]
            for value in values:
                if not constraint.contains(value):
                    raise ValueError(
                        f"{name} value {value} outside {constraint.span}"
                    )
            if any(a >= b for a, b in zip(values, values[1:])):
                raise ValueError(f"{name} values must be strictly ascending: {values}")
        return self

    def fields(self) -> dict[str, tuple[int, ...]]:
        """Field name -> compiled values, in expression order."""
        return {name: getattr(self, name) for name in FIELD_NAMES}

    def to_dict(self) -> dict[str, list[int]]:
        return {name: list(values) for name, values in self.fields().items()}
