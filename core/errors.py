"""Error types raised while compiling and matching cron expressions.

Every error derives from CronError (itself a ValueError), so callers that
only care about "bad input" can catch a single type.
"""

from __future__ import annotations


class CronError(ValueError):
    """Base class for all cron expression errors."""


# ---------------------------------------------------------------------------
# Compile-time errors
# ---------------------------------------------------------------------------

class ParseError(CronError):
    """A field could not be compiled. No partial result is produced."""

    def __init__(self, message: str, field: str | None = None, value: object = None) -> None:
        super().__init__(message)
        self.field = field
        self.value = value


class ExpressionError(ParseError):
    """The expression as a whole is unusable (e.g. not a string)."""


class InvalidAlias(ParseError):
    """A month or weekday name is not in the alias table."""


class InvalidCharacter(ParseError):
    """Text outside the allowed character class after alias substitution."""


class ConstraintRange(ParseError):
    """A value or range bound lies outside the field's min/max."""


class InvalidRange(ParseError):
    """Range lower bound is not below the upper bound, or a bound is not numeric."""


class InvalidStep(ParseError):
    """Step is zero, negative, or not numeric."""


# ---------------------------------------------------------------------------
# Match-time errors
# ---------------------------------------------------------------------------

class MatchError(CronError):
    """An instant could not be evaluated against a compiled expression."""


class InvalidDayOfMonthForMonth(MatchError):
    """Explicit day-of-month maximum does not fit the explicit February target."""

    def __init__(self, message: str, month: int, day_of_month: int) -> None:
        super().__init__(message)
        self.month = month
        self.day_of_month = day_of_month
