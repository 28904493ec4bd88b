"""Cron expression front end -- split, compile and test expressions.

Supports 6-field cron with an optional leading seconds field:
    second minute hour day_of_month month day_of_week

Examples:
    "0 16 * * 1-5"       -> weekdays at 4pm, every second of that minute
    "0 0 9 * * sun"      -> Sundays at 9am, second 0
    "*/5 * * * *"        -> minutes 4, 9, 14, ... (counter-based steps)
    "0 9,17 * * *"       -> 9am and 5pm daily
    "@hourly"            -> "0 * * * *"
"""

from __future__ import annotations

import logging
from functools import lru_cache

from core.errors import ExpressionError, ParseError
from core.models.expression import (
    CONSTRAINTS,
    FIELD_NAMES,
    PARSE_DEFAULTS,
    PREDEFINED,
    CompiledExpression,
)
from core.protocols import CalendarProvider, Instant
from scheduler.fields import compile_field
from scheduler.matcher import matches

logger = logging.getLogger(__name__)


def split_expression(expression: str) -> list[str]:
    """Split an expression into exactly six field texts.

    Predefined names are expanded first. Missing leading fields take the
    default ('*'); tokens past the sixth are ignored.
    """
    if not isinstance(expression, str):
        raise ExpressionError(f"Cron expression must be a string, got {type(expression).__name__}")

    text = PREDEFINED.get(expression, expression)
    tokens = text.split()
    count = len(FIELD_NAMES)

    if len(tokens) >= count:
        return tokens[:count]

    start = count - len(tokens)
    return list(PARSE_DEFAULTS[:start]) + tokens


def compile_expression(expression: str) -> CompiledExpression:
    """Compile a full expression. Results are cached; they are immutable.

    Raises:
        ParseError subclass naming the offending field.
    """
    if not isinstance(expression, str):
        raise ExpressionError(f"Cron expression must be a string, got {type(expression).__name__}")
    return _compile(expression)


@lru_cache(maxsize=256)
def _compile(expression: str) -> CompiledExpression:
    tokens = split_expression(expression)
    values = {
        name: compile_field(name, token, CONSTRAINTS[name])
        for name, token in zip(FIELD_NAMES, tokens)
    }
    compiled = CompiledExpression(expression=" ".join(tokens), **values)
    logger.debug("Compiled cron expression %r", expression)
    return compiled


def validate_cron_expression(expression: str) -> bool:
    """Return True if ``expression`` compiles."""
    try:
        compile_expression(expression)
    except ParseError:
        return False
    return True


def cron_matches(expression: str, dt: Instant, tz: str | None = None) -> bool:
    """Check if an instant matches a cron expression.

    Args:
        expression: 5- or 6-field cron string, or a predefined name
        dt: datetime, ISO-8601 string or POSIX timestamp
        tz: optional time zone name to evaluate the instant in

    Returns:
        True if the instant matches all cron fields.
    """
    return matches(compile_expression(expression), dt, tz=tz)


class CronExpression:
    """A compiled expression bound to evaluation options.

    Usage:
        expr = CronExpression.parse("* 0-9,23 * * 1-5", utc=True)
        expr.test("2017-12-06T08:13:42.770Z")  # True
    """

    def __init__(
        self,
        compiled: CompiledExpression,
        tz: str | None = None,
        utc: bool = False,
        calendar: CalendarProvider | None = None,
    ) -> None:
        self._compiled = compiled
        self._utc = utc
        self._tz = "UTC" if utc else tz
        self._calendar = calendar

    @classmethod
    def parse(
        cls,
        expression: str,
        tz: str | None = None,
        utc: bool = False,
        calendar: CalendarProvider | None = None,
    ) -> CronExpression:
        """Compile an expression and bind it to the given options."""
        return cls(compile_expression(expression), tz=tz, utc=utc, calendar=calendar)

    @property
    def compiled(self) -> CompiledExpression:
        return self._compiled

    @property
    def fields(self) -> dict[str, tuple[int, ...]]:
        return self._compiled.fields()

    @property
    def tz(self) -> str | None:
        return self._tz

    def test(self, instant: Instant) -> bool:
        """Check whether the instant satisfies this expression."""
        return matches(self._compiled, instant, provider=self._calendar, tz=self._tz)

    def __repr__(self) -> str:
        return f"CronExpression({self._compiled.expression!r}, tz={self._tz!r})"
