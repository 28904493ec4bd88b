"""Match engine -- tests calendar components against a compiled expression.

Day of month and day of week follow the crontab(5) rule: when both fields
are restricted (neither is '*'), a day matches if EITHER field matches.
"30 4 1,15 * 5" fires at 4:30 on the 1st and 15th of each month, plus
every Friday.
"""

from __future__ import annotations

import logging
from typing import Sequence

from core.calendar import ZoneInfoCalendar, is_leap_year
from core.errors import InvalidDayOfMonthForMonth
from core.models.calendar import CalendarComponents
from core.models.expression import CONSTRAINTS, DAYS_IN_MONTH, CompiledExpression, FieldConstraint
from core.protocols import CalendarProvider, Instant

logger = logging.getLogger(__name__)

_DEFAULT_CALENDAR = ZoneInfoCalendar()


def field_matches(value: int, sequence: Sequence[int]) -> bool:
    """True if the first scheduled value >= value equals value.

    When value is past the last scheduled value, compare against the first
    scheduled value instead (wrap-around).
    """
    for scheduled in sequence:
        if scheduled >= value:
            return scheduled == value
    return bool(sequence) and sequence[0] == value


def is_wildcard_span(sequence: Sequence[int], constraint: FieldConstraint) -> bool:
    """True if the sequence has as many values as the whole constraint range."""
    if not sequence:
        return False
    expected = constraint.max + 1 if constraint.min < 1 else constraint.max
    return len(sequence) == expected


def check_calendar(compiled: CompiledExpression, parts: CalendarComponents) -> None:
    """Reject an explicit February target whose day-of-month maximum does
    not fit February, evaluated while the instant is in March.

    Raises:
        InvalidDayOfMonthForMonth
    """
    if is_wildcard_span(compiled.month, CONSTRAINTS["month"]):
        return
    if not compiled.month or not compiled.day_of_month:
        return

    current_month = parts.month
    previous_month = 11 if current_month == 1 else current_month - 1
    days_in_previous = DAYS_IN_MONTH[previous_month - 1]
    day_of_month_max = compiled.day_of_month[-1]

    if is_leap_year(parts.year):
        days_in_previous = 29
        day_of_month_max = 29

    if (
        previous_month == 2
        and compiled.month[0] == previous_month
        and days_in_previous < day_of_month_max
    ):
        raise InvalidDayOfMonthForMonth(
            f"Invalid explicit day of month definition: day {compiled.day_of_month[-1]} "
            f"in month {previous_month}",
            month=previous_month,
            day_of_month=compiled.day_of_month[-1],
        )


def day_matches(compiled: CompiledExpression, parts: CalendarComponents) -> bool:
    """Apply the day-of-month / day-of-week selection rule."""
    dom_match = field_matches(parts.day, compiled.day_of_month)
    dow_match = field_matches(parts.weekday, compiled.day_of_week)

    dom_wild = is_wildcard_span(compiled.day_of_month, CONSTRAINTS["day_of_month"])
    dow_wild = is_wildcard_span(compiled.day_of_week, CONSTRAINTS["day_of_week"])

    if not dom_match and not dow_match:
        return False

    # Only day of month is restricted
    if not dom_wild and dow_wild and not dom_match:
        return False

    # Only day of week is restricted
    if dom_wild and not dow_wild and not dow_match:
        return False

    if not (dom_wild and dow_wild) and not dom_match and not dow_match:
        return False

    return True


def matches_components(compiled: CompiledExpression, parts: CalendarComponents) -> bool:
    """Match already-resolved calendar components."""
    check_calendar(compiled, parts)

    if not day_matches(compiled, parts):
        return False

    return (
        field_matches(parts.month, compiled.month)
        and field_matches(parts.hour, compiled.hour)
        and field_matches(parts.minute, compiled.minute)
        and field_matches(parts.second, compiled.second)
    )


def matches(
    compiled: CompiledExpression,
    instant: Instant,
    provider: CalendarProvider | None = None,
    tz: str | None = None,
) -> bool:
    """Check if an instant satisfies a compiled expression.

    Args:
        compiled: output of compile_expression
        instant: datetime, ISO-8601 string or POSIX timestamp
        provider: calendar provider (defaults to ZoneInfoCalendar)
        tz: optional time zone name passed to the provider

    Returns:
        True if the day rule and the month, hour, minute and second fields all match.

    Raises:
        InvalidDayOfMonthForMonth from the calendar sanity check.
    """
    parts = (provider or _DEFAULT_CALENDAR).components(instant, tz)
    result = matches_components(compiled, parts)
    logger.debug("Match %r at %s (tz=%s): %s", compiled.expression, instant, tz, result)
    return result
