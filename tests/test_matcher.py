from datetime import datetime

import pytest

from core.errors import InvalidDayOfMonthForMonth
from core.models.expression import CONSTRAINTS
from scheduler.cron import compile_expression
from scheduler.matcher import field_matches, is_wildcard_span, matches


def test_field_matches() -> None:
    assert field_matches(5, (1, 5, 9))
    assert not field_matches(6, (1, 5, 9))
    assert field_matches(1, (1, 5, 9))
    # Past the last value: compared against the first value
    assert not field_matches(10, (1, 5, 9))
    assert not field_matches(3, ())


@pytest.mark.parametrize(
    "field,values,expected",
    [
        ("day_of_month", tuple(range(1, 32)), True),
        ("day_of_month", tuple(range(1, 31)), False),
        ("month", tuple(range(1, 13)), True),
        ("day_of_week", tuple(range(0, 8)), True),
        ("day_of_week", tuple(range(0, 7)), False),
        ("month", tuple(range(2, 13)), False),
        ("second", tuple(range(0, 60)), True),
        ("hour", (), False),
    ],
)
def test_is_wildcard_span(field: str, values: tuple, expected: bool) -> None:
    assert is_wildcard_span(values, CONSTRAINTS[field]) is expected


def test_weekday_hours_scenario() -> None:
    compiled = compile_expression("* 0-9,23 * * 1-5")
    assert matches(compiled, "2017-12-06T08:13:42.770Z")
    assert not matches(compiled, "2017-12-06T12:13:42.770Z")


def test_instant_types() -> None:
    compiled = compile_expression("* 0-9,23 * * 1-5")
    assert matches(compiled, datetime(2017, 12, 6, 8, 13, 42))
    assert matches(compiled, 1512547200)  # 2017-12-06T08:00:00Z
    assert not matches(compiled, datetime(2017, 12, 9, 8, 13, 42))  # Saturday


def test_day_of_month_or_day_of_week() -> None:
    compiled = compile_expression("30 4 1,15 * 5")
    # Wednesday the 1st
    assert matches(compiled, "2017-11-01T04:30:15")
    # Friday the 8th
    assert matches(compiled, "2017-12-08T04:30:00")
    # Tuesday the 2nd
    assert not matches(compiled, "2018-01-02T04:30:00")
    # Right day, wrong minute
    assert not matches(compiled, "2017-11-01T04:31:00")


def test_only_day_of_month_restricted() -> None:
    compiled = compile_expression("0 0 0 13 * *")
    assert matches(compiled, "2017-10-13T00:00:00")
    assert not matches(compiled, "2017-10-14T00:00:00")


def test_only_day_of_week_restricted() -> None:
    compiled = compile_expression("0 0 0 * * sun")
    assert matches(compiled, "2017-12-10T00:00:00")
    assert not matches(compiled, "2017-12-11T00:00:00")
    assert compile_expression("0 0 0 * * 7").day_of_week == (0,)


def test_second_field() -> None:
    compiled = compile_expression("15 * * * * *")
    assert matches(compiled, "2017-12-06T08:13:15")
    assert not matches(compiled, "2017-12-06T08:13:16")


def test_month_field() -> None:
    compiled = compile_expression("* * * * jun-aug *")
    assert matches(compiled, "2018-07-04T12:00:00")
    assert not matches(compiled, "2018-09-04T12:00:00")


def test_time_zone_conversion() -> None:
    compiled = compile_expression("0 0 9 * * *")
    assert matches(compiled, "2017-12-06T08:00:00Z", tz="Europe/Paris")
    assert not matches(compiled, "2017-12-06T08:00:00Z", tz="UTC")
    # Naive datetimes are read as UTC once a zone is requested
    assert matches(compiled, datetime(2017, 12, 6, 8, 0, 0), tz="Europe/Paris")


def test_explicit_february_day_overflow_raises_in_march() -> None:
    compiled = compile_expression("0 0 0 30 feb *")
    with pytest.raises(InvalidDayOfMonthForMonth) as exc_info:
        matches(compiled, "2018-03-05T00:00:00")
    assert exc_info.value.month == 2
    assert exc_info.value.day_of_month == 30


def test_february_check_is_narrow() -> None:
    compiled = compile_expression("0 0 0 30 feb *")
    # Leap year: never raised
    assert not matches(compiled, "2020-03-05T00:00:00")
    # Outside March: never raised
    assert not matches(compiled, "2018-02-10T00:00:00")
    assert not matches(compiled, "2018-01-30T00:00:00")
    # Day 28 fits February
    assert not matches(compile_expression("0 0 0 28 feb *"), "2018-03-01T00:00:00")
    # Other months with impossible days are not checked
    assert not matches(compile_expression("0 0 0 31 apr *"), "2018-05-01T00:00:00")


def test_provider_receives_instant_and_zone(fixed_calendar) -> None:
    calendar = fixed_calendar(day=15, weekday=2, hour=4, minute=30, second=7)
    compiled = compile_expression("30 4 1,15 * 5")
    assert matches(compiled, "ignored", provider=calendar, tz="Asia/Tokyo")
    assert calendar.calls == [("ignored", "Asia/Tokyo")]


def test_matching_is_deterministic() -> None:
    compiled = compile_expression("*/10 * 8-17 * * mon-fri")
    results = {matches(compiled, "2017-12-06T08:13:09") for _ in range(5)}
    assert results == {True}


def test_empty_field_never_matches() -> None:
    compiled = compile_expression("0 0 0 1-5/10 mar *")
    assert not matches(compiled, "2018-03-01T00:00:00")


def test_weekly_fires_only_on_sunday() -> None:
    for expression in ("@weekly", "0 0 * * 0"):
        compiled = compile_expression(expression)
        assert matches(compiled, "2017-12-10T00:00:30")
        assert not matches(compiled, "2017-12-11T00:00:30")


def test_weekday_range_skips_weekend() -> None:
    assert not matches(compile_expression("* * * * 1-5"), "2017-12-09T10:00:00")


def test_partial_day_of_month_span_is_restricted() -> None:
    # 1-30 is not every day, so day of month and Friday combine with OR
    compiled = compile_expression("0 0 0 1-30 * 5")
    assert matches(compiled, "2017-12-06T00:00:00")
    assert matches(compiled, "2017-12-29T00:00:00")
    assert not matches(compiled, "2017-12-31T00:00:00")


def test_february_check_needs_explicit_month() -> None:
    with pytest.raises(InvalidDayOfMonthForMonth):
        matches(compile_expression("0 0 0 30 feb-dec *"), "2018-03-05T00:00:00")
    assert not matches(compile_expression("0 0 0 30 * *"), "2018-03-05T00:00:00")
