from datetime import datetime, timezone

import pytest

from core.calendar import ZoneInfoCalendar, is_leap_year, to_datetime
from core.errors import CronError
from core.protocols import CalendarProvider


def test_components_from_iso_string() -> None:
    parts = ZoneInfoCalendar().components("2017-12-06T08:13:42.770Z")
    assert (parts.year, parts.month, parts.month_index, parts.day) == (2017, 12, 11, 6)
    assert parts.weekday == 3  # Wednesday
    assert (parts.hour, parts.minute, parts.second, parts.millisecond) == (8, 13, 42, 770)


def test_components_in_named_zone() -> None:
    parts = ZoneInfoCalendar().components("2017-12-31T23:30:00Z", tz="Europe/Berlin")
    assert (parts.year, parts.month, parts.day, parts.hour) == (2018, 1, 1, 0)
    assert parts.weekday == 1  # Monday


def test_sunday_is_zero() -> None:
    parts = ZoneInfoCalendar().components(datetime(2017, 12, 10, 12, 0))
    assert parts.weekday == 0


def test_timestamp_resolves_in_utc() -> None:
    parts = ZoneInfoCalendar().components(1512547200)
    assert (parts.day, parts.hour, parts.minute) == (6, 8, 0)


def test_to_datetime_passthrough() -> None:
    dt = datetime(2020, 2, 29, tzinfo=timezone.utc)
    assert to_datetime(dt) is dt


@pytest.mark.parametrize("instant", ["not a date", True, None, [2017]])
def test_unsupported_instants(instant) -> None:
    with pytest.raises(CronError):
        ZoneInfoCalendar().components(instant)


def test_unknown_zone() -> None:
    with pytest.raises(CronError):
        ZoneInfoCalendar().components("2017-12-06T08:13:42Z", tz="Mars/Olympus_Mons")


@pytest.mark.parametrize(
    "year,expected",
    [(2016, True), (2017, False), (1900, False), (2000, True)],
)
def test_is_leap_year(year: int, expected: bool) -> None:
    assert is_leap_year(year) is expected


def test_default_provider_satisfies_protocol() -> None:
    assert isinstance(ZoneInfoCalendar(), CalendarProvider)
