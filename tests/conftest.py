import pytest

from core.models.calendar import CalendarComponents


class FixedCalendar:
    """Calendar provider that ignores the instant and returns fixed components."""

    def __init__(self, **overrides) -> None:
        values = dict(
            year=2018,
            month_index=0,
            day=1,
            weekday=1,
            hour=0,
            minute=0,
            second=0,
        )
        values.update(overrides)
        self.parts = CalendarComponents(**values)
        self.calls: list[tuple[object, str | None]] = []

    def components(self, instant, tz=None) -> CalendarComponents:
        self.calls.append((instant, tz))
        return self.parts


@pytest.fixture
def fixed_calendar():
    return FixedCalendar


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Point config loading at an empty home directory."""
    monkeypatch.setenv("CRONMATCH_HOME", str(tmp_path))
    return tmp_path
