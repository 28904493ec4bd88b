"""ZoneInfoCalendar -- default calendar provider backed by the stdlib tz database.

Instants may be datetimes, ISO-8601 strings or POSIX timestamps.
Naive datetimes are read at face value unless a zone is requested, in which
case they are taken to be UTC. Timestamps without a zone resolve in UTC.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from core.errors import CronError
from core.models.calendar import CalendarComponents
from core.protocols import Instant

logger = logging.getLogger(__name__)


def is_leap_year(year: int) -> bool:
    """Gregorian leap year rule."""
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def _resolve_zone(tz: str) -> ZoneInfo:
    try:
        return ZoneInfo(tz)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise CronError(f"Unknown time zone: {tz!r}") from exc


def to_datetime(instant: Instant) -> datetime:
    """Coerce a supported instant into a datetime."""
    if isinstance(instant, datetime):
        return instant
    if isinstance(instant, bool):
        raise CronError(f"Unsupported instant: {instant!r}")
    if isinstance(instant, (int, float)):
        return datetime.fromtimestamp(instant, tz=timezone.utc)
    if isinstance(instant, str):
        text = instant.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(text)
        except ValueError as exc:
            raise CronError(f"Invalid ISO-8601 instant: {instant!r}") from exc
    raise CronError(f"Unsupported instant: {instant!r}")


class ZoneInfoCalendar:
    """Calendar provider using zoneinfo for named zones.

    Usage:
        calendar = ZoneInfoCalendar()
        parts = calendar.components("2017-12-06T08:13:42.770Z", tz="Europe/Paris")
        parts.hour  # 9
    """

    def components(self, instant: Instant, tz: str | None = None) -> CalendarComponents:
        dt = to_datetime(instant)

        if tz is not None:
            zone = _resolve_zone(tz)
            if dt.tzinfo is None:
                dt = dt.replace(tzinfo=timezone.utc)
            dt = dt.astimezone(zone)

        return CalendarComponents(
            year=dt.year,
            month_index=dt.month - 1,
            day=dt.day,
            weekday=dt.isoweekday() % 7,  # 0=Sun, 6=Sat
            hour=dt.hour,
            minute=dt.minute,
            second=dt.second,
            millisecond=dt.microsecond // 1000,
        )
