"""Core protocols -- extension points the match engine depends on.

All protocols use Python's structural subtyping (typing.Protocol):
if your class has the right methods, it implements the protocol.
No inheritance required.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol, Union, runtime_checkable

from core.models.calendar import CalendarComponents

# Anything a calendar provider knows how to resolve.
Instant = Union[datetime, str, int, float]


@runtime_checkable
class CalendarProvider(Protocol):
    """Resolves an instant plus an optional named time zone into
    calendar components.

    Default implementation: ZoneInfoCalendar (stdlib zoneinfo).
    Swap in a fixed-clock provider for tests or simulations.
    """

    def components(self, instant: Instant, tz: str | None = None) -> CalendarComponents:
        """Break the instant down into year, month, day, weekday and time of day."""
        ...
