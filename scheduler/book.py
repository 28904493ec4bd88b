"""Schedule book -- named cron expressions checked against a single instant.

Usage:
    book = ScheduleBook({"backup": "0 0 3 * * *", "report": "@weekly"}, tz="UTC")
    book.due(datetime.now(timezone.utc))  # ["backup"] at 03:00:00
"""

from __future__ import annotations

import logging
from typing import Mapping

from core.errors import ParseError
from core.models.expression import CompiledExpression
from core.protocols import CalendarProvider, Instant
from scheduler.cron import compile_expression
from scheduler.matcher import matches

logger = logging.getLogger(__name__)


class ScheduleBook:
    """Compiles every named expression up front and answers which are due."""

    def __init__(
        self,
        schedules: Mapping[str, str],
        tz: str | None = None,
        calendar: CalendarProvider | None = None,
    ) -> None:
        self._tz = tz
        self._calendar = calendar
        self._compiled: dict[str, CompiledExpression] = {}

        for name, expression in schedules.items():
            try:
                self._compiled[name] = compile_expression(expression)
            except ParseError as exc:
                raise type(exc)(
                    f"Schedule {name!r}: {exc}", field=exc.field, value=exc.value
                ) from exc

        logger.info("Loaded %d schedule(s)", len(self._compiled))

    def __len__(self) -> int:
        return len(self._compiled)

    def __contains__(self, name: object) -> bool:
        return name in self._compiled

    def names(self) -> list[str]:
        return sorted(self._compiled)

    def get(self, name: str) -> CompiledExpression:
        return self._compiled[name]

    def is_due(self, name: str, instant: Instant) -> bool:
        """Check if a single named schedule matches the instant."""
        return matches(self._compiled[name], instant, provider=self._calendar, tz=self._tz)

    def due(self, instant: Instant) -> list[str]:
        """Names of all schedules that match the instant, sorted."""
        due = [name for name in self.names() if self.is_due(name, instant)]
        for name in due:
            logger.info("Schedule due: %s (%s)", name, self._compiled[name].expression)
        return due
