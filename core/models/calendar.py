"""Calendar components -- an instant broken down into the fields cron matches on."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class CalendarComponents(BaseModel):
    """Discrete calendar view of one instant in one time zone."""

    model_config = ConfigDict(frozen=True)

    year: int
    month_index: int = Field(ge=0, le=11)  # 0 = January
    day: int = Field(ge=1, le=31)
    weekday: int = Field(ge=0, le=6)  # 0 = Sunday
    hour: int = Field(ge=0, le=23)
    minute: int = Field(ge=0, le=59)
    second: int = Field(ge=0, le=59)
    millisecond: int = Field(default=0, ge=0, le=999)

    @property
    def month(self) -> int:
        """Month number, 1-12."""
        return self.month_index + 1
