"""Business-hours data models."""

import datetime
import re

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

TIME_PATTERN = r"^([01][0-9]|2[0-3]):[0-5][0-9]$"
TIME_RE = re.compile(TIME_PATTERN)


def time_to_minutes(value: str) -> int:
    """Parse "HH:MM" (24h) to minutes since midnight."""
    match = TIME_RE.match(value)
    if match is None:
        raise ValueError(f"time must be HH:MM (24h), got {value!r}")
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


class WeeklyHourRule(BaseModel):
    """Opening hours for one weekday (0 = Sunday .. 6 = Saturday).

    Rows read back from storage are trusted as-is; an open rule without
    both times is simply treated as closed by the scheduler.
    """

    model_config = ConfigDict(extra="forbid")
    day_of_week: int = Field(..., ge=0, le=6)
    is_open: bool = False
    start_time: str | None = Field(default=None, pattern=TIME_PATTERN)
    end_time: str | None = Field(default=None, pattern=TIME_PATTERN)

    @property
    def window(self) -> tuple[int, int] | None:
        """(start, end) in minutes since midnight, or None when closed all day."""
        if not self.is_open or not self.start_time or not self.end_time:
            return None
        return time_to_minutes(self.start_time), time_to_minutes(self.end_time)


class HourRuleInput(WeeklyHourRule):
    """A weekly rule as submitted by the operator; stricter than a stored row."""

    @model_validator(mode="after")
    def check_window(self) -> "HourRuleInput":
        if not self.is_open:
            self.start_time = None
            self.end_time = None
            return self
        if not self.start_time or not self.end_time:
            raise ValueError("start_time and end_time are required when is_open is true")
        if time_to_minutes(self.end_time) <= time_to_minutes(self.start_time):
            raise ValueError("end_time must be after start_time")
        return self


class Closure(BaseModel):
    """A calendar date on which the shop is closed all day."""

    date: datetime.date
    is_closed: bool = True
    reason: str | None = None

    @field_validator("reason")
    @classmethod
    def blank_reason_is_none(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            return None
        return value


class ScheduleStatus(BaseModel):
    """Open/closed status for display."""

    is_open_now: bool
    today_hours_text: str
    next_open_text: str = ""


class HoursOverview(BaseModel):
    """Weekly rules plus upcoming closures, as shown on the schedule page."""

    hours: list[WeeklyHourRule] = Field(default_factory=list)
    closures: list[Closure] = Field(default_factory=list)
