"""Persisted store data models."""

from datetime import datetime

from pydantic import BaseModel, Field

from .announcement import Announcement
from .schedule import Closure, WeeklyHourRule
from .waitlist import WaitlistEntry, utcnow


class LocationData(BaseModel):
    """Everything stored for one shop location."""

    location_id: str
    entries: list[WaitlistEntry] = Field(default_factory=list)
    hours: dict[int, WeeklyHourRule] = Field(default_factory=dict)
    closures: list[Closure] = Field(default_factory=list)
    contacts: dict[str, str] = Field(default_factory=dict)  # customer_id -> email
    announcements: list[Announcement] = Field(default_factory=list)
    announcement_reads: dict[str, list[str]] = Field(default_factory=dict)  # customer_id -> ids


class StoreData(BaseModel):
    """Root store data structure."""

    locations: dict[str, LocationData] = Field(default_factory=dict)
    updated_at: datetime = Field(default_factory=utcnow)
