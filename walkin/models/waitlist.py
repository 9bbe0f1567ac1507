"""Waitlist data models."""

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, Field

# Per-person service time bounds, in minutes. Policy values, not measured.
WAIT_LOW_MINUTES_PER_PERSON = 30
WAIT_HIGH_MINUTES_PER_PERSON = 40


def utcnow() -> datetime:
    """Current instant as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class WaitlistEntry(BaseModel):
    """A single customer's place in the walk-in queue."""

    id: str
    customer_id: str
    guest_count: Literal[1, 2] = 1
    priority_level: int = Field(default=0, ge=0)
    joined_at: datetime = Field(default_factory=utcnow)
    served_at: datetime | None = None
    notification_sent: bool = False

    @property
    def is_active(self) -> bool:
        return self.served_at is None


class QueueView(BaseModel):
    """Snapshot of the queue as seen by one customer (or by nobody)."""

    entries: list[WaitlistEntry] = Field(default_factory=list)
    entry: WaitlistEntry | None = None
    position: int | None = None
    people_ahead: int = 0
    total_entries: int = 0
    total_people: int = 0
    estimated_wait_low_minutes: int = 0
    estimated_wait_high_minutes: int = 0


class QueueListing(BaseModel):
    """One row of the operator's queue listing."""

    position: int
    id: str
    customer_id: str
    email: str = "Unknown"
    guest_count: int
    priority_level: int
    joined_at: datetime
