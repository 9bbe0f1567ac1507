"""Announcement data models."""

from datetime import datetime

from pydantic import BaseModel, Field

from .waitlist import utcnow


class Announcement(BaseModel):
    """A message posted by the shop to all customers."""

    id: str
    title: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)
    created_at: datetime = Field(default_factory=utcnow)


class AnnouncementView(Announcement):
    """An announcement plus whether the viewing customer has read it."""

    read: bool = False


class UnreadCount(BaseModel):
    total: int = 0
    unread: int = 0
