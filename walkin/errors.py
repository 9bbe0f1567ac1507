"""Rejection kinds raised by waitlist operations."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models.schedule import ScheduleStatus
    from .models.waitlist import WaitlistEntry


class WaitlistError(Exception):
    """Base class for every rejection surfaced to a caller."""

    kind = "error"


class AlreadyQueued(WaitlistError):
    """The customer already holds an active entry.

    Carries the existing entry so the caller can resync without a second read.
    """

    kind = "already_queued"

    def __init__(self, entry: WaitlistEntry) -> None:
        super().__init__("You are already on the waitlist")
        self.entry = entry


class ShopClosed(WaitlistError):
    kind = "shop_closed"

    def __init__(self, status: ScheduleStatus) -> None:
        text = status.today_hours_text
        if status.next_open_text:
            text = f"{text}. {status.next_open_text}"
        super().__init__(f"The shop is closed. {text}")
        self.status = status


class NotQueued(WaitlistError):
    kind = "not_queued"

    def __init__(self, customer_id: str) -> None:
        super().__init__("You are not on the waitlist")
        self.customer_id = customer_id


class QueueEmpty(WaitlistError):
    kind = "queue_empty"

    def __init__(self) -> None:
        super().__init__("No customers in queue")


class EntryNotFound(WaitlistError):
    kind = "entry_not_found"

    def __init__(self, entry_id: str) -> None:
        super().__init__(f"Entry not found or already served: {entry_id}")
        self.entry_id = entry_id


class InvalidInput(WaitlistError, ValueError):
    """Malformed input, rejected before storage is touched."""

    kind = "invalid_input"


class StorageError(WaitlistError):
    """The storage collaborator failed; opaque to callers."""

    kind = "storage_error"
