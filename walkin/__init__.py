"""Walk-in queue manager.

Keeps one shop's virtual waitlist in a canonical serving order and reports
open/closed status from weekly hours and date closures.
"""

from .clock import FixedClock, ShopClock
from .errors import (
    AlreadyQueued,
    EntryNotFound,
    InvalidInput,
    NotQueued,
    QueueEmpty,
    ShopClosed,
    StorageError,
    WaitlistError,
)
from .lifecycle import WaitlistManager
from .ordering import compute_queue_view, order_entries
from .schedule import compute_schedule_status, next_open_at
from .store import WaitlistStore

__all__ = [
    "FixedClock",
    "ShopClock",
    "AlreadyQueued",
    "EntryNotFound",
    "InvalidInput",
    "NotQueued",
    "QueueEmpty",
    "ShopClosed",
    "StorageError",
    "WaitlistError",
    "WaitlistManager",
    "compute_queue_view",
    "order_entries",
    "compute_schedule_status",
    "next_open_at",
    "WaitlistStore",
]
