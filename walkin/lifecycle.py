"""Entry Lifecycle Manager - join, leave, serve and reprioritise entries.

Each entry goes Active -> Served exactly once. Every mutation runs inside a
single store transaction, and anything that can reorder the queue is followed
by a notification check that cannot affect the mutation's own result.
"""

import logging
import uuid
from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta

from .audit import AuditLogger, record
from .clock import ShopClock
from .errors import AlreadyQueued, EntryNotFound, InvalidInput, NotQueued, QueueEmpty, ShopClosed
from .models.schedule import ScheduleStatus
from .models.waitlist import QueueListing, QueueView, WaitlistEntry
from .notifications import NotificationTrigger
from .notify.base import Notifier
from .ordering import compute_queue_view, order_entries, select_next
from .schedule import compute_schedule_status
from .store import WaitlistStore, find_active_by_customer, find_active_by_id

logger = logging.getLogger(__name__)

GUEST_COUNTS = (1, 2)


def _check_guest_count(guest_count: object) -> int:
    if (
        isinstance(guest_count, bool)
        or not isinstance(guest_count, int)
        or guest_count not in GUEST_COUNTS
    ):
        raise InvalidInput(f"guest_count must be 1 or 2, got {guest_count!r}")
    return guest_count


def _check_priority(priority_level: object) -> int:
    if isinstance(priority_level, bool) or not isinstance(priority_level, int) or priority_level < 0:
        raise InvalidInput(
            f"priority_level must be a non-negative integer, got {priority_level!r}"
        )
    return priority_level


class WaitlistManager:
    """Drives the waitlist for one store and one shop clock."""

    def __init__(
        self,
        store: WaitlistStore,
        clock: ShopClock,
        notifier: Notifier | None = None,
        audit: AuditLogger | None = None,
        *,
        background_notifications: bool = True,
    ) -> None:
        """Initialize the manager.

        Args:
            store: Storage collaborator.
            clock: Source of "now" and the shop's time zone.
            notifier: Sends position notices; None disables them.
            audit: Optional audit trail.
            background_notifications: Run notification checks on a single
                worker thread (the default) rather than inline after each
                mutation. Call close() to wait for pending checks.
        """
        self.store = store
        self.clock = clock
        self.audit = audit
        self.trigger = (
            NotificationTrigger(store, notifier, audit) if notifier is not None else None
        )
        self._executor = (
            ThreadPoolExecutor(max_workers=1, thread_name_prefix="walkin-notify")
            if background_notifications and self.trigger is not None
            else None
        )

    def close(self) -> None:
        """Wait for queued notification checks and stop the worker."""
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def __enter__(self) -> "WaitlistManager":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _after_reorder(self, location_id: str) -> None:
        if self.trigger is None:
            return
        if self._executor is not None:
            self._executor.submit(self.trigger.check, location_id)
        else:
            self.trigger.check(location_id)

    def _audit(self, operation: str, location_id: str, **kwargs) -> None:
        record(self.audit, operation, location_id, **kwargs)

    def get_schedule_status(self, location_id: str) -> ScheduleStatus:
        """Open/closed status right now, in the shop's time zone."""
        now = self.clock.now()
        today = self.clock.resolve(now).date
        hours = self.store.get_hours(location_id)
        # Only today and the lookahead window matter.
        closures = self.store.get_closures(location_id, today, today + timedelta(days=8))
        return compute_schedule_status(hours, closures, now, self.clock)

    def join(self, location_id: str, customer_id: str, guest_count: int = 1) -> WaitlistEntry:
        """Add the customer to the queue.

        Raises:
            InvalidInput: guest_count is not 1 or 2.
            ShopClosed: The shop is not open right now.
            AlreadyQueued: The customer already has an active entry.
        """
        guest_count = _check_guest_count(guest_count)

        status = self.get_schedule_status(location_id)
        if not status.is_open_now:
            self._audit("JOIN_REJECTED", location_id, customer=customer_id, reason="closed")
            raise ShopClosed(status)

        with self.store.transaction(location_id) as loc:
            existing = find_active_by_customer(loc, customer_id)
            if existing is not None:
                raise AlreadyQueued(existing)
            entry = WaitlistEntry(
                id=str(uuid.uuid4()),
                customer_id=customer_id,
                guest_count=guest_count,
                priority_level=0,
                joined_at=self.clock.now(),
            )
            loc.entries.append(entry)

        logger.info("Customer %s joined the queue at %s", customer_id, location_id)
        self._audit("JOIN", location_id, entry=entry.id, customer=customer_id, guests=guest_count)
        self._after_reorder(location_id)
        return entry

    def leave(self, location_id: str, customer_id: str) -> WaitlistEntry:
        """Take the customer's own entry out of the queue.

        Raises:
            NotQueued: The customer has no active entry.
        """
        with self.store.transaction(location_id) as loc:
            entry = find_active_by_customer(loc, customer_id)
            if entry is None:
                raise NotQueued(customer_id)
            entry.served_at = self.clock.now()

        self._audit("LEAVE", location_id, entry=entry.id, customer=customer_id)
        self._after_reorder(location_id)
        return entry

    def serve_next(self, location_id: str) -> WaitlistEntry:
        """Mark the head of the queue as served and return it.

        Raises:
            QueueEmpty: There are no active entries.
        """
        with self.store.transaction(location_id) as loc:
            entry = select_next(loc.entries)
            if entry is None:
                raise QueueEmpty()
            entry.served_at = self.clock.now()

        logger.info("Served entry %s at %s", entry.id, location_id)
        self._audit("SERVE", location_id, entry=entry.id, customer=entry.customer_id)
        self._after_reorder(location_id)
        return entry

    def set_priority(self, location_id: str, entry_id: str, priority_level: int) -> WaitlistEntry:
        """Set an active entry's priority level. joined_at is never touched.

        Raises:
            InvalidInput: priority_level is not a non-negative integer.
            EntryNotFound: No such entry, or it was already served.
        """
        priority_level = _check_priority(priority_level)
        if not entry_id:
            raise InvalidInput("entry_id is required")

        with self.store.transaction(location_id) as loc:
            entry = find_active_by_id(loc, entry_id)
            if entry is None:
                raise EntryNotFound(entry_id)
            previous = entry.priority_level
            entry.priority_level = priority_level

        self._audit(
            "PRIORITY", location_id, entry=entry_id, **{"from": previous}, to=priority_level
        )
        self._after_reorder(location_id)
        return entry

    def promote(self, location_id: str, entry_id: str, priority_level: int = 1) -> WaitlistEntry:
        return self.set_priority(location_id, entry_id, priority_level)

    def demote(self, location_id: str, entry_id: str, priority_level: int = 0) -> WaitlistEntry:
        return self.set_priority(location_id, entry_id, priority_level)

    def get_queue_view(self, location_id: str, customer_id: str | None = None) -> QueueView:
        """Queue view, from the customer's point of view if one is given."""
        snapshot = self.store.snapshot(location_id)
        subject_id = None
        if customer_id is not None:
            own = find_active_by_customer(snapshot, customer_id)
            subject_id = own.id if own is not None else None
        return compute_queue_view(snapshot.entries, subject_id)

    def list_queue(self, location_id: str) -> list[QueueListing]:
        """Operator listing in canonical order, with contact emails."""
        snapshot = self.store.snapshot(location_id)
        return [
            QueueListing(
                position=index,
                id=entry.id,
                customer_id=entry.customer_id,
                email=snapshot.contacts.get(entry.customer_id, "Unknown"),
                guest_count=entry.guest_count,
                priority_level=entry.priority_level,
                joined_at=entry.joined_at,
            )
            for index, entry in enumerate(order_entries(snapshot.entries), start=1)
        ]

    def register_contact(self, location_id: str, customer_id: str, email: str) -> None:
        """Record where position notices for a customer should go."""
        if not email or "@" not in email:
            raise InvalidInput(f"email is not valid: {email!r}")
        self.store.set_contact(location_id, customer_id, email)
