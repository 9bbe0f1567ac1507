"""Notification Trigger - tell the customer who reaches position 3.

Runs after every mutation that can reorder the queue. It never raises: a
failing notifier leaves the entry's flag unset so the next reorder retries.
"""

import logging
import threading

from .audit import AuditLogger, record
from .notify.base import Notifier
from .ordering import entry_at
from .store import WaitlistStore

logger = logging.getLogger(__name__)

NOTIFY_POSITION = 3


class NotificationTrigger:
    """Fires the position notice at most once per entry."""

    def __init__(
        self,
        store: WaitlistStore,
        notifier: Notifier,
        audit: AuditLogger | None = None,
        position: int = NOTIFY_POSITION,
    ) -> None:
        self.store = store
        self.notifier = notifier
        self.audit = audit
        self.position = position
        self._lock = threading.Lock()

    def check(self, location_id: str) -> bool:
        """Notify the entry at the threshold position if it has not been yet.

        Returns:
            True if a notice was sent and recorded, False otherwise.
        """
        try:
            with self._lock:
                return self._check(location_id)
        except Exception as e:
            logger.warning("Notification check failed for %s: %s", location_id, e)
            return False

    def _check(self, location_id: str) -> bool:
        # The notifier is called outside any store transaction.
        snapshot = self.store.snapshot(location_id)
        target = entry_at(snapshot.entries, self.position)
        if target is None or target.notification_sent:
            return False

        address = snapshot.contacts.get(target.customer_id)
        if not address:
            logger.info("No contact address for customer %s; skipping", target.customer_id)
            return False

        result = self.notifier.send(address, self.position)
        if not result.success:
            logger.warning("Notification not sent: %s", result.error)
            record(self.audit, "NOTIFY_FAILED", location_id, entry=target.id, error=result.error)
            return False

        # The entry may have been served meanwhile; the notice still went out.
        with self.store.transaction(location_id) as loc:
            for entry in loc.entries:
                if entry.id == target.id:
                    entry.notification_sent = True

        record(
            self.audit, "NOTIFY", location_id,
            entry=target.id, customer=target.customer_id, position=self.position,
        )
        return True
