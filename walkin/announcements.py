"""Shop announcements with per-customer read tracking."""

import uuid

from .audit import AuditLogger, record
from .errors import InvalidInput
from .models.announcement import Announcement, AnnouncementView, UnreadCount
from .models.waitlist import utcnow
from .store import WaitlistStore


class AnnouncementBoard:
    """Posts announcements and tracks which customers have read them."""

    def __init__(self, store: WaitlistStore, audit: AuditLogger | None = None) -> None:
        self.store = store
        self.audit = audit

    def post(self, location_id: str, title: str, message: str) -> Announcement:
        if not title or not title.strip() or not message or not message.strip():
            raise InvalidInput("Title and message are required")

        announcement = Announcement(
            id=str(uuid.uuid4()),
            title=title.strip(),
            message=message.strip(),
            created_at=utcnow(),
        )
        with self.store.transaction(location_id) as loc:
            loc.announcements.append(announcement)

        record(
            self.audit, "ANNOUNCE", location_id,
            announcement=announcement.id, title=announcement.title,
        )
        return announcement

    def list_for(self, location_id: str, customer_id: str) -> list[AnnouncementView]:
        """All announcements, newest first, with the customer's read flag."""
        snapshot = self.store.snapshot(location_id)
        read_ids = set(snapshot.announcement_reads.get(customer_id, []))
        newest_first = sorted(snapshot.announcements, key=lambda a: a.created_at, reverse=True)
        return [
            AnnouncementView(**a.model_dump(), read=a.id in read_ids) for a in newest_first
        ]

    def unread_count(self, location_id: str, customer_id: str) -> UnreadCount:
        snapshot = self.store.snapshot(location_id)
        existing = {a.id for a in snapshot.announcements}
        read = existing & set(snapshot.announcement_reads.get(customer_id, []))
        total = len(existing)
        return UnreadCount(total=total, unread=max(0, total - len(read)))

    def mark_all_read(self, location_id: str, customer_id: str) -> int:
        """Mark every announcement read for the customer. Returns how many were new."""
        with self.store.transaction(location_id) as loc:
            read = loc.announcement_reads.setdefault(customer_id, [])
            new_ids = [a.id for a in loc.announcements if a.id not in read]
            read.extend(new_ids)
        return len(new_ids)
