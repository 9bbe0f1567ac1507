"""Queue Ordering Engine - canonical order, positions and wait estimates.

Canonical order: priority_level descending, then joined_at ascending, then id
ascending. Listing, position lookup and serve-next selection all go through
``order_entries`` so they can never disagree.
"""

from collections.abc import Iterable
from datetime import datetime

from .models.waitlist import (
    WAIT_HIGH_MINUTES_PER_PERSON,
    WAIT_LOW_MINUTES_PER_PERSON,
    QueueView,
    WaitlistEntry,
)


def canonical_key(entry: WaitlistEntry) -> tuple[int, datetime, str]:
    """Sort key implementing the canonical order."""
    return (-entry.priority_level, entry.joined_at, entry.id)


def order_entries(entries: Iterable[WaitlistEntry]) -> list[WaitlistEntry]:
    """Active entries in canonical order. Served entries are dropped."""
    return sorted((e for e in entries if e.is_active), key=canonical_key)


def select_next(entries: Iterable[WaitlistEntry]) -> WaitlistEntry | None:
    """The entry to be served next, or None if the queue is empty."""
    ordered = order_entries(entries)
    return ordered[0] if ordered else None


def entry_at(entries: Iterable[WaitlistEntry], position: int) -> WaitlistEntry | None:
    """The active entry at a 1-based position, if any."""
    ordered = order_entries(entries)
    if 1 <= position <= len(ordered):
        return ordered[position - 1]
    return None


def compute_queue_view(
    entries: Iterable[WaitlistEntry], subject_entry_id: str | None = None
) -> QueueView:
    """Build the queue view, optionally from one entry's point of view.

    Args:
        entries: Snapshot of entries; anything already served is ignored.
        subject_entry_id: Id of the entry whose position is wanted. Resolving
            by id rather than by customer keeps historical entries of the same
            customer out of the picture.

    Returns:
        QueueView with the ordered entries and aggregate counts. Position is
        None and people_ahead is 0 when the subject is not in the queue.
    """
    ordered = order_entries(entries)
    total_people = sum(e.guest_count for e in ordered)

    subject: WaitlistEntry | None = None
    position: int | None = None
    people_ahead = 0
    if subject_entry_id is not None:
        for index, entry in enumerate(ordered):
            if entry.id == subject_entry_id:
                subject = entry
                position = index + 1
                break
            people_ahead += entry.guest_count
        if subject is None:
            people_ahead = 0

    return QueueView(
        entries=ordered,
        entry=subject,
        position=position,
        people_ahead=people_ahead,
        total_entries=len(ordered),
        total_people=total_people,
        estimated_wait_low_minutes=people_ahead * WAIT_LOW_MINUTES_PER_PERSON,
        estimated_wait_high_minutes=people_ahead * WAIT_HIGH_MINUTES_PER_PERSON,
    )
