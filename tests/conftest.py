"""Pytest fixtures for walk-in queue tests."""

import json
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from walkin.clock import FixedClock
from walkin.lifecycle import WaitlistManager
from walkin.models.schedule import WeeklyHourRule
from walkin.models.waitlist import WaitlistEntry
from walkin.notify.mock import MockNotifier
from walkin.store import WaitlistStore

LOCATION = "shop-1"
SHOP_TZ = "America/New_York"

# Monday 2026-03-02 10:00 EST (UTC-5)
MONDAY_10AM = datetime(2026, 3, 2, 15, 0, tzinfo=timezone.utc)
T0 = datetime(2026, 3, 2, 14, 0, tzinfo=timezone.utc)


def weekday_rules(start: str = "09:00", end: str = "17:00", days=range(7)) -> list[WeeklyHourRule]:
    """Open rules for the given weekdays (0 = Sunday)."""
    return [
        WeeklyHourRule(day_of_week=day, is_open=True, start_time=start, end_time=end)
        for day in days
    ]


def make_entry(
    entry_id: str,
    customer_id: str | None = None,
    guest_count: int = 1,
    priority_level: int = 0,
    minutes: int = 0,
    served: bool = False,
) -> WaitlistEntry:
    """Build an entry that joined ``minutes`` after T0."""
    joined = T0 + timedelta(minutes=minutes)
    return WaitlistEntry(
        id=entry_id,
        customer_id=customer_id or f"cust-{entry_id}",
        guest_count=guest_count,
        priority_level=priority_level,
        joined_at=joined,
        served_at=joined + timedelta(minutes=5) if served else None,
    )


@pytest.fixture
def tmp_store_path(tmp_path: Path) -> Path:
    """Return a temporary store file path."""
    return tmp_path / "waitlist.json"


@pytest.fixture
def store(tmp_store_path: Path) -> WaitlistStore:
    """A store with the test location open 09:00-17:00 every day."""
    store = WaitlistStore(tmp_store_path)
    with store.transaction(LOCATION) as loc:
        for rule in weekday_rules():
            loc.hours[rule.day_of_week] = rule
    return store


@pytest.fixture
def clock() -> FixedClock:
    """A clock frozen at Monday 10:00 shop time."""
    return FixedClock(SHOP_TZ, MONDAY_10AM)


@pytest.fixture
def notifier() -> MockNotifier:
    return MockNotifier()


@pytest.fixture
def manager(store: WaitlistStore, clock: FixedClock, notifier: MockNotifier) -> WaitlistManager:
    """A manager that runs notification checks inline."""
    return WaitlistManager(store, clock, notifier, background_notifications=False)


@pytest.fixture
def join_customers(manager: WaitlistManager, clock: FixedClock):
    """Join customers one minute apart, registering an email for each."""

    def _join(*customers: str, guest_count: int = 1) -> list[WaitlistEntry]:
        entries = []
        for customer in customers:
            manager.register_contact(LOCATION, customer, f"{customer}@example.com")
            entries.append(manager.join(LOCATION, customer, guest_count))
            clock.advance(minutes=1)
        return entries

    return _join


@pytest.fixture
def shop_file(tmp_path: Path) -> Path:
    """A valid shop hours JSON document."""
    path = tmp_path / "shop.json"
    document = {
        "hours": [
            {"day_of_week": 0, "is_open": False},
            {"day_of_week": 1, "is_open": True, "start_time": "09:00", "end_time": "17:00"},
            {"day_of_week": 2, "is_open": True, "start_time": "09:00", "end_time": "17:00"},
            {"day_of_week": 6, "is_open": True, "start_time": "10:00", "end_time": "14:00"},
        ],
        "closures": [
            {"date": "2026-03-03", "is_closed": True, "reason": "Staff training"},
        ],
    }
    path.write_text(json.dumps(document, indent=2))
    return path
