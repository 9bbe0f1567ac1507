"""Tests for WaitlistStore."""

import json
import multiprocessing
from datetime import date

import pytest
from conftest import LOCATION, MONDAY_10AM, SHOP_TZ, make_entry

from walkin.clock import FixedClock
from walkin.errors import QueueEmpty, StorageError
from walkin.lifecycle import WaitlistManager
from walkin.models.schedule import Closure
from walkin.models.store import StoreData
from walkin.store import WaitlistStore


@pytest.fixture
def empty_store(tmp_path):
    """Return a store backed by a file that does not exist yet."""
    return WaitlistStore(tmp_path / "data" / "waitlist.json")


class TestStoreLoad:
    """Tests for WaitlistStore.load()."""

    def test_load_empty_when_file_missing(self, empty_store):
        data = empty_store.load()
        assert isinstance(data, StoreData)
        assert data.locations == {}

    def test_load_existing_file(self, tmp_path):
        path = tmp_path / "waitlist.json"
        path.write_text(
            json.dumps(
                {
                    "locations": {
                        LOCATION: {
                            "location_id": LOCATION,
                            "entries": [
                                {
                                    "id": "e1",
                                    "customer_id": "alice",
                                    "guest_count": 2,
                                    "priority_level": 0,
                                    "joined_at": "2026-03-02T14:00:00Z",
                                    "served_at": None,
                                    "notification_sent": False,
                                }
                            ],
                            "hours": {
                                "1": {
                                    "day_of_week": 1,
                                    "is_open": True,
                                    "start_time": "09:00",
                                    "end_time": "17:00",
                                }
                            },
                        }
                    },
                    "updated_at": "2026-03-02T14:00:00Z",
                }
            )
        )
        store = WaitlistStore(path)
        assert store.list_active(LOCATION)[0].guest_count == 2
        assert store.get_hours(LOCATION)[0].day_of_week == 1

    def test_corrupt_file(self, tmp_path):
        path = tmp_path / "waitlist.json"
        path.write_text("{not json")
        with pytest.raises(StorageError):
            WaitlistStore(path).load()

    def test_invalid_records(self, tmp_path):
        path = tmp_path / "waitlist.json"
        path.write_text(json.dumps({"locations": {LOCATION: {"entries": []}}}))
        with pytest.raises(StorageError):
            WaitlistStore(path).load()


class TestStoreSave:
    """Tests for WaitlistStore.save()."""

    def test_save_creates_parent_dirs(self, empty_store):
        empty_store.save(StoreData())
        assert empty_store.path.exists()

    def test_save_with_indent(self, empty_store):
        empty_store.save(StoreData())
        assert "\n  " in empty_store.path.read_text()

    def test_no_temp_file_left(self, empty_store):
        empty_store.save(StoreData())
        empty_store.save(StoreData())
        assert list(empty_store.path.parent.glob("*.tmp")) == []


class TestTransaction:
    """Tests for WaitlistStore.transaction()."""

    def test_changes_saved(self, empty_store):
        with empty_store.transaction(LOCATION) as loc:
            loc.entries.append(make_entry("a"))
        assert [e.id for e in empty_store.list_active(LOCATION)] == ["a"]

    def test_nothing_saved_on_error(self, empty_store):
        empty_store.insert_entry(LOCATION, make_entry("a"))
        with pytest.raises(RuntimeError):
            with empty_store.transaction(LOCATION) as loc:
                loc.entries.append(make_entry("b"))
                raise RuntimeError("boom")
        assert [e.id for e in empty_store.list_active(LOCATION)] == ["a"]

    def test_locations_are_separate(self, empty_store):
        empty_store.insert_entry("shop-1", make_entry("a"))
        empty_store.insert_entry("shop-2", make_entry("b"))
        assert [e.id for e in empty_store.list_active("shop-1")] == ["a"]
        assert [e.id for e in empty_store.list_active("shop-2")] == ["b"]

    def test_stores_share_lock_per_file(self, tmp_path):
        first = WaitlistStore(tmp_path / "w.json")
        second = WaitlistStore(tmp_path / "w.json")
        assert first._lock is second._lock


class TestStoreQueries:
    """Tests for the read and write helpers."""

    def test_active_lookups(self, empty_store):
        empty_store.insert_entry(LOCATION, make_entry("old", customer_id="alice", served=True))
        empty_store.insert_entry(LOCATION, make_entry("new", customer_id="alice"))
        assert empty_store.get_active_by_customer(LOCATION, "alice").id == "new"
        assert empty_store.get_active_by_id(LOCATION, "old") is None
        assert empty_store.get_active_by_id(LOCATION, "new").customer_id == "alice"
        assert empty_store.get_active_by_customer(LOCATION, "bob") is None

    def test_update_entry(self, empty_store):
        empty_store.insert_entry(LOCATION, make_entry("a"))
        updated = empty_store.update_entry(LOCATION, "a", priority_level=3)
        assert updated.priority_level == 3
        assert empty_store.get_active_by_id(LOCATION, "a").priority_level == 3
        assert empty_store.update_entry(LOCATION, "missing", priority_level=1) is None

    def test_closures_in_range(self, empty_store):
        with empty_store.transaction(LOCATION) as loc:
            loc.closures = [
                Closure(date=date(2026, 3, 20)),
                Closure(date=date(2026, 3, 1)),
                Closure(date=date(2026, 3, 10)),
            ]
        found = empty_store.get_closures(LOCATION, date(2026, 3, 2), date(2026, 3, 20))
        assert [c.date for c in found] == [date(2026, 3, 10), date(2026, 3, 20)]
        assert len(empty_store.get_closures(LOCATION)) == 3

    def test_contacts(self, empty_store):
        empty_store.set_contact(LOCATION, "alice", "alice@example.com")
        assert empty_store.get_contact(LOCATION, "alice") == "alice@example.com"
        assert empty_store.get_contact(LOCATION, "bob") is None


def _join_in_process(path, customer, barrier):
    manager = WaitlistManager(
        WaitlistStore(path), FixedClock(SHOP_TZ, MONDAY_10AM), background_notifications=False
    )
    barrier.wait()
    manager.join(LOCATION, customer)


def _serve_in_process(path, barrier, served):
    manager = WaitlistManager(
        WaitlistStore(path), FixedClock(SHOP_TZ, MONDAY_10AM), background_notifications=False
    )
    barrier.wait()
    while True:
        try:
            served.put(manager.serve_next(LOCATION).id)
        except QueueEmpty:
            return


@pytest.fixture
def fork_context():
    if "fork" not in multiprocessing.get_all_start_methods():
        pytest.skip("needs the fork start method")
    return multiprocessing.get_context("fork")


class TestCrossProcess:
    """Separate processes sharing one store file never lose updates."""

    def test_concurrent_joins(self, store, fork_context):
        count = 12
        barrier = fork_context.Barrier(count)
        procs = [
            fork_context.Process(target=_join_in_process, args=(store.path, f"c{i}", barrier))
            for i in range(count)
        ]
        for p in procs:
            p.start()
        for p in procs:
            p.join(timeout=60)

        assert [p.exitcode for p in procs] == [0] * count
        customers = {e.customer_id for e in store.list_active(LOCATION)}
        assert customers == {f"c{i}" for i in range(count)}
        assert list(store.path.parent.glob("*.tmp")) == []

    def test_concurrent_serves(self, store, fork_context):
        with store.transaction(LOCATION) as loc:
            loc.entries.extend(make_entry(f"e{i:02d}", minutes=i) for i in range(12))

        workers = 4
        barrier = fork_context.Barrier(workers)
        served = fork_context.Queue()
        procs = [
            fork_context.Process(target=_serve_in_process, args=(store.path, barrier, served))
            for _ in range(workers)
        ]
        for p in procs:
            p.start()
        ids = [served.get(timeout=60) for _ in range(12)]
        for p in procs:
            p.join(timeout=60)

        assert [p.exitcode for p in procs] == [0] * workers
        assert sorted(ids) == [f"e{i:02d}" for i in range(12)]
        assert store.list_active(LOCATION) == []
