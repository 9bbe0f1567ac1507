"""JSON-file store for waitlist entries, hours, closures and contacts."""

import json
import os
import tempfile
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date, datetime, timezone
from pathlib import Path

from filelock import FileLock, Timeout
from pydantic import ValidationError

from .errors import StorageError
from .models.schedule import Closure, WeeklyHourRule
from .models.store import LocationData, StoreData
from .models.waitlist import WaitlistEntry

LOCK_TIMEOUT_SECONDS = 30

# One lock pair per store file, shared by every WaitlistStore pointing at it.
# The RLock orders threads in this process; the FileLock orders processes.
_LOCKS: dict[Path, tuple[threading.RLock, FileLock]] = {}
_LOCKS_GUARD = threading.Lock()


def _locks_for(path: Path) -> tuple[threading.RLock, FileLock]:
    with _LOCKS_GUARD:
        if path not in _LOCKS:
            _LOCKS[path] = (
                threading.RLock(),
                FileLock(str(path) + ".lock", timeout=LOCK_TIMEOUT_SECONDS),
            )
        return _LOCKS[path]


class WaitlistStore:
    """Persists all shop data to a single JSON file.

    Every read-modify-write goes through ``transaction``, which holds the
    file's lock for the whole block. That makes check-then-insert and
    select-then-update sequences atomic for every caller, including other
    processes sharing the same file.
    """

    def __init__(self, path: Path) -> None:
        """Initialize the store with the path to its JSON file."""
        self.path = Path(path).resolve()
        self._lock, self._file_lock = _locks_for(self.path)

    @contextmanager
    def _locked(self) -> Iterator[None]:
        with self._lock:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            try:
                self._file_lock.acquire()
            except Timeout as e:
                raise StorageError(f"Timed out waiting for lock on {self.path}") from e
            try:
                yield
            finally:
                self._file_lock.release()

    def load(self) -> StoreData:
        """Load store data from file. Returns empty data if the file is missing."""
        if not self.path.exists():
            return StoreData()
        try:
            with open(self.path) as f:
                data = json.load(f)
            return StoreData.model_validate(data)
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            raise StorageError(f"Cannot read store {self.path}: {e}") from e

    def save(self, data: StoreData) -> None:
        """Save store data to file with indent=2.

        Writes a temporary file next to the store and renames it into place.
        """
        data.updated_at = datetime.now(timezone.utc)
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w", dir=self.path.parent, prefix=self.path.name + ".", suffix=".tmp", delete=False
            ) as f:
                tmp_name = f.name
                json.dump(data.model_dump(mode="json"), f, indent=2, default=str)
            os.replace(tmp_name, self.path)
        except OSError as e:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StorageError(f"Cannot write store {self.path}: {e}") from e

    @contextmanager
    def transaction(self, location_id: str) -> Iterator[LocationData]:
        """Yield one location's data; save it if the block completes.

        If the block raises, nothing is written.
        """
        with self._locked():
            data = self.load()
            location = data.locations.get(location_id)
            if location is None:
                location = LocationData(location_id=location_id)
                data.locations[location_id] = location
            yield location
            self.save(data)

    def snapshot(self, location_id: str) -> LocationData:
        """Read-only copy of one location's data."""
        with self._locked():
            data = self.load()
        return data.locations.get(location_id) or LocationData(location_id=location_id)

    def insert_entry(self, location_id: str, entry: WaitlistEntry) -> WaitlistEntry:
        with self.transaction(location_id) as loc:
            loc.entries.append(entry)
        return entry

    def update_entry(self, location_id: str, entry_id: str, **fields) -> WaitlistEntry | None:
        """Set fields on an entry. Returns the updated entry, or None if missing."""
        with self.transaction(location_id) as loc:
            for index, entry in enumerate(loc.entries):
                if entry.id == entry_id:
                    updated = entry.model_copy(update=fields)
                    loc.entries[index] = updated
                    return updated
        return None

    def get_active_by_customer(self, location_id: str, customer_id: str) -> WaitlistEntry | None:
        return find_active_by_customer(self.snapshot(location_id), customer_id)

    def get_active_by_id(self, location_id: str, entry_id: str) -> WaitlistEntry | None:
        return find_active_by_id(self.snapshot(location_id), entry_id)

    def list_active(self, location_id: str) -> list[WaitlistEntry]:
        return [e for e in self.snapshot(location_id).entries if e.is_active]

    def get_hours(self, location_id: str) -> list[WeeklyHourRule]:
        """Weekly rules ordered by weekday."""
        hours = self.snapshot(location_id).hours
        return [hours[day] for day in sorted(hours)]

    def get_closures(
        self, location_id: str, start: date | None = None, end: date | None = None
    ) -> list[Closure]:
        """Closures with start <= date <= end (either bound optional), ordered by date."""
        closures = [
            c
            for c in self.snapshot(location_id).closures
            if (start is None or c.date >= start) and (end is None or c.date <= end)
        ]
        return sorted(closures, key=lambda c: c.date)

    def set_contact(self, location_id: str, customer_id: str, email: str) -> None:
        with self.transaction(location_id) as loc:
            loc.contacts[customer_id] = email

    def get_contact(self, location_id: str, customer_id: str) -> str | None:
        return self.snapshot(location_id).contacts.get(customer_id)


def find_active_by_customer(location: LocationData, customer_id: str) -> WaitlistEntry | None:
    for entry in location.entries:
        if entry.customer_id == customer_id and entry.is_active:
            return entry
    return None


def find_active_by_id(location: LocationData, entry_id: str) -> WaitlistEntry | None:
    for entry in location.entries:
        if entry.id == entry_id and entry.is_active:
            return entry
    return None
