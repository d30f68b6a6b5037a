from __future__ import annotations

from datetime import datetime
import logging
from threading import Lock
from typing import Protocol

from .exceptions import AlreadyClosedError, ConflictError, DataIntegrityError, ForbiddenError, NotFoundError
from .models import EntryId, TimeEntry, UserId

logger = logging.getLogger(__name__)


class EntryRepository(Protocol):
    """Storage contract the tracker is written against.

    ``create`` must close the check-then-insert race itself: two concurrent
    punch-ins for one user leave exactly one active entry and the loser gets
    :class:`ConflictError`.
    """

    def find_active(self, user_id: UserId) -> TimeEntry | None:
        ...

    def get(self, entry_id: EntryId) -> TimeEntry | None:
        ...

    def find_by_date(self, user_id: UserId, date: str) -> list[TimeEntry]:
        ...

    def find_recent(self, user_id: UserId, limit: int) -> list[TimeEntry]:
        ...

    def find_between(self, user_id: UserId, start_date: str, end_date: str) -> list[TimeEntry]:
        ...

    def create(
        self,
        user_id: UserId,
        clock_in: datetime,
        date: str,
        category: str | None = None,
        description: str | None = None,
    ) -> TimeEntry:
        ...

    def close_active(
        self,
        entry_id: EntryId,
        user_id: UserId,
        clock_out: datetime,
        category: str | None = None,
        description: str | None = None,
    ) -> TimeEntry:
        ...

    def update_details(
        self,
        entry_id: EntryId,
        user_id: UserId,
        category: str | None = None,
        description: str | None = None,
    ) -> TimeEntry:
        ...


def ensure_single_active(user_id: UserId, active: list[TimeEntry]) -> TimeEntry | None:
    if len(active) > 1:
        ids = ", ".join(str(item.id) for item in active)
        logger.error("user %s has %d active entries: %s", user_id, len(active), ids)
        raise DataIntegrityError(f"user {user_id} has {len(active)} active entries ({ids})")
    return active[0] if active else None


def check_open_for(entry: TimeEntry | None, entry_id: EntryId, user_id: UserId) -> TimeEntry:
    if entry is None:
        raise NotFoundError(f"time entry {entry_id} not found")
    if entry.user_id != user_id:
        raise ForbiddenError(f"time entry {entry_id} belongs to another user")
    if not entry.active:
        raise AlreadyClosedError(f"time entry {entry_id} is already closed")
    return entry


class InMemoryEntryRepository:
    def __init__(self) -> None:
        self._lock = Lock()
        self._entries: dict[EntryId, TimeEntry] = {}
        self._next_id = 1

    def find_active(self, user_id: UserId) -> TimeEntry | None:
        with self._lock:
            active = [item for item in self._entries.values() if item.user_id == user_id and item.active]
        return ensure_single_active(user_id, active)

    def get(self, entry_id: EntryId) -> TimeEntry | None:
        with self._lock:
            return self._entries.get(entry_id)

    def find_by_date(self, user_id: UserId, date: str) -> list[TimeEntry]:
        with self._lock:
            items = [item for item in self._entries.values() if item.user_id == user_id and item.date == date]
        return sorted(items, key=lambda item: (item.clock_in, item.id))

    def find_recent(self, user_id: UserId, limit: int) -> list[TimeEntry]:
        with self._lock:
            items = [item for item in self._entries.values() if item.user_id == user_id]
        items.sort(key=lambda item: (item.clock_in, item.id), reverse=True)
        return items[: max(0, int(limit))]

    def find_between(self, user_id: UserId, start_date: str, end_date: str) -> list[TimeEntry]:
        with self._lock:
            items = [
                item
                for item in self._entries.values()
                if item.user_id == user_id and start_date <= item.date <= end_date
            ]
        return sorted(items, key=lambda item: (item.clock_in, item.id))

    def create(
        self,
        user_id: UserId,
        clock_in: datetime,
        date: str,
        category: str | None = None,
        description: str | None = None,
    ) -> TimeEntry:
        with self._lock:
            if any(item.user_id == user_id and item.active for item in self._entries.values()):
                raise ConflictError(f"user {user_id} already has an active time entry")
            entry = TimeEntry.open(
                id=self._next_id,
                user_id=user_id,
                clock_in=clock_in,
                date=date,
                category=category,
                description=description,
            )
            self._entries[entry.id] = entry
            self._next_id += 1
            return entry

    def close_active(
        self,
        entry_id: EntryId,
        user_id: UserId,
        clock_out: datetime,
        category: str | None = None,
        description: str | None = None,
    ) -> TimeEntry:
        with self._lock:
            entry = check_open_for(self._entries.get(entry_id), entry_id, user_id)
            closed = entry.close(clock_out, category=category, description=description)
            self._entries[entry_id] = closed
            return closed

    def update_details(
        self,
        entry_id: EntryId,
        user_id: UserId,
        category: str | None = None,
        description: str | None = None,
    ) -> TimeEntry:
        with self._lock:
            entry = check_open_for(self._entries.get(entry_id), entry_id, user_id)
            updated = entry.with_details(category=category, description=description)
            self._entries[entry_id] = updated
            return updated

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
