from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
import logging
from typing import Any, Union

from .duration import duration_ms
from .exceptions import DataIntegrityError

logger = logging.getLogger(__name__)

UserId = Union[int, str]
EntryId = Union[int, str]


def _clean_text(value: str | None) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@dataclass(frozen=True)
class TimeEntry:
    id: EntryId
    user_id: UserId
    clock_in: datetime
    clock_out: datetime | None
    active: bool
    date: str
    category: str | None = None
    description: str | None = None

    def __post_init__(self) -> None:
        if self.active != (self.clock_out is None):
            self._fail(f"entry {self.id}: active={self.active} with clock_out={self.clock_out}")
        if self.clock_out is not None and self.clock_out < self.clock_in:
            self._fail(f"entry {self.id}: clock_out is before clock_in")
        try:
            parsed = date.fromisoformat(self.date)
        except (TypeError, ValueError):
            parsed = None
        if parsed is None or parsed.isoformat() != self.date:
            self._fail(f"entry {self.id}: invalid date {self.date!r}")

    @staticmethod
    def _fail(message: str) -> None:
        logger.error("time entry invariant violated: %s", message)
        raise DataIntegrityError(message)

    @classmethod
    def open(
        cls,
        id: EntryId,
        user_id: UserId,
        clock_in: datetime,
        date: str,
        category: str | None = None,
        description: str | None = None,
    ) -> TimeEntry:
        return cls(
            id=id,
            user_id=user_id,
            clock_in=clock_in,
            clock_out=None,
            active=True,
            date=date,
            category=_clean_text(category),
            description=_clean_text(description),
        )

    def close(
        self,
        clock_out: datetime,
        category: str | None = None,
        description: str | None = None,
    ) -> TimeEntry:
        return replace(
            self,
            clock_out=clock_out,
            active=False,
            category=_clean_text(category) if category is not None else self.category,
            description=_clean_text(description) if description is not None else self.description,
        )

    def with_details(self, category: str | None = None, description: str | None = None) -> TimeEntry:
        return replace(
            self,
            category=_clean_text(category) if category is not None else self.category,
            description=_clean_text(description) if description is not None else self.description,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "clock_in": self.clock_in.isoformat(),
            "clock_out": self.clock_out.isoformat() if self.clock_out else None,
            "active": self.active,
            "date": self.date,
            "category": self.category,
            "description": self.description,
        }


@dataclass(frozen=True)
class EntryWithDuration:
    entry: TimeEntry
    duration_ms: int | None

    @classmethod
    def of(cls, entry: TimeEntry) -> EntryWithDuration:
        return cls(entry=entry, duration_ms=duration_ms(entry.clock_in, entry.clock_out))

    def to_dict(self) -> dict[str, Any]:
        return {**self.entry.to_dict(), "duration_ms": self.duration_ms}
