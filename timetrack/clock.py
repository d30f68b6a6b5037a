from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
import re
from typing import Protocol

from .exceptions import ValidationError

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class Clock(Protocol):
    def now(self) -> datetime:
        ...


class RealClock:
    def now(self) -> datetime:
        return datetime.now().astimezone()


class FakeClock:
    def __init__(self, start: datetime | None = None) -> None:
        base = start or datetime(2026, 1, 1, tzinfo=timezone.utc)
        if base.tzinfo is None:
            base = base.replace(tzinfo=timezone.utc)
        self._current = base

    def now(self) -> datetime:
        return self._current

    def set(self, value: datetime) -> None:
        if value.tzinfo is None:
            value = value.replace(tzinfo=self._current.tzinfo)
        self._current = value

    def advance(self, **kwargs: float) -> datetime:
        self._current += timedelta(**kwargs)
        return self._current


def local_date(instant: datetime) -> str:
    # Aware instants keep the offset they were produced with; naive ones are local.
    if instant.tzinfo is None:
        instant = instant.astimezone()
    return instant.date().isoformat()


def parse_date(value: str | date) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    try:
        if not _ISO_DATE.match(text):
            raise ValueError(text)
        return date.fromisoformat(text)
    except ValueError as exc:
        raise ValidationError(f"invalid date {value!r}, expected YYYY-MM-DD") from exc
