from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Iterable, Sequence

from .clock import parse_date
from .duration import ms_to_hours
from .models import EntryWithDuration, TimeEntry

WEEKLY_TARGET_HOURS = 40
DAYS_PER_WEEK = 7


@dataclass(frozen=True)
class DailyStats:
    date: str
    total_hours: float
    entries: list[EntryWithDuration]
    is_today: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date,
            "total_hours": self.total_hours,
            "entries": [item.to_dict() for item in self.entries],
            "is_today": self.is_today,
        }


@dataclass(frozen=True)
class WeeklyStats:
    start_date: str
    total_hours: float
    remaining_hours: float
    progress_percentage: float
    daily_stats: list[DailyStats]

    def to_dict(self) -> dict[str, Any]:
        return {
            "start_date": self.start_date,
            "total_hours": self.total_hours,
            "remaining_hours": self.remaining_hours,
            "progress_percentage": self.progress_percentage,
            "daily_stats": [day.to_dict() for day in self.daily_stats],
        }


def week_start(value: str | date) -> date:
    """Monday of the week containing ``value``; a Monday maps to itself."""
    day = parse_date(value)
    # Sunday=0..Saturday=6, so Sunday goes back six days.
    weekday = (day.weekday() + 1) % 7
    return day - timedelta(days=(weekday + 6) % 7)


def week_dates(start: str | date) -> list[str]:
    first = week_start(start)
    return [(first + timedelta(days=offset)).isoformat() for offset in range(DAYS_PER_WEEK)]


def summarize_day(day: str, entries: Iterable[TimeEntry], today: str) -> DailyStats:
    annotated = [EntryWithDuration.of(entry) for entry in entries]
    total_ms = sum(item.duration_ms for item in annotated if item.duration_ms is not None)
    return DailyStats(
        date=day,
        total_hours=ms_to_hours(total_ms),
        entries=annotated,
        is_today=day == today,
    )


def summarize_week(start: str | date, days: Sequence[DailyStats]) -> WeeklyStats:
    if len(days) != DAYS_PER_WEEK:
        raise ValueError(f"a week needs {DAYS_PER_WEEK} daily stats, got {len(days)}")
    total_hours = float(sum(day.total_hours for day in days))
    return WeeklyStats(
        start_date=week_start(start).isoformat(),
        total_hours=total_hours,
        remaining_hours=max(0.0, WEEKLY_TARGET_HOURS - total_hours),
        progress_percentage=min(100.0, total_hours / WEEKLY_TARGET_HOURS * 100),
        daily_stats=list(days),
    )
