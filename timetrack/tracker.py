from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from datetime import date
import logging

from .clock import Clock, RealClock, local_date, parse_date
from .exceptions import AlreadyPunchedInError, ConflictError, ValidationError
from .models import EntryId, EntryWithDuration, UserId
from .repository import EntryRepository
from .stats import DAYS_PER_WEEK, DailyStats, WeeklyStats, summarize_day, summarize_week, week_dates

logger = logging.getLogger(__name__)


class TimeTracker:
    """Punch-in/out and hour aggregation for one repository.

    Open sessions never count toward ``total_hours``; only closed sessions
    do, so totals do not drift with the wall clock.
    """

    def __init__(
        self,
        repository: EntryRepository,
        clock: Clock | None = None,
        max_workers: int = DAYS_PER_WEEK,
    ) -> None:
        self.repository = repository
        self.clock = clock or RealClock()
        self.max_workers = max(1, int(max_workers))

    def today(self) -> str:
        return local_date(self.clock.now())

    def punch_in(
        self,
        user_id: UserId,
        category: str | None = None,
        description: str | None = None,
    ) -> EntryWithDuration:
        if self.repository.find_active(user_id) is not None:
            raise AlreadyPunchedInError("You are already punched in")

        now = self.clock.now()
        try:
            entry = self.repository.create(
                user_id=user_id,
                clock_in=now,
                date=local_date(now),
                category=category,
                description=description,
            )
        except ConflictError as exc:
            if isinstance(exc, AlreadyPunchedInError):
                raise
            raise AlreadyPunchedInError("You are already punched in") from exc

        logger.info("user %s punched in (entry %s)", user_id, entry.id)
        return EntryWithDuration.of(entry)

    def punch_out(
        self,
        user_id: UserId,
        entry_id: EntryId,
        category: str | None = None,
        description: str | None = None,
    ) -> EntryWithDuration:
        entry = self.repository.close_active(
            entry_id=entry_id,
            user_id=user_id,
            clock_out=self.clock.now(),
            category=category,
            description=description,
        )
        result = EntryWithDuration.of(entry)
        logger.info("user %s punched out (entry %s, %s ms)", user_id, entry.id, result.duration_ms)
        return result

    def update_active(
        self,
        user_id: UserId,
        entry_id: EntryId,
        category: str | None = None,
        description: str | None = None,
    ) -> EntryWithDuration:
        entry = self.repository.update_details(
            entry_id=entry_id,
            user_id=user_id,
            category=category,
            description=description,
        )
        return EntryWithDuration.of(entry)

    def active_entry(self, user_id: UserId) -> EntryWithDuration | None:
        entry = self.repository.find_active(user_id)
        return EntryWithDuration.of(entry) if entry is not None else None

    def daily_stats(self, user_id: UserId, day: str | date | None = None) -> DailyStats:
        today = self.today()
        target = parse_date(day).isoformat() if day is not None else today
        entries = self.repository.find_by_date(user_id, target)
        stats = summarize_day(target, entries, today)
        logger.debug("daily stats user=%s date=%s hours=%.4f", user_id, target, stats.total_hours)
        return stats

    def weekly_stats(self, user_id: UserId, start_date: str | date | None = None) -> WeeklyStats:
        today = self.today()
        dates = week_dates(start_date if start_date is not None else today)

        def _day(target: str) -> DailyStats:
            return summarize_day(target, self.repository.find_by_date(user_id, target), today)

        # map() keeps input order, so the week stays Monday..Sunday.
        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(dates))) as pool:
            days = list(pool.map(_day, dates))

        stats = summarize_week(dates[0], days)
        logger.debug("weekly stats user=%s start=%s hours=%.4f", user_id, stats.start_date, stats.total_hours)
        return stats

    def recent_entries(self, user_id: UserId, limit: int = 10) -> list[EntryWithDuration]:
        if int(limit) < 1:
            raise ValidationError(f"limit must be >= 1, got {limit}")
        return [EntryWithDuration.of(entry) for entry in self.repository.find_recent(user_id, int(limit))]
