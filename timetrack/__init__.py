"""TimeTrack: punch-in/out time tracking with daily and weekly hour rollups."""

from .clock import Clock, FakeClock, RealClock
from .db import SQLiteEntryRepository
from .exceptions import (
    AlreadyClosedError,
    AlreadyPunchedInError,
    ConflictError,
    DataIntegrityError,
    ForbiddenError,
    NotFoundError,
    TimeTrackError,
    ValidationError,
)
from .models import EntryWithDuration, TimeEntry
from .repository import EntryRepository, InMemoryEntryRepository
from .stats import WEEKLY_TARGET_HOURS, DailyStats, WeeklyStats
from .tracker import TimeTracker

__version__ = "0.1.0"

__all__ = [
    "AlreadyClosedError",
    "AlreadyPunchedInError",
    "Clock",
    "ConflictError",
    "DailyStats",
    "DataIntegrityError",
    "EntryRepository",
    "EntryWithDuration",
    "FakeClock",
    "ForbiddenError",
    "InMemoryEntryRepository",
    "NotFoundError",
    "RealClock",
    "SQLiteEntryRepository",
    "TimeEntry",
    "TimeTrackError",
    "TimeTracker",
    "ValidationError",
    "WEEKLY_TARGET_HOURS",
    "WeeklyStats",
    "__version__",
]
