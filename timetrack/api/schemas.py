from __future__ import annotations

from datetime import datetime
from typing import Union

from pydantic import BaseModel, Field

OpaqueId = Union[int, str]


class TimeEntryOut(BaseModel):
    id: OpaqueId
    user_id: OpaqueId
    clock_in: datetime
    clock_out: datetime | None = None
    active: bool
    date: str
    category: str | None = None
    description: str | None = None
    duration_ms: int | None = None


class EntryDetailsRequest(BaseModel):
    category: str | None = Field(default=None, max_length=100)
    description: str | None = Field(default=None, max_length=2000)


class DailyStatsOut(BaseModel):
    date: str
    total_hours: float
    entries: list[TimeEntryOut]
    is_today: bool


class WeeklyStatsOut(BaseModel):
    start_date: str
    total_hours: float
    remaining_hours: float
    progress_percentage: float
    daily_stats: list[DailyStatsOut]


class ErrorOut(BaseModel):
    detail: str


class HealthOut(BaseModel):
    status: str = Field(default="ok")


class MetaOut(BaseModel):
    app: str
    version: str
    db_path: str | None = None
    weekly_target_hours: int
    platform: str
