from __future__ import annotations

from fastapi import APIRouter, Depends

from ...tracker import TimeTracker
from ..deps import get_tracker, get_user_id
from ..schemas import DailyStatsOut, WeeklyStatsOut

router = APIRouter(prefix="/api/v1", tags=["stats"])


@router.get("/stats/daily", response_model=DailyStatsOut)
def get_daily_stats(
    date: str | None = None,
    user_id: str = Depends(get_user_id),
    tracker: TimeTracker = Depends(get_tracker),
) -> DailyStatsOut:
    stats = tracker.daily_stats(user_id, date)
    return DailyStatsOut(**stats.to_dict())


@router.get("/stats/weekly", response_model=WeeklyStatsOut)
def get_weekly_stats(
    start_date: str | None = None,
    user_id: str = Depends(get_user_id),
    tracker: TimeTracker = Depends(get_tracker),
) -> WeeklyStatsOut:
    stats = tracker.weekly_stats(user_id, start_date)
    return WeeklyStatsOut(**stats.to_dict())
