from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from ...pdf import render_pdf
from ...reporting import WeeklyReport, build_weekly_report, render_markdown, report_filename
from ...tracker import TimeTracker
from ..deps import get_tracker, get_user_id

router = APIRouter(prefix="/api/v1", tags=["reports"])


def _weekly_report(tracker: TimeTracker, user_id: str, start_date: str | None) -> WeeklyReport:
    weekly = tracker.weekly_stats(user_id, start_date)
    return build_weekly_report(weekly, now=tracker.clock.now(), employee=user_id)


@router.get("/reports/weekly.pdf", response_class=Response)
def weekly_pdf(
    start_date: str | None = None,
    user_id: str = Depends(get_user_id),
    tracker: TimeTracker = Depends(get_tracker),
) -> Response:
    report = _weekly_report(tracker, user_id, start_date)
    return Response(
        content=render_pdf(report),
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{report_filename(report, "pdf")}"'},
    )


@router.get("/reports/weekly.md", response_class=Response)
def weekly_markdown(
    start_date: str | None = None,
    user_id: str = Depends(get_user_id),
    tracker: TimeTracker = Depends(get_tracker),
) -> Response:
    report = _weekly_report(tracker, user_id, start_date)
    return Response(content=render_markdown(report), media_type="text/markdown; charset=utf-8")
