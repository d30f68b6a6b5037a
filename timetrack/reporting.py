from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo
from pathlib import Path
import re
from typing import Literal

from .clock import local_date
from .duration import MS_PER_HOUR
from .stats import WEEKLY_TARGET_HOURS, DailyStats, WeeklyStats, week_start

DayStatus = Literal["complete", "short", "in-progress", "upcoming"]

FULL_DAY_HOURS = 8


@dataclass(frozen=True)
class DaySummary:
    date: str
    weekday: str
    hours: float
    first_in: datetime | None
    last_out: datetime | None
    entry_count: int
    status: DayStatus


@dataclass(frozen=True)
class DetailRow:
    date: str
    clock_in: datetime
    clock_out: datetime | None
    duration_ms: int | None
    category: str | None
    description: str | None


@dataclass(frozen=True)
class WeeklyReport:
    title: str
    employee: str | None
    start_date: str
    end_date: str
    generated_at: datetime
    total_hours: float
    remaining_hours: float
    progress_percentage: float
    days: list[DaySummary]
    details: list[DetailRow]

    @property
    def date_range(self) -> str:
        start = date.fromisoformat(self.start_date)
        end = date.fromisoformat(self.end_date)
        return f"{start.strftime('%b %d')} - {end.strftime('%b %d, %Y')}"


def format_duration(milliseconds: int | float | None) -> str:
    if milliseconds is None:
        return "0h 0m"
    total = max(0, int(milliseconds))
    hours, rest = divmod(total, MS_PER_HOUR)
    minutes = rest // 60_000
    return f"{hours}h {minutes}m"


def format_hours(hours: float) -> str:
    return format_duration(round(hours * MS_PER_HOUR))


def format_time(value: datetime | None, tz: tzinfo | None = None) -> str:
    if value is None:
        return "-"
    if tz is not None:
        value = value.astimezone(tz)
    return value.strftime("%I:%M %p").lstrip("0")


def summarize_day_status(day: DailyStats, today: str) -> DayStatus:
    status: DayStatus = "upcoming"
    if day.entries:
        if any(item.entry.active for item in day.entries):
            status = "in-progress"
        else:
            status = "complete" if day.total_hours >= FULL_DAY_HOURS else "short"
    if day.date > today:
        status = "upcoming"
    return status


def build_weekly_report(weekly: WeeklyStats, now: datetime, employee: str | None = None) -> WeeklyReport:
    today = local_date(now)
    start = date.fromisoformat(weekly.start_date)
    end = start + timedelta(days=6)

    current_start = week_start(today)
    if start == current_start:
        title = "Time Report: Current Week"
    elif start == current_start - timedelta(days=7):
        title = "Time Report: Previous Week"
    else:
        title = f"Time Report: Week of {start.isoformat()}"

    days: list[DaySummary] = []
    details: list[DetailRow] = []
    for day in weekly.daily_stats:
        entries = [item.entry for item in day.entries]
        first_in = min((entry.clock_in for entry in entries), default=None)
        closed = [entry.clock_out for entry in entries if entry.clock_out is not None]
        last_out = max(closed) if closed and len(closed) == len(entries) else None
        days.append(
            DaySummary(
                date=day.date,
                weekday=date.fromisoformat(day.date).strftime("%A"),
                hours=day.total_hours,
                first_in=first_in,
                last_out=last_out,
                entry_count=len(entries),
                status=summarize_day_status(day, today),
            )
        )
        for item in day.entries:
            details.append(
                DetailRow(
                    date=day.date,
                    clock_in=item.entry.clock_in,
                    clock_out=item.entry.clock_out,
                    duration_ms=item.duration_ms,
                    category=item.entry.category,
                    description=item.entry.description,
                )
            )

    return WeeklyReport(
        title=title,
        employee=employee,
        start_date=start.isoformat(),
        end_date=end.isoformat(),
        generated_at=now,
        total_hours=weekly.total_hours,
        remaining_hours=weekly.remaining_hours,
        progress_percentage=weekly.progress_percentage,
        days=days,
        details=details,
    )


def render_markdown(report: WeeklyReport) -> str:
    tz = report.generated_at.tzinfo
    lines: list[str] = []
    lines.append(f"# {report.title}")
    lines.append("")
    lines.append(f"- Period: {report.date_range}")
    if report.employee:
        lines.append(f"- Employee: {report.employee}")
    lines.append(f"- Generated: {report.generated_at.strftime('%Y-%m-%d %H:%M:%S %Z').strip()}")
    lines.append("")

    lines.append("## Summary")
    lines.append(f"- Total hours: {format_hours(report.total_hours)}")
    lines.append(f"- Remaining hours: {format_hours(report.remaining_hours)}")
    lines.append(f"- Weekly target: {WEEKLY_TARGET_HOURS}h 0m")
    lines.append(f"- Progress: {report.progress_percentage:.1f}%")
    lines.append("")

    lines.append("## Daily hours")
    lines.append("| Day | Hours | First in | Last out | Entries | Status |")
    lines.append("| --- | --- | --- | --- | --- | --- |")
    for day in report.days:
        lines.append(
            f"| {day.weekday} {day.date} | {format_hours(day.hours)} | {format_time(day.first_in, tz)} | "
            f"{format_time(day.last_out, tz)} | {day.entry_count} | {day.status} |"
        )
    lines.append("")

    lines.append("## Detailed time entries")
    if report.details:
        lines.append("| Date | Clock in | Clock out | Duration | Category | Description |")
        lines.append("| --- | --- | --- | --- | --- | --- |")
        for row in report.details:
            clock_out = format_time(row.clock_out, tz) if row.clock_out else "Active"
            duration = format_duration(row.duration_ms) if row.duration_ms is not None else "In progress"
            lines.append(
                f"| {row.date} | {format_time(row.clock_in, tz)} | {clock_out} | {duration} | "
                f"{_cell(row.category)} | {_cell(row.description)} |"
            )
    else:
        lines.append("No time entries this week.")
    lines.append("")
    return "\n".join(lines)


def report_filename(report: WeeklyReport, suffix: str) -> str:
    owner = _slug(report.employee) if report.employee else ""
    prefix = f"{owner}_" if owner else ""
    return f"{prefix}time_report_{report.start_date}.{suffix}"


def write_markdown_report(report: WeeklyReport, out_dir: Path) -> Path:
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    report_path = out_dir / report_filename(report, "md")
    report_path.write_text(render_markdown(report), encoding="utf-8")
    return report_path


def _cell(value: str | None) -> str:
    if not value:
        return "-"
    return value.replace("|", "\\|").replace("\n", " ")


def _slug(value: str) -> str:
    return re.sub(r"[^A-Za-z0-9_-]+", "-", value.strip()).strip("-").lower()
