from __future__ import annotations

import argparse
from datetime import date, datetime
import logging
from pathlib import Path
import sys

from .clock import RealClock, parse_date
from .config import Settings
from .db import SQLiteEntryRepository
from .duration import elapsed_ms
from .exceptions import DataIntegrityError, TimeTrackError, ValidationError
from .exporting import export_entries_csv
from .log import configure_logging
from .models import EntryWithDuration
from .pdf import write_pdf_report
from .reporting import build_weekly_report, format_duration, format_hours, format_time, write_markdown_report
from .stats import WEEKLY_TARGET_HOURS
from .tracker import TimeTracker

logger = logging.getLogger(__name__)


def parse_date_arg(value: str) -> date:
    try:
        return parse_date(value)
    except ValidationError as exc:
        raise argparse.ArgumentTypeError(exc.message) from exc


def build_parser(settings: Settings | None = None) -> argparse.ArgumentParser:
    settings = settings or Settings.from_env()
    parser = argparse.ArgumentParser(
        prog="timetrack",
        description="TimeTrack: punch in/out and review daily and weekly hours",
    )
    parser.add_argument(
        "--db",
        default=str(settings.db_path),
        help="SQLite database path (default timetrack/data/timetrack.sqlite or $TIMETRACK_DB)",
    )
    parser.add_argument("--user", default="", help="user id the command acts for")
    parser.add_argument("--log-level", default=settings.log_level, help="logging level (default INFO)")

    subparsers = parser.add_subparsers(dest="command", required=True)

    in_parser = subparsers.add_parser("in", help="punch in")
    in_parser.add_argument("--category", default=None, help="work category")
    in_parser.add_argument("--description", default=None, help="what you are working on")

    out_parser = subparsers.add_parser("out", help="punch out")
    out_parser.add_argument("--entry", type=int, default=None, help="entry id (default: the active entry)")
    out_parser.add_argument("--category", default=None, help="work category")
    out_parser.add_argument("--description", default=None, help="what you worked on")

    note_parser = subparsers.add_parser("note", help="update category/description of the active entry")
    note_parser.add_argument("--category", default=None, help="work category")
    note_parser.add_argument("--description", default=None, help="what you are working on")

    subparsers.add_parser("status", help="show the active entry")

    day_parser = subparsers.add_parser("day", aliases=["today"], help="hours for one day")
    day_parser.add_argument("--date", type=parse_date_arg, default=None, help="YYYY-MM-DD (default today)")

    week_parser = subparsers.add_parser("week", help="hours for one week")
    week_parser.add_argument("--start", type=parse_date_arg, default=None, help="any date in the week")

    recent_parser = subparsers.add_parser("recent", help="most recent entries")
    recent_parser.add_argument("--limit", type=int, default=10, help="number of entries")

    report_parser = subparsers.add_parser("report", help="write a weekly report")
    report_parser.add_argument("--start", type=parse_date_arg, default=None, help="any date in the week")
    report_parser.add_argument("--format", choices=["pdf", "markdown"], default="pdf", help="output format")
    report_parser.add_argument("--out-dir", default=str(settings.out_dir), help="output directory")

    export_parser = subparsers.add_parser("export", help="export entries to CSV")
    export_parser.add_argument("--start", type=parse_date_arg, required=True, help="first date, YYYY-MM-DD")
    export_parser.add_argument("--end", type=parse_date_arg, required=True, help="last date, YYYY-MM-DD")
    export_parser.add_argument("--out-dir", default=str(settings.out_dir), help="output directory")

    serve_parser = subparsers.add_parser("serve", help="run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1", help="bind address")
    serve_parser.add_argument("--port", type=int, default=8000, help="bind port")

    return parser


def main(argv: list[str] | None = None) -> int:
    settings = Settings.from_env()
    parser = build_parser(settings)
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    if args.command == "serve":
        return _handle_serve(args, settings)

    user_id = args.user.strip()
    if not user_id:
        parser.error("--user is required")

    repository = SQLiteEntryRepository(Path(args.db), journal_mode=settings.journal_mode)
    tracker = TimeTracker(repository, clock=RealClock())

    handlers = {
        "in": _handle_in,
        "out": _handle_out,
        "note": _handle_note,
        "status": _handle_status,
        "day": _handle_day,
        "today": _handle_day,
        "week": _handle_week,
        "recent": _handle_recent,
        "report": _handle_report,
        "export": _handle_export,
    }
    handler = handlers.get(args.command)
    if handler is None:
        parser.print_help()
        return 2

    try:
        return handler(args, tracker, user_id)
    except DataIntegrityError as exc:
        logger.error("data integrity violation: %s", exc.message)
        print(f"error: {exc.message}", file=sys.stderr)
        return 2
    except TimeTrackError as exc:
        print(f"error: {exc.message}", file=sys.stderr)
        return 1


def _handle_in(args: argparse.Namespace, tracker: TimeTracker, user_id: str) -> int:
    item = tracker.punch_in(user_id, category=args.category, description=args.description)
    print(f"Punched in at {_clock(item.entry.clock_in)} (entry {item.entry.id})")
    return 0


def _handle_out(args: argparse.Namespace, tracker: TimeTracker, user_id: str) -> int:
    entry_id = args.entry
    if entry_id is None:
        active = tracker.active_entry(user_id)
        if active is None:
            print("You are not punched in.", file=sys.stderr)
            return 1
        entry_id = active.entry.id
    item = tracker.punch_out(user_id, entry_id, category=args.category, description=args.description)
    print(f"Punched out at {_clock(item.entry.clock_out)}, worked {format_duration(item.duration_ms)}")
    return 0


def _handle_note(args: argparse.Namespace, tracker: TimeTracker, user_id: str) -> int:
    active = tracker.active_entry(user_id)
    if active is None:
        print("You are not punched in.", file=sys.stderr)
        return 1
    item = tracker.update_active(user_id, active.entry.id, category=args.category, description=args.description)
    print(f"Entry {item.entry.id}: {item.entry.category or '-'} | {item.entry.description or '-'}")
    return 0


def _handle_status(args: argparse.Namespace, tracker: TimeTracker, user_id: str) -> int:
    active = tracker.active_entry(user_id)
    if active is None:
        print("Not punched in.")
        return 0
    running = elapsed_ms(active.entry.clock_in, tracker.clock.now())
    print(f"Punched in since {_clock(active.entry.clock_in)} ({format_duration(running)} so far)")
    print(f"Entry {active.entry.id} | {active.entry.category or '-'} | {active.entry.description or '-'}")
    return 0


def _handle_day(args: argparse.Namespace, tracker: TimeTracker, user_id: str) -> int:
    stats = tracker.daily_stats(user_id, args.date)
    label = "today" if stats.is_today else stats.date
    print(f"[{label}] total {format_hours(stats.total_hours)}")
    for item in stats.entries:
        _print_entry(item)
    return 0


def _handle_week(args: argparse.Namespace, tracker: TimeTracker, user_id: str) -> int:
    stats = tracker.weekly_stats(user_id, args.start)
    print(f"Week of {stats.start_date}")
    for day in stats.daily_stats:
        marker = " (today)" if day.is_today else ""
        print(f"{day.date}{marker}: {format_hours(day.total_hours)}")
    print(f"Total: {format_hours(stats.total_hours)} of {WEEKLY_TARGET_HOURS}h")
    print(f"Remaining: {format_hours(stats.remaining_hours)}")
    print(f"Progress: {stats.progress_percentage:.1f}%")
    return 0


def _handle_recent(args: argparse.Namespace, tracker: TimeTracker, user_id: str) -> int:
    items = tracker.recent_entries(user_id, args.limit)
    if not items:
        print("No entries.")
        return 0
    for item in items:
        _print_entry(item)
    return 0


def _handle_report(args: argparse.Namespace, tracker: TimeTracker, user_id: str) -> int:
    weekly = tracker.weekly_stats(user_id, args.start)
    report = build_weekly_report(weekly, now=tracker.clock.now(), employee=user_id)
    out_dir = Path(args.out_dir)
    if args.format == "markdown":
        path = write_markdown_report(report, out_dir)
    else:
        path = write_pdf_report(report, out_dir)
    print(f"Report written: {path}")
    return 0


def _handle_export(args: argparse.Namespace, tracker: TimeTracker, user_id: str) -> int:
    csv_path = export_entries_csv(
        tracker.repository,
        user_id,
        args.start.isoformat(),
        args.end.isoformat(),
        Path(args.out_dir),
    )
    print(f"CSV exported: {csv_path}")
    return 0


def _handle_serve(args: argparse.Namespace, settings: Settings) -> int:
    try:
        import uvicorn
    except ImportError as exc:
        print(f"serve needs uvicorn installed: {exc}", file=sys.stderr)
        return 2

    from .api.app import create_app

    app = create_app(db_path=Path(args.db), journal_mode=settings.journal_mode)
    uvicorn.run(app, host=args.host, port=args.port, log_level=args.log_level.lower())
    return 0


def _clock(value: datetime | None) -> str:
    return format_time(value.astimezone() if value is not None else None)


def _print_entry(item: EntryWithDuration) -> None:
    entry = item.entry
    clock_out = _clock(entry.clock_out) if entry.clock_out else "active"
    duration = format_duration(item.duration_ms) if item.duration_ms is not None else "in progress"
    print(
        f"{entry.date} | {_clock(entry.clock_in)} - {clock_out} | {duration} | "
        f"{entry.category or '-'} | {entry.description or '-'} | id {entry.id}"
    )


if __name__ == "__main__":
    raise SystemExit(main())
