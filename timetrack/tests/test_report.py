from __future__ import annotations

import csv
import unittest

from timetrack.clock import FakeClock
from timetrack.exceptions import ValidationError
from timetrack.exporting import export_entries_csv
from timetrack.pdf import render_pdf, write_pdf_report
from timetrack.reporting import (
    build_weekly_report,
    format_duration,
    format_hours,
    format_time,
    render_markdown,
    report_filename,
    write_markdown_report,
)
from timetrack.repository import InMemoryEntryRepository
from timetrack.tests.test_helpers import at, local_tmp_dir
from timetrack.tracker import TimeTracker


class ReportTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.repo = InMemoryEntryRepository()
        self.clock = FakeClock(at("2026-02-09", "09:00"))
        self.tracker = TimeTracker(self.repo, clock=self.clock)

        self.work("2026-02-09", "09:00", "17:30", category="dev", description="billing | api")
        self.work("2026-02-10", "09:00", "13:00")
        self.clock.set(at("2026-02-12", "09:00"))
        self.tracker.punch_in("alice", category="support")
        self.clock.set(at("2026-02-12", "10:00"))

    def work(self, day: str, start: str, end: str, category: str | None = None, description: str | None = None) -> None:
        self.clock.set(at(day, start))
        item = self.tracker.punch_in("alice", category=category, description=description)
        self.clock.set(at(day, end))
        self.tracker.punch_out("alice", item.entry.id)

    def report(self, start_date: str | None = None):
        weekly = self.tracker.weekly_stats("alice", start_date)
        return build_weekly_report(weekly, now=self.clock.now(), employee="alice")


class TestFormatting(unittest.TestCase):
    def test_format_duration(self) -> None:
        self.assertEqual(format_duration(None), "0h 0m")
        self.assertEqual(format_duration(15_300_000), "4h 15m")
        self.assertEqual(format_duration(59_999), "0h 0m")
        self.assertEqual(format_duration(-5), "0h 0m")

    def test_format_hours(self) -> None:
        self.assertEqual(format_hours(8.5), "8h 30m")
        self.assertEqual(format_hours(0), "0h 0m")

    def test_format_time(self) -> None:
        self.assertEqual(format_time(None), "-")
        self.assertEqual(format_time(at("2026-02-09", "09:05")), "9:05 AM")
        self.assertEqual(format_time(at("2026-02-09", "17:30")), "5:30 PM")


class TestWeeklyReport(ReportTestCase):
    def test_current_week_summary(self) -> None:
        report = self.report()
        self.assertEqual(report.title, "Time Report: Current Week")
        self.assertEqual(report.start_date, "2026-02-09")
        self.assertEqual(report.end_date, "2026-02-15")
        self.assertEqual(report.date_range, "Feb 09 - Feb 15, 2026")
        self.assertAlmostEqual(report.total_hours, 12.5)
        self.assertAlmostEqual(report.remaining_hours, 27.5)
        self.assertEqual(len(report.days), 7)
        self.assertEqual(len(report.details), 3)

    def test_day_statuses(self) -> None:
        report = self.report()
        statuses = [day.status for day in report.days]
        self.assertEqual(
            statuses,
            ["complete", "short", "upcoming", "in-progress", "upcoming", "upcoming", "upcoming"],
        )
        monday, tuesday = report.days[0], report.days[1]
        self.assertEqual(monday.weekday, "Monday")
        self.assertEqual(monday.first_in, at("2026-02-09", "09:00"))
        self.assertEqual(monday.last_out, at("2026-02-09", "17:30"))
        self.assertEqual(tuesday.entry_count, 1)
        self.assertIsNone(report.days[3].last_out)

    def test_titles(self) -> None:
        self.assertEqual(self.report("2026-02-04").title, "Time Report: Previous Week")
        self.assertEqual(self.report("2026-01-13").title, "Time Report: Week of 2026-01-12")

    def test_markdown(self) -> None:
        text = render_markdown(self.report())
        self.assertIn("# Time Report: Current Week", text)
        self.assertIn("- Employee: alice", text)
        self.assertIn("- Total hours: 12h 30m", text)
        self.assertIn("- Progress: 31.2%", text)
        self.assertIn("| Monday 2026-02-09 | 8h 30m | 9:00 AM | 5:30 PM | 1 | complete |", text)
        self.assertIn("| 2026-02-12 | 9:00 AM | Active | In progress | support | - |", text)
        self.assertIn("billing \\| api", text)

    def test_markdown_empty_week(self) -> None:
        text = render_markdown(self.report("2026-03-02"))
        self.assertIn("No time entries this week.", text)

    def test_write_reports(self) -> None:
        report = self.report()
        self.assertEqual(report_filename(report, "pdf"), "alice_time_report_2026-02-09.pdf")
        with local_tmp_dir() as tmp:
            md_path = write_markdown_report(report, tmp / "reports")
            pdf_path = write_pdf_report(report, tmp / "reports")
            self.assertTrue(md_path.read_text(encoding="utf-8").startswith("# Time Report"))
            self.assertTrue(pdf_path.read_bytes().startswith(b"%PDF"))

    def test_pdf_renders_empty_week(self) -> None:
        data = render_pdf(self.report("2026-03-02"))
        self.assertTrue(data.startswith(b"%PDF"))


class TestCsvExport(ReportTestCase):
    def test_export_range(self) -> None:
        with local_tmp_dir() as tmp:
            path = export_entries_csv(self.repo, "alice", "2026-02-09", "2026-02-10", tmp)
            self.assertEqual(path.name, "time_entries_2026-02-09_2026-02-10.csv")
            with path.open(encoding="utf-8", newline="") as fp:
                rows = list(csv.DictReader(fp))
        self.assertEqual(len(rows), 2)
        self.assertEqual(rows[0]["date"], "2026-02-09")
        self.assertEqual(rows[0]["duration_ms"], "30600000")
        self.assertEqual(rows[0]["active"], "0")
        self.assertEqual(rows[0]["description"], "billing | api")

    def test_open_entry_has_blank_duration(self) -> None:
        with local_tmp_dir() as tmp:
            path = export_entries_csv(self.repo, "alice", "2026-02-12", "2026-02-12", tmp)
            with path.open(encoding="utf-8", newline="") as fp:
                rows = list(csv.DictReader(fp))
        self.assertEqual(rows[0]["active"], "1")
        self.assertEqual(rows[0]["clock_out"], "")
        self.assertEqual(rows[0]["duration_ms"], "")

    def test_rejects_reversed_range(self) -> None:
        with local_tmp_dir() as tmp:
            with self.assertRaises(ValidationError):
                export_entries_csv(self.repo, "alice", "2026-02-10", "2026-02-09", tmp)


if __name__ == "__main__":
    unittest.main()
