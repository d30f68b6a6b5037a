from __future__ import annotations

from contextlib import redirect_stderr, redirect_stdout
import io
from pathlib import Path
import unittest

from timetrack import cli
from timetrack.tests.test_helpers import insert_second_active_row, local_tmp_dir


def run(*args: str) -> tuple[int, str, str]:
    out, err = io.StringIO(), io.StringIO()
    with redirect_stdout(out), redirect_stderr(err):
        code = cli.main(list(args))
    return code, out.getvalue(), err.getvalue()


class TestCLI(unittest.TestCase):
    def test_user_is_required(self) -> None:
        with local_tmp_dir() as tmp:
            db_path = Path(tmp) / "timetrack.sqlite"
            with redirect_stderr(io.StringIO()):
                with self.assertRaises(SystemExit) as exc:
                    cli.main(["--db", str(db_path), "status"])
            self.assertEqual(exc.exception.code, 2)

    def test_rejects_bad_date(self) -> None:
        with local_tmp_dir() as tmp:
            db_path = Path(tmp) / "timetrack.sqlite"
            with redirect_stderr(io.StringIO()):
                with self.assertRaises(SystemExit) as exc:
                    cli.main(["--db", str(db_path), "--user", "u1", "day", "--date", "02/09/2026"])
            self.assertEqual(exc.exception.code, 2)

    def test_punch_in_status_and_out(self) -> None:
        with local_tmp_dir() as tmp:
            db = ["--db", str(Path(tmp) / "timetrack.sqlite"), "--user", "u1", "--log-level", "WARNING"]

            code, out, _ = run(*db, "status")
            self.assertEqual(code, 0)
            self.assertIn("Not punched in.", out)

            code, out, _ = run(*db, "in", "--category", "dev")
            self.assertEqual(code, 0)
            self.assertIn("Punched in at", out)

            code, _, err = run(*db, "in")
            self.assertEqual(code, 1)
            self.assertIn("error: You are already punched in", err)

            code, out, _ = run(*db, "note", "--description", "cli work")
            self.assertEqual(code, 0)
            self.assertIn("dev | cli work", out)

            code, out, _ = run(*db, "status")
            self.assertIn("Punched in since", out)

            code, out, _ = run(*db, "out")
            self.assertEqual(code, 0)
            self.assertIn("Punched out at", out)

            code, _, err = run(*db, "out")
            self.assertEqual(code, 1)
            self.assertIn("You are not punched in.", err)

            code, out, _ = run(*db, "recent", "--limit", "5")
            self.assertEqual(code, 0)
            self.assertIn("dev | cli work", out)

    def test_stats_reports_and_export(self) -> None:
        with local_tmp_dir() as tmp:
            db = ["--db", str(Path(tmp) / "timetrack.sqlite"), "--user", "u1", "--log-level", "WARNING"]

            code, out, _ = run(*db, "week", "--start", "2026-02-11")
            self.assertEqual(code, 0)
            self.assertIn("Week of 2026-02-09", out)
            self.assertIn("Total: 0h 0m of 40h", out)
            self.assertIn("Progress: 0.0%", out)

            code, out, _ = run(*db, "today")
            self.assertEqual(code, 0)
            self.assertIn("[today] total 0h 0m", out)

            reports = Path(tmp) / "reports"
            code, out, _ = run(*db, "report", "--start", "2026-02-09", "--format", "markdown", "--out-dir", str(reports))
            self.assertEqual(code, 0)
            self.assertTrue((reports / "u1_time_report_2026-02-09.md").exists())

            code, out, _ = run(*db, "report", "--start", "2026-02-09", "--out-dir", str(reports))
            self.assertEqual(code, 0)
            self.assertTrue((reports / "u1_time_report_2026-02-09.pdf").read_bytes().startswith(b"%PDF"))

            code, out, _ = run(
                *db, "export", "--start", "2026-02-09", "--end", "2026-02-15", "--out-dir", str(reports)
            )
            self.assertEqual(code, 0)
            self.assertTrue((reports / "time_entries_2026-02-09_2026-02-15.csv").exists())

            code, _, err = run(
                *db, "export", "--start", "2026-02-15", "--end", "2026-02-09", "--out-dir", str(reports)
            )
            self.assertEqual(code, 1)
            self.assertIn("error:", err)


    def test_integrity_violation_exits_2(self) -> None:
        with local_tmp_dir() as tmp:
            db_path = Path(tmp) / "timetrack.sqlite"
            db = ["--db", str(db_path), "--user", "u1", "--log-level", "WARNING"]
            code, _, _ = run(*db, "in")
            self.assertEqual(code, 0)
            insert_second_active_row(db_path, "u1")

            code, _, err = run(*db, "status")
            self.assertEqual(code, 2)
            self.assertIn("error: user u1 has 2 active entries", err)


if __name__ == "__main__":
    unittest.main()
