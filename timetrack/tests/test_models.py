from __future__ import annotations

import json
import unittest

from timetrack.exceptions import DataIntegrityError
from timetrack.models import EntryWithDuration, TimeEntry
from timetrack.tests.test_helpers import at


class TestTimeEntry(unittest.TestCase):
    def test_open_entry(self) -> None:
        entry = TimeEntry.open(id=1, user_id="u1", clock_in=at("2026-02-09", "09:00"), date="2026-02-09")
        self.assertTrue(entry.active)
        self.assertIsNone(entry.clock_out)

    def test_active_must_match_clock_out(self) -> None:
        with self.assertRaises(DataIntegrityError):
            TimeEntry(
                id=1,
                user_id="u1",
                clock_in=at("2026-02-09", "09:00"),
                clock_out=at("2026-02-09", "10:00"),
                active=True,
                date="2026-02-09",
            )
        with self.assertRaises(DataIntegrityError):
            TimeEntry(
                id=1,
                user_id="u1",
                clock_in=at("2026-02-09", "09:00"),
                clock_out=None,
                active=False,
                date="2026-02-09",
            )

    def test_clock_out_before_clock_in_rejected(self) -> None:
        with self.assertRaises(DataIntegrityError):
            TimeEntry(
                id=1,
                user_id="u1",
                clock_in=at("2026-02-09", "09:00"),
                clock_out=at("2026-02-09", "08:00"),
                active=False,
                date="2026-02-09",
            )

    def test_bad_date_rejected(self) -> None:
        with self.assertRaises(DataIntegrityError):
            TimeEntry.open(id=1, user_id="u1", clock_in=at("2026-02-09", "09:00"), date="2026-2-9")

    def test_close_keeps_details_unless_given(self) -> None:
        entry = TimeEntry.open(
            id=1,
            user_id=7,
            clock_in=at("2026-02-09", "09:00"),
            date="2026-02-09",
            category="dev",
            description="  ",
        )
        self.assertIsNone(entry.description)

        closed = entry.close(at("2026-02-09", "12:00"), description="code review")
        self.assertFalse(closed.active)
        self.assertEqual(closed.category, "dev")
        self.assertEqual(closed.description, "code review")
        self.assertEqual(closed.date, "2026-02-09")

    def test_to_dict_is_json_ready(self) -> None:
        entry = TimeEntry.open(id=3, user_id="u1", clock_in=at("2026-02-09", "09:00"), date="2026-02-09")
        item = EntryWithDuration.of(entry.close(at("2026-02-09", "09:30")))
        payload = json.loads(json.dumps(item.to_dict()))
        self.assertEqual(payload["duration_ms"], 1_800_000)
        self.assertEqual(payload["clock_in"], "2026-02-09T09:00:00-05:00")
        self.assertFalse(payload["active"])


if __name__ == "__main__":
    unittest.main()
