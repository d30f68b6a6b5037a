from __future__ import annotations

import csv
from pathlib import Path

from .clock import parse_date
from .exceptions import ValidationError
from .models import EntryWithDuration, UserId
from .repository import EntryRepository


def export_entries_csv(
    repository: EntryRepository,
    user_id: UserId,
    start_date: str,
    end_date: str,
    out_dir: Path,
) -> Path:
    start = parse_date(start_date).isoformat()
    end = parse_date(end_date).isoformat()
    if end < start:
        raise ValidationError(f"end date {end} is before start date {start}")

    out_path = Path(out_dir)
    out_path.mkdir(parents=True, exist_ok=True)
    csv_path = out_path / f"time_entries_{start}_{end}.csv"

    entries = [EntryWithDuration.of(entry) for entry in repository.find_between(user_id, start, end)]

    with csv_path.open("w", encoding="utf-8", newline="") as fp:
        writer = csv.writer(fp)
        writer.writerow(
            [
                "id",
                "date",
                "clock_in",
                "clock_out",
                "active",
                "duration_ms",
                "category",
                "description",
            ]
        )
        for item in entries:
            entry = item.entry
            writer.writerow(
                [
                    entry.id,
                    entry.date,
                    entry.clock_in.isoformat(),
                    entry.clock_out.isoformat() if entry.clock_out else "",
                    1 if entry.active else 0,
                    "" if item.duration_ms is None else item.duration_ms,
                    entry.category or "",
                    entry.description or "",
                ]
            )

    return csv_path
