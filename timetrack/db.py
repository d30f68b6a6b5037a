from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime, timezone
import logging
import os
from pathlib import Path
import sqlite3
from typing import Iterator

from .exceptions import AlreadyClosedError, ConflictError, NotFoundError
from .models import EntryId, TimeEntry, UserId
from .repository import check_open_for, ensure_single_active

logger = logging.getLogger(__name__)

_TIME_FORMAT = "%Y-%m-%dT%H:%M:%S.%f"
_COLUMNS = "id, user_id, clock_in, clock_out, active, date, category, description"


def _to_utc_text(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.astimezone()
    return value.astimezone(timezone.utc).strftime(_TIME_FORMAT)


def _from_utc_text(text: str) -> datetime:
    return datetime.strptime(text, _TIME_FORMAT).replace(tzinfo=timezone.utc)


class SQLiteEntryRepository:
    """Time entries in one SQLite file, one connection per call.

    ``user_id`` is declared without a type so integer and string keys are
    stored as given and compare exactly as the caller passed them.
    """

    def __init__(self, db_path: Path, journal_mode: str | None = None) -> None:
        self.db_path = Path(db_path)
        raw_mode = (journal_mode or os.getenv("TIMETRACK_JOURNAL_MODE") or "MEMORY").strip()
        self.journal_mode = raw_mode.upper() if raw_mode else "MEMORY"
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.init_schema()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path, isolation_level=None, timeout=10.0)
        conn.row_factory = sqlite3.Row
        self._apply_journal_mode(conn)
        conn.execute("PRAGMA synchronous=NORMAL")
        return conn

    def _apply_journal_mode(self, conn: sqlite3.Connection) -> None:
        try:
            conn.execute(f"PRAGMA journal_mode={self.journal_mode}")
        except sqlite3.OperationalError:
            conn.execute("PRAGMA journal_mode=MEMORY")

    @contextmanager
    def _read(self) -> Iterator[sqlite3.Connection]:
        conn = self._connect()
        try:
            yield conn
        finally:
            conn.close()

    @contextmanager
    def _write(self) -> Iterator[sqlite3.Connection]:
        conn = self._connect()
        try:
            conn.execute("BEGIN IMMEDIATE")
            try:
                yield conn
            except BaseException:
                conn.execute("ROLLBACK")
                raise
            conn.execute("COMMIT")
        finally:
            conn.close()

    def init_schema(self) -> None:
        with self._write() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS time_entries (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id NOT NULL,
                    clock_in TEXT NOT NULL,
                    clock_out TEXT,
                    active INTEGER NOT NULL CHECK (active IN (0, 1)),
                    date TEXT NOT NULL,
                    category TEXT,
                    description TEXT,
                    CHECK ((active = 1) = (clock_out IS NULL)),
                    CHECK (clock_out IS NULL OR clock_out >= clock_in)
                )
                """
            )
            conn.execute(
                """
                CREATE UNIQUE INDEX IF NOT EXISTS idx_time_entries_one_active
                ON time_entries(user_id) WHERE active = 1
                """
            )
            conn.execute(
                """
                CREATE INDEX IF NOT EXISTS idx_time_entries_user_date
                ON time_entries(user_id, date)
                """
            )
            conn.execute(
                """
                CREATE INDEX IF NOT EXISTS idx_time_entries_user_clock_in
                ON time_entries(user_id, clock_in)
                """
            )

    def find_active(self, user_id: UserId) -> TimeEntry | None:
        query = f"SELECT {_COLUMNS} FROM time_entries WHERE user_id = ? AND active = 1"
        return ensure_single_active(user_id, self._read_entries(query, [user_id]))

    def get(self, entry_id: EntryId) -> TimeEntry | None:
        query = f"SELECT {_COLUMNS} FROM time_entries WHERE id = ?"
        items = self._read_entries(query, [entry_id])
        return items[0] if items else None

    def find_by_date(self, user_id: UserId, date: str) -> list[TimeEntry]:
        query = (
            f"SELECT {_COLUMNS} FROM time_entries "
            "WHERE user_id = ? AND date = ? "
            "ORDER BY clock_in ASC, id ASC"
        )
        return self._read_entries(query, [user_id, date])

    def find_recent(self, user_id: UserId, limit: int) -> list[TimeEntry]:
        safe_limit = max(0, int(limit))
        query = (
            f"SELECT {_COLUMNS} FROM time_entries "
            "WHERE user_id = ? "
            "ORDER BY clock_in DESC, id DESC "
            "LIMIT ?"
        )
        return self._read_entries(query, [user_id, safe_limit])

    def find_between(self, user_id: UserId, start_date: str, end_date: str) -> list[TimeEntry]:
        query = (
            f"SELECT {_COLUMNS} FROM time_entries "
            "WHERE user_id = ? AND date >= ? AND date <= ? "
            "ORDER BY clock_in ASC, id ASC"
        )
        return self._read_entries(query, [user_id, start_date, end_date])

    def create(
        self,
        user_id: UserId,
        clock_in: datetime,
        date: str,
        category: str | None = None,
        description: str | None = None,
    ) -> TimeEntry:
        draft = TimeEntry.open(
            id=0,
            user_id=user_id,
            clock_in=clock_in,
            date=date,
            category=category,
            description=description,
        )
        with self._write() as conn:
            existing = conn.execute(
                "SELECT id FROM time_entries WHERE user_id = ? AND active = 1",
                (user_id,),
            ).fetchone()
            if existing is not None:
                raise ConflictError(f"user {user_id} already has an active time entry ({existing['id']})")
            try:
                cur = conn.execute(
                    """
                    INSERT INTO time_entries (user_id, clock_in, clock_out, active, date, category, description)
                    VALUES (?, ?, NULL, 1, ?, ?, ?)
                    """,
                    (user_id, _to_utc_text(clock_in), date, draft.category, draft.description),
                )
            except sqlite3.IntegrityError as exc:
                raise ConflictError(f"user {user_id} already has an active time entry") from exc
            entry_id = int(cur.lastrowid)
        logger.debug("created time entry %s for user %s", entry_id, user_id)
        return self._reload(entry_id)

    def close_active(
        self,
        entry_id: EntryId,
        user_id: UserId,
        clock_out: datetime,
        category: str | None = None,
        description: str | None = None,
    ) -> TimeEntry:
        with self._write() as conn:
            entry = check_open_for(self._fetch_one(conn, entry_id), entry_id, user_id)
            closed = entry.close(clock_out, category=category, description=description)
            cur = conn.execute(
                """
                UPDATE time_entries
                SET clock_out = ?, active = 0, category = ?, description = ?
                WHERE id = ? AND active = 1
                """,
                (_to_utc_text(clock_out), closed.category, closed.description, entry_id),
            )
            if cur.rowcount == 0:
                raise AlreadyClosedError(f"time entry {entry_id} is already closed")
        return self._reload(entry_id)

    def update_details(
        self,
        entry_id: EntryId,
        user_id: UserId,
        category: str | None = None,
        description: str | None = None,
    ) -> TimeEntry:
        with self._write() as conn:
            entry = check_open_for(self._fetch_one(conn, entry_id), entry_id, user_id)
            updated = entry.with_details(category=category, description=description)
            conn.execute(
                "UPDATE time_entries SET category = ?, description = ? WHERE id = ? AND active = 1",
                (updated.category, updated.description, entry_id),
            )
        return self._reload(entry_id)

    def _reload(self, entry_id: EntryId) -> TimeEntry:
        entry = self.get(entry_id)
        if entry is None:
            raise NotFoundError(f"time entry {entry_id} not found")
        return entry

    def _fetch_one(self, conn: sqlite3.Connection, entry_id: EntryId) -> TimeEntry | None:
        row = conn.execute(f"SELECT {_COLUMNS} FROM time_entries WHERE id = ?", (entry_id,)).fetchone()
        return _row_to_entry(row) if row is not None else None

    def _read_entries(self, query: str, params: list[object]) -> list[TimeEntry]:
        with self._read() as conn:
            rows = conn.execute(query, params).fetchall()
        return [_row_to_entry(row) for row in rows]


def _row_to_entry(row: sqlite3.Row) -> TimeEntry:
    clock_out = row["clock_out"]
    return TimeEntry(
        id=int(row["id"]),
        user_id=row["user_id"],
        clock_in=_from_utc_text(row["clock_in"]),
        clock_out=_from_utc_text(clock_out) if clock_out is not None else None,
        active=bool(row["active"]),
        date=row["date"],
        category=row["category"],
        description=row["description"],
    )


def default_db_path() -> Path:
    return Path(__file__).resolve().parent / "data" / "timetrack.sqlite"
