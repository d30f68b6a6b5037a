from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

from .db import default_db_path


def default_out_dir() -> Path:
    return Path(__file__).resolve().parent / "out"


@dataclass(frozen=True)
class Settings:
    db_path: Path
    journal_mode: str
    log_level: str
    out_dir: Path

    @classmethod
    def from_env(cls) -> Settings:
        db_raw = os.getenv("TIMETRACK_DB", "").strip()
        out_raw = os.getenv("TIMETRACK_OUT_DIR", "").strip()
        journal_raw = os.getenv("TIMETRACK_JOURNAL_MODE", "").strip()
        level_raw = os.getenv("TIMETRACK_LOG_LEVEL", "").strip()
        return cls(
            db_path=Path(db_raw) if db_raw else default_db_path(),
            journal_mode=journal_raw.upper() or "MEMORY",
            log_level=level_raw.upper() or "INFO",
            out_dir=Path(out_raw) if out_raw else default_out_dir(),
        )
