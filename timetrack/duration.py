from __future__ import annotations

from datetime import datetime, timedelta
import logging

from .exceptions import DataIntegrityError

logger = logging.getLogger(__name__)

MS_PER_HOUR = 3_600_000

_ONE_MS = timedelta(milliseconds=1)


def duration_ms(clock_in: datetime, clock_out: datetime | None) -> int | None:
    """Elapsed milliseconds of a closed session, ``None`` while it is open.

    Never substitutes "now" for a missing clock-out; callers that want a
    running figure for display use :func:`elapsed_ms`.
    """
    if clock_out is None:
        return None
    value = (clock_out - clock_in) // _ONE_MS
    if value < 0:
        logger.error("negative duration: clock_in=%s clock_out=%s", clock_in.isoformat(), clock_out.isoformat())
        raise DataIntegrityError(
            f"clock_out {clock_out.isoformat()} is before clock_in {clock_in.isoformat()}"
        )
    return int(value)


def elapsed_ms(clock_in: datetime, now: datetime) -> int:
    """Running time of an open session, for presentation only."""
    return max(0, int((now - clock_in) // _ONE_MS))


def ms_to_hours(value: int) -> float:
    return value / MS_PER_HOUR
