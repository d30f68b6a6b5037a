from __future__ import annotations

import logging
import sys
from typing import TextIO

LOGGER_NAME = "timetrack"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | int = "INFO", stream: TextIO | None = None) -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logger.setLevel(level)

    # Replace our own handler on repeated calls instead of stacking them.
    for handler in list(logger.handlers):
        if getattr(handler, "_timetrack", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._timetrack = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    return logger
