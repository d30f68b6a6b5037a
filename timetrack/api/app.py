from __future__ import annotations

import logging
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .. import __version__
from ..clock import Clock, RealClock
from ..config import Settings
from ..db import SQLiteEntryRepository
from ..exceptions import DataIntegrityError, TimeTrackError
from ..repository import EntryRepository
from .routes.entries import router as entries_router
from .routes.health import router as health_router
from .routes.meta import router as meta_router
from .routes.reports import router as reports_router
from .routes.stats import router as stats_router

logger = logging.getLogger(__name__)


def create_app(
    db_path: Path | None = None,
    repository: EntryRepository | None = None,
    clock: Clock | None = None,
    journal_mode: str | None = None,
) -> FastAPI:
    if repository is None:
        resolved_db = Path(db_path or Settings.from_env().db_path)
        repository = SQLiteEntryRepository(resolved_db, journal_mode=journal_mode)
    else:
        resolved_db = Path(db_path) if db_path else None

    app = FastAPI(title="TimeTrack API", version=__version__)
    app.state.db_path = str(resolved_db) if resolved_db else None
    app.state.repository = repository
    app.state.clock = clock or RealClock()

    app.add_exception_handler(TimeTrackError, _handle_tracking_error)

    app.include_router(health_router)
    app.include_router(meta_router)
    app.include_router(entries_router)
    app.include_router(stats_router)
    app.include_router(reports_router)

    return app


def create_default_app() -> FastAPI:
    settings = Settings.from_env()
    return create_app(db_path=settings.db_path, journal_mode=settings.journal_mode)


async def _handle_tracking_error(request: Request, exc: TimeTrackError) -> JSONResponse:
    if isinstance(exc, DataIntegrityError):
        logger.error("data integrity violation on %s %s: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})
