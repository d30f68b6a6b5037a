from __future__ import annotations

import platform

from fastapi import APIRouter, Request

from ... import __version__
from ...stats import WEEKLY_TARGET_HOURS
from ..schemas import MetaOut

router = APIRouter(prefix="/api/v1", tags=["system"])


@router.get("/meta", response_model=MetaOut)
def meta(request: Request) -> MetaOut:
    db_path = getattr(request.app.state, "db_path", None)
    return MetaOut(
        app="TimeTrack",
        version=__version__,
        db_path=str(db_path) if db_path else None,
        weekly_target_hours=WEEKLY_TARGET_HOURS,
        platform=platform.platform(),
    )
