from __future__ import annotations

from fastapi import Header, HTTPException, Request

from ..tracker import TimeTracker


def get_tracker(request: Request) -> TimeTracker:
    return TimeTracker(request.app.state.repository, clock=request.app.state.clock)


def get_user_id(x_user_id: str | None = Header(default=None)) -> str:
    user_id = (x_user_id or "").strip()
    if not user_id:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user_id
