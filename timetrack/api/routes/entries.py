from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from ...models import EntryWithDuration
from ...tracker import TimeTracker
from ..deps import get_tracker, get_user_id
from ..schemas import EntryDetailsRequest, TimeEntryOut

router = APIRouter(prefix="/api/v1", tags=["time-entries"])


def entry_out(item: EntryWithDuration) -> TimeEntryOut:
    return TimeEntryOut(**item.to_dict())


@router.get("/time-entries/active", response_model=TimeEntryOut | None)
def get_active_entry(
    user_id: str = Depends(get_user_id),
    tracker: TimeTracker = Depends(get_tracker),
) -> TimeEntryOut | None:
    item = tracker.active_entry(user_id)
    return entry_out(item) if item is not None else None


@router.get("/time-entries/recent", response_model=list[TimeEntryOut])
def list_recent_entries(
    limit: int = Query(default=10, ge=1, le=100),
    user_id: str = Depends(get_user_id),
    tracker: TimeTracker = Depends(get_tracker),
) -> list[TimeEntryOut]:
    return [entry_out(item) for item in tracker.recent_entries(user_id, limit)]


@router.post("/time-entries", response_model=TimeEntryOut, status_code=201)
def punch_in(
    payload: EntryDetailsRequest | None = None,
    user_id: str = Depends(get_user_id),
    tracker: TimeTracker = Depends(get_tracker),
) -> TimeEntryOut:
    details = payload or EntryDetailsRequest()
    item = tracker.punch_in(user_id, category=details.category, description=details.description)
    return entry_out(item)


@router.patch("/time-entries/{entry_id}", response_model=TimeEntryOut)
def punch_out(
    entry_id: int,
    payload: EntryDetailsRequest | None = None,
    user_id: str = Depends(get_user_id),
    tracker: TimeTracker = Depends(get_tracker),
) -> TimeEntryOut:
    details = payload or EntryDetailsRequest()
    item = tracker.punch_out(user_id, entry_id, category=details.category, description=details.description)
    return entry_out(item)


@router.put("/time-entries/{entry_id}/details", response_model=TimeEntryOut)
def update_details(
    entry_id: int,
    payload: EntryDetailsRequest,
    user_id: str = Depends(get_user_id),
    tracker: TimeTracker = Depends(get_tracker),
) -> TimeEntryOut:
    item = tracker.update_active(user_id, entry_id, category=payload.category, description=payload.description)
    return entry_out(item)
