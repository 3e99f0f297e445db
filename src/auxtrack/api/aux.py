"""AUX session endpoints (start, end, switch, toggle, current, history)."""

from datetime import datetime

from fastapi import APIRouter, Depends, Query, status

from auxtrack.api.auth import get_current_user
from auxtrack.api.deps import get_tracker
from auxtrack.core.productivity import TimeWindow
from auxtrack.core.tracker import AuxSessionTracker
from auxtrack.models.aux_session_schemas import (
    AuxSessionEnd,
    AuxSessionNotes,
    AuxSessionRead,
    AuxSessionStart,
)
from auxtrack.models.user import User

router = APIRouter(prefix="/api/aux", tags=["aux"])

HISTORY_DEFAULT_DAYS = 30


@router.post("/start", response_model=AuxSessionRead, status_code=status.HTTP_201_CREATED)
async def start_session(
    payload: AuxSessionStart,
    current_user: User = Depends(get_current_user),
    tracker: AuxSessionTracker = Depends(get_tracker),
):
    """Open a session. 409 if one is already open; use /switch to change status."""
    session = await tracker.start_session(current_user.id, payload.status, payload.notes)
    return AuxSessionRead.from_session(session, tracker.clock())


@router.post("/end/{session_id}", response_model=AuxSessionRead)
async def end_session(
    session_id: str,
    payload: AuxSessionEnd | None = None,
    current_user: User = Depends(get_current_user),
    tracker: AuxSessionTracker = Depends(get_tracker),
):
    """Close a session.

    Employees: own sessions only
    Admin/sub-admin: any session
    """
    notes = payload.notes if payload else None
    owner_filter = None if current_user.is_admin else current_user.id
    session = await tracker.end_session(session_id, notes=notes, user_id=owner_filter)
    return AuxSessionRead.from_session(session, tracker.clock())


@router.post("/switch", response_model=AuxSessionRead, status_code=status.HTTP_201_CREATED)
async def switch_status(
    payload: AuxSessionStart,
    current_user: User = Depends(get_current_user),
    tracker: AuxSessionTracker = Depends(get_tracker),
):
    """Close the current session (if any) and open one with the new status, atomically."""
    session = await tracker.switch_status(current_user.id, payload.status, payload.notes)
    return AuxSessionRead.from_session(session, tracker.clock())


@router.post("/toggle", response_model=AuxSessionRead)
async def toggle_shift(
    payload: AuxSessionEnd | None = None,
    current_user: User = Depends(get_current_user),
    tracker: AuxSessionTracker = Depends(get_tracker),
):
    """Stop the shift if a session is open, otherwise start one as `ready`."""
    notes = payload.notes if payload else None
    session = await tracker.toggle_shift(current_user.id, notes)
    return AuxSessionRead.from_session(session, tracker.clock())


@router.get("/current", response_model=AuxSessionRead | None)
async def get_current_session(
    current_user: User = Depends(get_current_user),
    tracker: AuxSessionTracker = Depends(get_tracker),
):
    """Open session of the caller, or null."""
    session = await tracker.get_current(current_user.id)
    if session is None:
        return None
    return AuxSessionRead.from_session(session, tracker.clock())


@router.patch("/{session_id}/notes", response_model=AuxSessionRead)
async def update_session_notes(
    session_id: str,
    payload: AuxSessionNotes,
    current_user: User = Depends(get_current_user),
    tracker: AuxSessionTracker = Depends(get_tracker),
):
    """Replace notes while the session is still open."""
    owner_filter = None if current_user.is_admin else current_user.id
    session = await tracker.update_notes(session_id, payload.notes, user_id=owner_filter)
    return AuxSessionRead.from_session(session, tracker.clock())


@router.get("/sessions", response_model=list[AuxSessionRead])
async def list_sessions(
    start: datetime | None = Query(None, description="Window start (default: 30 days before end)"),
    end: datetime | None = Query(None, description="Window end (default: now)"),
    current_user: User = Depends(get_current_user),
    tracker: AuxSessionTracker = Depends(get_tracker),
):
    """Caller's session history, newest first."""
    now = tracker.clock()
    window = TimeWindow.resolve(start, end, now, default_days=HISTORY_DEFAULT_DAYS)
    sessions = await tracker.list_sessions(current_user.id, window)
    return [AuxSessionRead.from_session(s, now) for s in sessions]
