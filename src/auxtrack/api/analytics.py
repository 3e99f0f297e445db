"""Productivity analytics for the signed-in user."""

from datetime import datetime

from fastapi import APIRouter, Depends, Query

from auxtrack.api.auth import get_current_user
from auxtrack.api.deps import get_tracker
from auxtrack.core.productivity import TimeWindow
from auxtrack.core.tracker import AuxSessionTracker
from auxtrack.models.productivity_schemas import ProductivityRead
from auxtrack.models.user import User

router = APIRouter(prefix="/api/analytics", tags=["analytics"])


@router.get("/productivity", response_model=ProductivityRead)
async def my_productivity(
    start: datetime | None = Query(None, description="Window start (default: 7 days before end)"),
    end: datetime | None = Query(None, description="Window end (default: now)"),
    current_user: User = Depends(get_current_user),
    tracker: AuxSessionTracker = Depends(get_tracker),
):
    """Hours and share of time per AUX status, plus productivity percentage."""
    window = TimeWindow.resolve(start, end, tracker.clock())
    report = await tracker.productivity(current_user.id, window)
    return ProductivityRead.from_report(report, current_user.id)
