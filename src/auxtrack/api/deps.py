"""Request-scoped service wiring."""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from auxtrack.core.db import get_db
from auxtrack.core.store import SessionStore
from auxtrack.core.tracker import AuxSessionTracker
from auxtrack.utils.datetime import Clock, now_utc


def get_clock() -> Clock:
    """Clock used by every AUX operation; tests override this dependency."""
    return now_utc


def get_tracker(
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> AuxSessionTracker:
    return AuxSessionTracker(SessionStore(db), clock=clock)
