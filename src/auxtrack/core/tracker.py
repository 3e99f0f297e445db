# File: src/auxtrack/core/tracker.py
"""AUX session lifecycle: start, end, switch, toggle, current.

Invariant: a user has at most one open session (end_time is None). Composite
operations (switch_status, toggle_shift) run inside the caller's single
database transaction after taking the per-user lock, so a double-click can
never leave a user with zero or two open sessions. Any raised error aborts
the transaction and leaves stored state untouched.
"""

from datetime import datetime, timedelta
from typing import TYPE_CHECKING
from uuid import UUID

from auxtrack.core.errors import (
    AlreadyEndedError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from auxtrack.core.logging import get_logger
from auxtrack.core.store import SessionStore
from auxtrack.models.aux_session import AuxSession
from auxtrack.models.enums import AuxStatus
from auxtrack.utils.datetime import Clock, now_utc

if TYPE_CHECKING:
    from auxtrack.core.productivity import ActiveSummary, ProductivityReport, TimeWindow

logger = get_logger(__name__)


def compute_elapsed(session, now: datetime) -> timedelta:
    """Elapsed time of a session: up to `now` while open, up to end_time once closed.

    Never negative; a `now` earlier than start_time (clock skew) gives zero.
    """
    end = session.end_time if session.end_time is not None else now
    elapsed = end - session.start_time
    return elapsed if elapsed > timedelta(0) else timedelta(0)


def _coerce_uuid(value: UUID | str, field_name: str) -> UUID:
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except (ValueError, TypeError):
        raise ValidationError(
            f"Invalid {field_name} format",
            details={field_name: str(value)},
        ) from None


class AuxSessionTracker:
    """Mediates every AUX session mutation for one request."""

    compute_elapsed = staticmethod(compute_elapsed)

    def __init__(self, store: SessionStore, clock: Clock = now_utc):
        self.store = store
        self.clock = clock

    async def start_session(
        self, user_id: UUID, status: AuxStatus | str, notes: str | None = None
    ) -> AuxSession:
        """Open a session. Refuses with ConflictError if one is already open."""
        aux_status = AuxStatus.parse(status)
        await self.store.lock_user(user_id)

        current = await self.store.find_open_by_user(user_id)
        if current is not None:
            raise ConflictError(
                "An AUX session is already open; switch status or end it first",
                details={"user_id": str(user_id), "session_id": str(current.id)},
            )

        session = await self.store.create(user_id, aux_status, self.clock(), notes)
        logger.info(
            "aux.session_started",
            session_id=str(session.id),
            user_id=str(user_id),
            status=aux_status.value,
        )
        return session

    async def end_session(
        self,
        session_id: UUID | str,
        notes: str | None = None,
        user_id: UUID | None = None,
    ) -> AuxSession:
        """Close a session, overwriting notes when given.

        user_id restricts the call to the session owner; admins pass None.
        """
        session_uuid = _coerce_uuid(session_id, "session_id")
        session = await self.store.get(session_uuid)
        if session is None:
            raise NotFoundError("AuxSession", str(session_uuid))

        if user_id is not None and session.user_id != user_id:
            logger.warning(
                "aux.end_forbidden",
                session_id=str(session_uuid),
                user_id=str(user_id),
                owner_id=str(session.user_id),
            )
            raise ForbiddenError("You can only end your own AUX sessions")

        if session.end_time is not None:
            raise AlreadyEndedError(str(session.id), session.end_time.isoformat())

        if not await self.store.close_if_open(session, self.clock(), notes):
            raise AlreadyEndedError(str(session.id))

        logger.info(
            "aux.session_ended",
            session_id=str(session.id),
            user_id=str(session.user_id),
            status=session.status,
            duration_seconds=session.duration,
        )
        return session

    async def switch_status(
        self, user_id: UUID, new_status: AuxStatus | str, notes: str | None = None
    ) -> AuxSession:
        """Atomically close the open session (if any) and open one with `new_status`."""
        aux_status = AuxStatus.parse(new_status)
        await self.store.lock_user(user_id)

        # Same instant for both sides so consecutive sessions are contiguous
        now = self.clock()
        previous = await self.store.find_open_by_user(user_id)
        if previous is not None and not await self.store.close_if_open(previous, now):
            raise ConflictError(
                "Open AUX session changed concurrently, retry",
                details={"user_id": str(user_id), "session_id": str(previous.id)},
            )

        session = await self.store.create(user_id, aux_status, now, notes)
        logger.info(
            "aux.status_switched",
            user_id=str(user_id),
            from_status=previous.status if previous is not None else None,
            to_status=aux_status.value,
            closed_session_id=str(previous.id) if previous is not None else None,
            session_id=str(session.id),
        )
        return session

    async def toggle_shift(self, user_id: UUID, notes: str | None = None) -> AuxSession:
        """End the shift if a session is open, otherwise start one as `ready`."""
        await self.store.lock_user(user_id)

        current = await self.store.find_open_by_user(user_id)
        if current is not None:
            if not await self.store.close_if_open(current, self.clock(), notes):
                raise AlreadyEndedError(str(current.id))
            logger.info(
                "aux.shift_stopped",
                session_id=str(current.id),
                user_id=str(user_id),
                duration_seconds=current.duration,
            )
            return current

        session = await self.store.create(user_id, AuxStatus.READY, self.clock(), notes)
        logger.info("aux.shift_started", session_id=str(session.id), user_id=str(user_id))
        return session

    async def close_open_session(self, user_id: UUID, notes: str | None = None) -> AuxSession | None:
        """Close the user's open session if there is one. Used when an account is deactivated."""
        await self.store.lock_user(user_id)

        current = await self.store.find_open_by_user(user_id)
        if current is None:
            return None
        if not await self.store.close_if_open(current, self.clock(), notes):
            raise AlreadyEndedError(str(current.id))

        logger.info(
            "aux.session_force_closed",
            session_id=str(current.id),
            user_id=str(user_id),
            duration_seconds=current.duration,
        )
        return current

    async def update_notes(
        self,
        session_id: UUID | str,
        notes: str | None,
        user_id: UUID | None = None,
    ) -> AuxSession:
        """Replace the notes of an open session."""
        session_uuid = _coerce_uuid(session_id, "session_id")
        session = await self.store.get(session_uuid)
        if session is None:
            raise NotFoundError("AuxSession", str(session_uuid))
        if user_id is not None and session.user_id != user_id:
            raise ForbiddenError("You can only edit your own AUX sessions")
        if session.end_time is not None:
            raise AlreadyEndedError(str(session.id), session.end_time.isoformat())

        return await self.store.update(session.id, notes=notes)

    async def get_current(self, user_id: UUID) -> AuxSession | None:
        return await self.store.find_open_by_user(user_id)

    async def list_sessions(self, user_id: UUID | None, window: "TimeWindow") -> list[AuxSession]:
        return await self.store.list_by_user_and_window(user_id, window)

    async def list_active(self) -> list[AuxSession]:
        return await self.store.list_open_with_users()

    async def productivity(self, user_id: UUID | None, window: "TimeWindow") -> "ProductivityReport":
        """Aggregate one user's (or everyone's, with user_id=None) sessions in `window`."""
        from auxtrack.core.productivity import aggregate

        sessions = await self.store.list_by_user_and_window(user_id, window)
        return aggregate(sessions, window, self.clock())

    async def active_summary(self) -> "ActiveSummary":
        from auxtrack.core.productivity import summarize_active

        return summarize_active(await self.store.list_open_with_users())
