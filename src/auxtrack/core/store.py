# File: src/auxtrack/core/store.py
"""SQLAlchemy persistence for AUX sessions.

The store is the record of truth; the tracker never keeps session state in
memory. Two primitives make the composite tracker operations safe under
concurrent requests for the same user:

- lock_user: row lock on the owning user (SELECT ... FOR UPDATE), held until
  the request transaction ends.
- close_if_open: compare-and-swap close, UPDATE ... WHERE end_time IS NULL.

The partial unique index on aux_sessions(user_id) WHERE end_time IS NULL is the
last line: a second open row fails the insert and surfaces as ConflictError.
"""

from datetime import datetime
from typing import TYPE_CHECKING, Any
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from auxtrack.core.errors import ConflictError, NotFoundError
from auxtrack.models.aux_session import AuxSession
from auxtrack.models.enums import AuxStatus
from auxtrack.models.user import User

if TYPE_CHECKING:
    from auxtrack.core.productivity import TimeWindow


class SessionStore:
    """AUX session persistence bound to one request's AsyncSession."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def lock_user(self, user_id: UUID) -> User:
        """Serialize AUX mutations for one user until the transaction ends."""
        stmt = select(User).where(User.id == user_id).with_for_update()
        result = await self.db.execute(stmt)
        user = result.scalar_one_or_none()
        if user is None:
            raise NotFoundError("User", str(user_id))
        return user

    async def create(
        self,
        user_id: UUID,
        status: AuxStatus,
        start_time: datetime,
        notes: str | None = None,
    ) -> AuxSession:
        session = AuxSession(
            user_id=user_id,
            status=status.value,
            start_time=start_time,
            notes=notes,
        )
        self.db.add(session)
        try:
            await self.db.flush()
        except IntegrityError as exc:
            raise ConflictError(
                "User already has an open AUX session",
                details={"user_id": str(user_id)},
            ) from exc
        await self.db.refresh(session)
        return session

    async def get(self, session_id: UUID) -> AuxSession | None:
        return await self.db.get(AuxSession, session_id, populate_existing=True)

    async def update(self, session_id: UUID, **patch: Any) -> AuxSession:
        session = await self.get(session_id)
        if session is None:
            raise NotFoundError("AuxSession", str(session_id))
        for key, value in patch.items():
            setattr(session, key, value)
        await self.db.flush()
        return session

    async def close_if_open(
        self,
        session: AuxSession,
        end_time: datetime,
        notes: str | None = None,
    ) -> bool:
        """Close `session` unless someone else already did. Returns False on a lost race."""
        # end_time never precedes start_time, even if the clock stepped backwards
        end_time = max(end_time, session.start_time)
        values: dict[str, Any] = {
            "end_time": end_time,
            "duration": int((end_time - session.start_time).total_seconds()),
        }
        if notes is not None:
            values["notes"] = notes

        stmt = (
            update(AuxSession)
            .where(AuxSession.id == session.id, AuxSession.end_time.is_(None))
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        if result.rowcount != 1:
            return False

        await self.db.refresh(session)
        return True

    async def find_open_by_user(self, user_id: UUID) -> AuxSession | None:
        stmt = (
            select(AuxSession)
            .where(AuxSession.user_id == user_id, AuxSession.end_time.is_(None))
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def list_by_user_and_window(
        self,
        user_id: UUID | None,
        window: "TimeWindow",
    ) -> list[AuxSession]:
        """Sessions whose start_time falls inside the window, newest first.

        user_id=None lists every user's sessions (admin reports).
        """
        stmt = select(AuxSession).where(
            AuxSession.start_time >= window.start,
            AuxSession.start_time <= window.end,
        )
        if user_id is not None:
            stmt = stmt.where(AuxSession.user_id == user_id)

        stmt = stmt.order_by(AuxSession.start_time.desc()).execution_options(
            populate_existing=True
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def list_open_with_users(self) -> list[AuxSession]:
        """Open sessions of active users, longest-running first."""
        stmt = (
            select(AuxSession)
            .join(User, AuxSession.user_id == User.id)
            .where(AuxSession.end_time.is_(None), User.is_active.is_(True))
            .options(selectinload(AuxSession.user))
            .order_by(AuxSession.start_time.asc())
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())
