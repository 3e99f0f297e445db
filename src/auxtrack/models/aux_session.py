# File: src/auxtrack/models/aux_session.py
"""AuxSession model: one row per declared work-status period."""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, String, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from auxtrack.core.db import Base
from auxtrack.utils.datetime import now_utc

if TYPE_CHECKING:
    from auxtrack.models.user import User

OPEN_SESSION_INDEX = "uq_aux_sessions_one_open_per_user"


class AuxSession(Base):
    """AUX status session.

    Open while end_time is NULL. The partial unique index allows a single open
    row per user; closed rows are unlimited.
    """

    __tablename__ = "aux_sessions"
    __table_args__ = (
        Index(
            OPEN_SESSION_INDEX,
            "user_id",
            unique=True,
            postgresql_where=text("end_time IS NULL"),
            sqlite_where=text("end_time IS NULL"),
        ),
        Index("ix_aux_sessions_user_start", "user_id", "start_time"),
        CheckConstraint(
            "end_time IS NULL OR end_time >= start_time",
            name="ck_aux_sessions_end_after_start",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )

    user: Mapped["User"] = relationship("User", lazy="selectin")

    status: Mapped[str] = mapped_column(String(32), nullable=False, index=True)

    # Naive UTC
    start_time: Mapped[datetime] = mapped_column(nullable=False, index=True)
    end_time: Mapped[datetime | None] = mapped_column(nullable=True)

    # Whole seconds, written on close
    duration: Mapped[int | None] = mapped_column(Integer, nullable=True)

    notes: Mapped[str | None] = mapped_column(String(1000), nullable=True)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=now_utc)

    @property
    def is_open(self) -> bool:
        return self.end_time is None

    def __repr__(self) -> str:
        return (
            f"<AuxSession(id={self.id}, user_id={self.user_id}, "
            f"status={self.status}, open={self.is_open})>"
        )
