# File: src/auxtrack/models/aux_session_schemas.py
"""Pydantic schemas for the AUX session API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from auxtrack.core.tracker import compute_elapsed
from auxtrack.core.validators import NOTES_MAX_LENGTH, sanitize_text
from auxtrack.models.aux_session import AuxSession
from auxtrack.models.user_schemas import UserResponse


class _NotesMixin(BaseModel):
    notes: str | None = Field(None, description=f"At most {NOTES_MAX_LENGTH} characters after escaping")

    @field_validator("notes")
    @classmethod
    def validate_notes(cls, v: str | None) -> str | None:
        """Sanitize notes field."""
        return sanitize_text(v, NOTES_MAX_LENGTH, "Notes")


class AuxSessionStart(_NotesMixin):
    """Body for start and switch.

    status stays a plain string here; the tracker validates it against the
    closed set so unknown values surface as VALIDATION_ERROR.
    """

    status: str = Field(..., min_length=1, max_length=50, examples=["working_on_project"])


class AuxSessionEnd(_NotesMixin):
    """Body for ending a session or toggling the shift."""


class AuxSessionNotes(_NotesMixin):
    """Body for replacing notes on an open session."""


class AuxSessionRead(BaseModel):
    """AUX session as returned by the API."""

    id: UUID
    user_id: UUID
    status: str
    start_time: datetime
    end_time: datetime | None = None
    duration: int | None = Field(None, description="Seconds, set once closed")
    notes: str | None = None
    elapsed_seconds: int = Field(0, description="Live elapsed time at response time")

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_session(cls, session: AuxSession, now: datetime) -> "AuxSessionRead":
        return cls(
            id=session.id,
            user_id=session.user_id,
            status=session.status,
            start_time=session.start_time,
            end_time=session.end_time,
            duration=session.duration,
            notes=session.notes,
            elapsed_seconds=int(compute_elapsed(session, now).total_seconds()),
        )


class ActiveEmployeeRead(AuxSessionRead):
    """Open session joined with its owner, for the admin board."""

    user: UserResponse

    @classmethod
    def from_session(cls, session: AuxSession, now: datetime) -> "ActiveEmployeeRead":
        base = AuxSessionRead.from_session(session, now)
        return cls(**base.model_dump(), user=UserResponse.model_validate(session.user))
