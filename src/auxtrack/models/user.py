# File: src/auxtrack/models/user.py
"""User model for authentication and session ownership."""

import enum
import uuid
from datetime import datetime

from sqlalchemy import String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from auxtrack.core.db import Base
from auxtrack.utils.datetime import now_utc


class UserRole(str, enum.Enum):
    """User role enumeration."""

    ADMIN = "admin"
    SUB_ADMIN = "sub-admin"
    EMPLOYEE = "employee"


# Roles allowed to see organisation-wide AUX data. Plain values: the role
# column is a string and Enum members do not hash like their values.
ADMIN_ROLES = frozenset({UserRole.ADMIN.value, UserRole.SUB_ADMIN.value})


class User(Base):
    """Employee account."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
    )

    hashed_password: Mapped[str] = mapped_column(String, nullable=False)

    full_name: Mapped[str] = mapped_column(String(200), nullable=False, default="")

    department: Mapped[str | None] = mapped_column(String(100), nullable=True)

    role: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=UserRole.EMPLOYEE.value,
        index=True,
    )

    is_active: Mapped[bool] = mapped_column(
        default=True,
        nullable=False,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=now_utc)

    @property
    def is_admin(self) -> bool:
        return self.role in ADMIN_ROLES

    @property
    def display_name(self) -> str:
        """Full name, falling back to email."""
        return self.full_name.strip() or self.email

    def __repr__(self) -> str:
        return f"<User(email={self.email}, role={self.role}, is_active={self.is_active})>"
