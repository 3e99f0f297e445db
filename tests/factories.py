"""Factory classes for creating test objects."""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from auxtrack.core.security import hash_password
from auxtrack.models.aux_session import AuxSession
from auxtrack.models.user import User

DEFAULT_PASSWORD = "testpass123"


class UserFactory:
    """Factory for creating User objects."""

    @staticmethod
    async def create(
        session: AsyncSession,
        email: Optional[str] = None,
        hashed_password: Optional[str] = None,
        full_name: str = "Test User",
        department: Optional[str] = None,
        role: str = "employee",
        is_active: bool = True,
        **kwargs,
    ) -> User:
        """Create a test user."""
        if email is None:
            email = f"user_{uuid.uuid4().hex[:8]}@example.com"
        if hashed_password is None:
            hashed_password = hash_password(DEFAULT_PASSWORD)

        user = User(
            id=kwargs.get("id", uuid.uuid4()),
            email=email,
            hashed_password=hashed_password,
            full_name=full_name,
            department=department,
            role=role,
            is_active=is_active,
        )

        session.add(user)
        await session.commit()
        await session.refresh(user)

        return user


class AuxSessionFactory:
    """Factory for creating AuxSession rows directly, bypassing the tracker."""

    @staticmethod
    async def create(
        session: AsyncSession,
        user_id: uuid.UUID,
        start_time: datetime,
        status: str = "ready",
        end_time: Optional[datetime] = None,
        notes: Optional[str] = None,
        **kwargs,
    ) -> AuxSession:
        """Create a test AUX session; closed when end_time is given."""
        duration = None
        if end_time is not None:
            duration = int((end_time - start_time).total_seconds())

        aux_session = AuxSession(
            id=kwargs.get("id", uuid.uuid4()),
            user_id=user_id,
            status=status,
            start_time=start_time,
            end_time=end_time,
            duration=duration,
            notes=notes,
        )

        session.add(aux_session)
        await session.commit()
        await session.refresh(aux_session)

        return aux_session
