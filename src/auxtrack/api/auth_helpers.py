# File: src/auxtrack/api/auth_helpers.py
"""Role-based authorization helpers."""

from fastapi import Depends

from auxtrack.api.auth import get_current_user
from auxtrack.core.errors import ForbiddenError
from auxtrack.core.logging import get_logger
from auxtrack.models.user import ADMIN_ROLES, User, UserRole

logger = get_logger(__name__)


def _deny(user: User, required: str) -> ForbiddenError:
    logger.warning(
        "auth.permission_denied",
        user_id=str(user.id),
        required_role=required,
        user_role=user.role,
    )
    return ForbiddenError("You don't have permission to access this resource")


async def require_admin(current_user: User = Depends(get_current_user)) -> User:
    """Admin or sub-admin: organisation-wide read access."""
    if current_user.role not in ADMIN_ROLES:
        raise _deny(current_user, "admin|sub-admin")
    return current_user


async def require_superadmin(current_user: User = Depends(get_current_user)) -> User:
    """Full admin only: account management."""
    if current_user.role != UserRole.ADMIN.value:
        raise _deny(current_user, "admin")
    return current_user
