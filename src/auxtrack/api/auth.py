"""Authentication endpoints and dependencies."""

from datetime import datetime, timedelta
from uuid import UUID

from fastapi import APIRouter, Depends
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.requests import Request

from auxtrack.core.db import get_db
from auxtrack.core.errors import ForbiddenError, UnauthorizedError
from auxtrack.core.logging import get_logger
from auxtrack.core.security import verify_password
from auxtrack.models.user import User, UserRole
from auxtrack.utils.datetime import now_utc

logger = get_logger(__name__)

router = APIRouter(tags=["auth"])


# Inactivity timeout by role (seconds). Employees keep a session for a full shift.
ROLE_TIMEOUTS = {
    UserRole.EMPLOYEE.value: 10 * 60 * 60,
    UserRole.SUB_ADMIN.value: 2 * 60 * 60,
    UserRole.ADMIN.value: 2 * 60 * 60,
}


def _session_expired(request: Request, user_role: str | None) -> bool:
    """Check and refresh the inactivity window stored in the cookie session."""
    timeout = ROLE_TIMEOUTS.get(user_role or "")
    if timeout is None:
        return False

    now = now_utc()
    last_activity_raw = request.session.get("last_activity")
    try:
        last_activity = datetime.fromisoformat(last_activity_raw) if last_activity_raw else None
    except (ValueError, TypeError):
        last_activity = None

    if last_activity and (now - last_activity) > timedelta(seconds=timeout):
        logger.info(
            "auth.session_expired",
            user_id=request.session.get("user_id"),
            role=user_role,
            timeout_seconds=timeout,
            time_elapsed_seconds=round((now - last_activity).total_seconds(), 2),
        )
        request.session.clear()
        return True

    request.session["last_activity"] = now.isoformat()
    return False


async def get_current_user(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> User:
    """Dependency to get current authenticated user from session."""
    user_id = request.session.get("user_id")
    if not user_id:
        raise UnauthorizedError("Not authenticated")

    if _session_expired(request, request.session.get("user_role")):
        raise UnauthorizedError("Session expired")

    try:
        user_uuid = UUID(user_id)
    except ValueError:
        raise UnauthorizedError("Invalid user session") from None

    stmt = select(User).where(User.id == user_uuid, User.is_active.is_(True))
    result = await db.execute(stmt)
    user = result.scalar_one_or_none()

    if not user:
        raise UnauthorizedError("User not found or inactive")

    return user


@router.post("/login")
async def login(
    request: Request,
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: AsyncSession = Depends(get_db),
):
    """Validate credentials and open a cookie session."""
    email = form_data.username.strip().lower()
    stmt = select(User).where(User.email == email)
    result = await db.execute(stmt)
    user = result.scalar_one_or_none()

    if not user or not verify_password(form_data.password, user.hashed_password):
        logger.warning("auth.login_failed", email=email)
        raise UnauthorizedError("Invalid email or password")

    if not user.is_active:
        logger.warning("auth.login_disabled_account", email=user.email, user_id=str(user.id))
        raise ForbiddenError("Account is disabled")

    request.session["user_id"] = str(user.id)
    request.session["user_role"] = user.role
    request.session["last_activity"] = now_utc().isoformat()

    logger.info("auth.login_success", user_id=str(user.id), role=user.role)
    return {
        "id": str(user.id),
        "email": user.email,
        "full_name": user.full_name,
        "role": user.role,
    }


@router.post("/logout")
async def logout(request: Request):
    """Clear the cookie session."""
    user_id = request.session.get("user_id")
    if user_id:
        logger.info("auth.logout", user_id=user_id)

    request.session.clear()
    return {"detail": "Logged out"}


@router.get("/logout")
async def logout_get(request: Request):
    """Logout GET endpoint for browser compatibility."""
    return await logout(request)
