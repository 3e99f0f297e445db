# File: src/auxtrack/api/admin.py
"""Admin endpoints: live employee board, org-wide productivity, accounts."""

from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from auxtrack.api.auth_helpers import require_admin, require_superadmin
from auxtrack.api.deps import get_tracker
from auxtrack.core.db import get_db
from auxtrack.core.errors import ConflictError, NotFoundError
from auxtrack.core.logging import get_logger
from auxtrack.core.productivity import TimeWindow
from auxtrack.core.security import hash_password
from auxtrack.core.tracker import AuxSessionTracker
from auxtrack.models.aux_session_schemas import ActiveEmployeeRead
from auxtrack.models.productivity_schemas import ActiveSummaryRead, ProductivityRead
from auxtrack.models.user import User
from auxtrack.models.user_schemas import UserCreate, UserResponse, UserUpdate

router = APIRouter(prefix="/api/admin", tags=["admin"])
logger = get_logger(__name__)


@router.get("/employees", response_model=list[ActiveEmployeeRead])
async def list_active_employees(
    admin_user: User = Depends(require_admin),
    tracker: AuxSessionTracker = Depends(get_tracker),
):
    """Every open AUX session with its owner, longest-running first."""
    now = tracker.clock()
    sessions = await tracker.list_active()
    return [ActiveEmployeeRead.from_session(s, now) for s in sessions]


@router.get("/stats", response_model=ActiveSummaryRead)
async def active_stats(
    admin_user: User = Depends(require_admin),
    tracker: AuxSessionTracker = Depends(get_tracker),
):
    """Head-count of open sessions per status and how many employees are present."""
    return ActiveSummaryRead.from_summary(await tracker.active_summary())


@router.get("/productivity", response_model=ProductivityRead)
async def org_productivity(
    user_id: UUID | None = Query(None, description="Limit to one user; omit for everyone"),
    start: datetime | None = Query(None),
    end: datetime | None = Query(None),
    admin_user: User = Depends(require_admin),
    tracker: AuxSessionTracker = Depends(get_tracker),
    db: AsyncSession = Depends(get_db),
):
    """Productivity for one user or aggregated across all users."""
    if user_id is not None and await db.get(User, user_id) is None:
        raise NotFoundError("User", str(user_id))

    window = TimeWindow.resolve(start, end, tracker.clock())
    report = await tracker.productivity(user_id, window)
    return ProductivityRead.from_report(report, user_id)


@router.post("/employees", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_employee(
    payload: UserCreate,
    admin_user: User = Depends(require_superadmin),
    db: AsyncSession = Depends(get_db),
):
    """Create an account. Admin only."""
    existing = await db.execute(select(User).where(User.email == payload.email))
    if existing.scalar_one_or_none():
        raise ConflictError("Email already registered", details={"email": payload.email})

    user = User(
        email=payload.email,
        hashed_password=hash_password(payload.password),
        full_name=payload.full_name,
        department=payload.department,
        role=payload.role.value,
        is_active=True,
    )
    db.add(user)
    await db.flush()
    await db.refresh(user)

    logger.info(
        "admin.user_created",
        user_id=str(user.id),
        role=user.role,
        created_by=str(admin_user.id),
    )
    return user


@router.put("/employees/{user_id}", response_model=UserResponse)
async def update_employee(
    user_id: UUID,
    payload: UserUpdate,
    admin_user: User = Depends(require_admin),
    tracker: AuxSessionTracker = Depends(get_tracker),
    db: AsyncSession = Depends(get_db),
):
    """Update profile fields or (de)activate an account.

    Deactivating closes the user's open AUX session at the request time.
    """
    user = await db.get(User, user_id)
    if user is None:
        raise NotFoundError("User", str(user_id))

    changes = payload.model_dump(exclude_unset=True)
    deactivating = changes.get("is_active") is False and user.is_active
    if deactivating and user.id == admin_user.id:
        raise ConflictError("You cannot deactivate your own account", details={"user_id": str(user_id)})

    closed = None
    if deactivating:
        closed = await tracker.close_open_session(user.id)

    for key, value in changes.items():
        setattr(user, key, value)
    await db.flush()
    await db.refresh(user)

    logger.info(
        "admin.user_updated",
        user_id=str(user.id),
        fields=sorted(changes),
        closed_session_id=str(closed.id) if closed is not None else None,
        updated_by=str(admin_user.id),
    )
    return user
