"""Domain models package."""

from auxtrack.models.aux_session import AuxSession
from auxtrack.models.enums import PRESENT_STATUSES, PRODUCTIVE_STATUSES, AuxStatus
from auxtrack.models.user import ADMIN_ROLES, User, UserRole

__all__ = [
    "ADMIN_ROLES",
    "AuxSession",
    "AuxStatus",
    "PRESENT_STATUSES",
    "PRODUCTIVE_STATUSES",
    "User",
    "UserRole",
]
