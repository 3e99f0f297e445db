# File: src/auxtrack/scripts/createuser.py
"""Interactive command for creating AuxTrack accounts."""

import asyncio
import sys
from getpass import getpass

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from auxtrack.core.errors import ConflictError
from auxtrack.core.logging import get_logger
from auxtrack.core.security import check_password_policy, hash_password
from auxtrack.core.validators import (
    DEPARTMENT_MAX_LENGTH,
    sanitize_text,
    validate_email,
    validate_full_name,
)
from auxtrack.models.user import User, UserRole

logger = get_logger(__name__)


async def create_user_account(
    db: AsyncSession,
    email: str,
    password: str,
    full_name: str,
    role: UserRole = UserRole.EMPLOYEE,
    department: str | None = None,
) -> User:
    """Validate input and insert a user. Raises ValueError or ConflictError."""
    email = validate_email(email)
    full_name = validate_full_name(full_name)
    check_password_policy(password)
    department = sanitize_text(department, DEPARTMENT_MAX_LENGTH, "Department")

    result = await db.execute(select(User).where(User.email == email))
    if result.scalar_one_or_none():
        raise ConflictError("Email already registered", details={"email": email})

    user = User(
        email=email,
        hashed_password=hash_password(password),
        full_name=full_name,
        department=department,
        role=UserRole(role).value,
        is_active=True,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)

    logger.info("createuser.created", user_id=str(user.id), role=user.role)
    return user


def _prompt(label: str, validate) -> str:
    while True:
        value = input(f"{label}: ").strip()
        try:
            return validate(value)
        except ValueError as e:
            print(f"❌ {e}")


def _prompt_role() -> UserRole:
    choices = ", ".join(r.value for r in UserRole)
    while True:
        value = input(f"Role [{choices}] (employee): ").strip().lower() or UserRole.EMPLOYEE.value
        try:
            return UserRole(value)
        except ValueError:
            print(f"❌ Role must be one of: {choices}")


def _prompt_password() -> str:
    while True:
        password = getpass("Password: ")
        try:
            check_password_policy(password)
        except ValueError as e:
            print(f"❌ {e}")
            continue

        if password != getpass("Password (confirm): "):
            print("❌ Passwords don't match")
            continue

        return password


async def create_user() -> None:
    """Interactive user creation."""
    from auxtrack.core.db import AsyncSessionLocal

    print("\n" + "=" * 50)
    print("AuxTrack - Create user")
    print("=" * 50 + "\n")

    email = _prompt("Email address", validate_email)
    full_name = _prompt("Full name", validate_full_name)
    department = input("Department (optional): ").strip() or None
    role = _prompt_role()
    password = _prompt_password()

    async with AsyncSessionLocal() as db:
        user = await create_user_account(db, email, password, full_name, role, department)

    print("\n✅ User created successfully!")
    print(f"   Email: {user.email}")
    print(f"   Role: {user.role}")
    print(f"   ID: {user.id}\n")


def main() -> None:
    try:
        asyncio.run(create_user())
    except KeyboardInterrupt:
        print("\n\n❌ Cancelled\n")
        sys.exit(1)
    except ConflictError as e:
        print(f"\n❌ {e.message}\n")
        sys.exit(1)
    except Exception as e:
        logger.error("createuser_error", error=str(e))
        print(f"\n❌ Error: {e}\n")
        sys.exit(1)


if __name__ == "__main__":
    main()
