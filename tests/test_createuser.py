"""Tests for the createuser command."""

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from auxtrack.core.errors import ConflictError
from auxtrack.core.security import verify_password
from auxtrack.models.user import User, UserRole
from auxtrack.scripts import createuser
from auxtrack.scripts.createuser import create_user_account


class TestCreateUserAccount:
    """Test account creation used by the CLI."""

    async def test_creates_employee_by_default(self, db_session: AsyncSession):
        user = await create_user_account(db_session, "Agent@Example.com", "shift2026!", "Ana  Agent")

        assert user.email == "agent@example.com"
        assert user.full_name == "Ana Agent"
        assert user.role == UserRole.EMPLOYEE.value
        assert user.is_active is True
        assert verify_password("shift2026!", user.hashed_password)

    async def test_creates_admin_with_department(self, db_session: AsyncSession):
        user = await create_user_account(
            db_session, "boss@example.com", "shift2026!", "Big Boss", UserRole.ADMIN, "Ops"
        )

        stored = (await db_session.execute(select(User).where(User.id == user.id))).scalar_one()
        assert stored.role == "admin"
        assert stored.department == "Ops"
        assert stored.is_admin

    async def test_department_is_sanitized(self, db_session: AsyncSession):
        user = await create_user_account(
            db_session, "rd.com", "shift2026!", "Lab Person", department=" <i>R&D</i> "
        )

        assert user.department == "R&amp;D"

    async def test_department_too_long_once_escaped(self, db_session: AsyncSession):
        with pytest.raises(ValueError, match="Department cannot exceed"):
            await create_user_account(
                db_session, "rd.com", "shift2026!", "Lab Person", department="&" * 30
            )

    async def test_duplicate_email_conflicts(self, db_session: AsyncSession, test_user):
        with pytest.raises(ConflictError):
            await create_user_account(db_session, test_user.email, "shift2026!", "Someone Else")

    @pytest.mark.parametrize(
        "email,password,full_name",
        [
            ("bad-email", "shift2026!", "Valid Name"),
            ("ok@example.com", "short1", "Valid Name"),
            ("ok@example.com", "shift2026!", "R2-D2"),
        ],
    )
    async def test_invalid_input_raises_value_error(self, db_session, email, password, full_name):
        with pytest.raises(ValueError):
            await create_user_account(db_session, email, password, full_name)


class TestMain:
    """Exit codes of the console entry point."""

    def test_conflict_exits_1(self, monkeypatch, capsys):
        async def fake_create_user():
            raise ConflictError("Email already registered")

        monkeypatch.setattr(createuser, "create_user", fake_create_user)

        with pytest.raises(SystemExit) as exc_info:
            createuser.main()

        assert exc_info.value.code == 1
        assert "Email already registered" in capsys.readouterr().out

    def test_keyboard_interrupt_exits_1(self, monkeypatch, capsys):
        async def fake_create_user():
            raise KeyboardInterrupt

        monkeypatch.setattr(createuser, "create_user", fake_create_user)

        with pytest.raises(SystemExit) as exc_info:
            createuser.main()

        assert exc_info.value.code == 1
        assert "Cancelled" in capsys.readouterr().out
