# File: tests/conftest.py
"""Pytest configuration and fixtures."""

import os

os.environ.setdefault("ENVIRONMENT", "testing")

from datetime import datetime  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from auxtrack.api.auth import get_current_user  # noqa: E402
from auxtrack.api.deps import get_clock  # noqa: E402
from auxtrack.core.db import Base, get_db  # noqa: E402
from auxtrack.main import create_app  # noqa: E402

# Import all models so metadata knows every table
from auxtrack.models.aux_session import AuxSession  # noqa: E402, F401
from auxtrack.models.user import User, UserRole  # noqa: E402
from auxtrack.utils.datetime import FrozenClock  # noqa: E402
from tests.factories import UserFactory  # noqa: E402

# In-memory SQLite by default; point at Postgres to exercise row locks for real:
# TEST_DATABASE_URL=postgresql+asyncpg://auxtrack:...@db:5432/auxtrack_test
TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite+aiosqlite://")

# Monday 09:00 UTC, start of a shift
T0 = datetime(2026, 1, 5, 9, 0, 0)


def _engine_kwargs(url: str) -> dict:
    if url.startswith("sqlite"):
        # One shared connection, otherwise every checkout sees an empty memory DB
        return {"poolclass": StaticPool}
    return {}


@pytest_asyncio.fixture
async def engine():
    test_engine = create_async_engine(TEST_DATABASE_URL, echo=False, **_engine_kwargs(TEST_DATABASE_URL))

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield test_engine

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await test_engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    """Fresh DB session for each test."""
    async_session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with async_session_maker() as session:
        yield session
        await session.rollback()


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(T0)


def build_app(db_session: AsyncSession, clock: FrozenClock, user: User | None = None):
    """App wired to the test session and clock, optionally pre-authenticated as `user`."""
    app = create_app()

    # Same transaction semantics as production get_db
    async def override_get_db():
        try:
            yield db_session
            await db_session.commit()
        except Exception:
            await db_session.rollback()
            raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: clock

    if user is not None:
        user_id = user.id

        # Re-read per request: a rolled-back request expires every loaded instance
        async def override_get_current_user():
            return await db_session.get(User, user_id)

        app.dependency_overrides[get_current_user] = override_get_current_user

    return app


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession) -> User:
    return await UserFactory.create(
        db_session,
        email="employee@example.com",
        full_name="Sara Employee",
        department="Support",
    )


@pytest_asyncio.fixture
async def admin_user(db_session: AsyncSession) -> User:
    return await UserFactory.create(
        db_session,
        email="admin@example.com",
        full_name="Omar Admin",
        role=UserRole.ADMIN.value,
    )


@pytest_asyncio.fixture
async def client(db_session: AsyncSession, clock: FrozenClock, test_user: User):
    """Async client authenticated as an employee."""
    app = build_app(db_session, clock, test_user)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        ac.test_user = test_user
        ac.user_id = test_user.id
        ac.db_session = db_session
        yield ac


@pytest_asyncio.fixture
async def admin_client(db_session: AsyncSession, clock: FrozenClock, admin_user: User):
    """Async client authenticated as an admin."""
    app = build_app(db_session, clock, admin_user)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        ac.test_user = admin_user
        ac.user_id = admin_user.id
        ac.db_session = db_session
        yield ac


@pytest_asyncio.fixture
async def unauthenticated_client(db_session: AsyncSession, clock: FrozenClock):
    """Client without auth override: goes through the real cookie session."""
    app = build_app(db_session, clock)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        ac.db_session = db_session
        yield ac
