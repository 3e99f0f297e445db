# File: tests/test_concurrency.py
"""Concurrent AUX mutations for one user, each in its own transaction.

SQLite ignores FOR UPDATE, so these only run against Postgres:
TEST_DATABASE_URL=postgresql+asyncpg://... pytest tests/test_concurrency.py
"""

import asyncio

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from auxtrack.core.errors import ConflictError
from auxtrack.core.store import SessionStore
from auxtrack.core.tracker import AuxSessionTracker
from auxtrack.models.aux_session import AuxSession
from tests.conftest import TEST_DATABASE_URL

pytestmark = pytest.mark.skipif(
    not TEST_DATABASE_URL.startswith("postgresql"),
    reason="row locks need Postgres",
)


async def run_in_transaction(maker, clock, operation):
    """Run one tracker call the way a request does: commit on success, rollback on error."""
    async with maker() as db:
        tracker = AuxSessionTracker(SessionStore(db), clock=clock)
        try:
            result = await operation(tracker)
            await db.commit()
            return result
        except Exception:
            await db.rollback()
            raise


async def count_open(maker, user_id) -> int:
    async with maker() as db:
        stmt = select(func.count()).select_from(AuxSession).where(
            AuxSession.user_id == user_id, AuxSession.end_time.is_(None)
        )
        return (await db.execute(stmt)).scalar_one()


class TestConcurrentSwitches:
    """Per-user row lock serialises composite operations."""

    async def test_racing_switches_leave_exactly_one_open(self, engine, test_user, clock):
        maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
        user_id = test_user.id
        statuses = ["ready", "working_on_project", "break", "personal"] * 3

        results = await asyncio.gather(
            *(
                run_in_transaction(maker, clock, lambda t, s=s: t.switch_status(user_id, s))
                for s in statuses
            ),
            return_exceptions=True,
        )

        assert [r for r in results if isinstance(r, Exception)] == []
        assert await count_open(maker, user_id) == 1

        async with maker() as db:
            rows = (
                await db.execute(select(AuxSession).where(AuxSession.user_id == user_id))
            ).scalars().all()
        assert len(rows) == len(statuses)

    async def test_racing_starts_admit_one(self, engine, test_user, clock):
        maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
        user_id = test_user.id

        results = await asyncio.gather(
            *(
                run_in_transaction(maker, clock, lambda t: t.start_session(user_id, "ready"))
                for _ in range(5)
            ),
            return_exceptions=True,
        )

        started = [r for r in results if isinstance(r, AuxSession)]
        conflicts = [r for r in results if isinstance(r, ConflictError)]
        assert len(started) == 1
        assert len(conflicts) == 4
        assert await count_open(maker, user_id) == 1
