# File: src/auxtrack/utils/datetime.py
"""UTC datetime utilities and the injectable clock."""

from datetime import datetime, timedelta, timezone
from typing import Callable

# A clock is any zero-argument callable returning naive UTC
Clock = Callable[[], datetime]


def now_utc() -> datetime:
    """Get current UTC datetime as NAIVE for database storage."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    """Normalize an aware datetime to naive UTC. Naive values are assumed UTC already."""
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class FrozenClock:
    """Manually advanced clock for tests and scripted replays."""

    def __init__(self, start: datetime):
        self.current = to_naive_utc(start)

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> datetime:
        """Move the clock forward by a timedelta built from kwargs."""
        self.current = self.current + timedelta(**kwargs)
        return self.current
