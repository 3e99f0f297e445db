# File: src/auxtrack/core/productivity.py
"""Productivity aggregation over AUX session history.

Everything here is pure: callers pass the sessions and the current time, and
get plain dataclasses back. Rounding to two decimals happens only when the
report is built, never on intermediate sums.
"""

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Iterable

from auxtrack.core.errors import ValidationError
from auxtrack.core.tracker import compute_elapsed
from auxtrack.models.enums import PRESENT_STATUSES, PRODUCTIVE_STATUSES, AuxStatus
from auxtrack.utils.datetime import to_naive_utc

DEFAULT_WINDOW_DAYS = 7


@dataclass(frozen=True)
class TimeWindow:
    """Closed interval [start, end] in naive UTC, matched against session start_time."""

    start: datetime
    end: datetime

    def __post_init__(self):
        object.__setattr__(self, "start", to_naive_utc(self.start))
        object.__setattr__(self, "end", to_naive_utc(self.end))
        if self.start > self.end:
            raise ValidationError(
                "Window start must not be after window end",
                details={"start": self.start.isoformat(), "end": self.end.isoformat()},
            )

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment <= self.end

    @classmethod
    def resolve(
        cls,
        start: datetime | None,
        end: datetime | None,
        now: datetime,
        default_days: int = DEFAULT_WINDOW_DAYS,
    ) -> "TimeWindow":
        """Fill missing bounds: end defaults to now, start to `default_days` before end."""
        end = to_naive_utc(end) if end is not None else now
        start = to_naive_utc(start) if start is not None else end - timedelta(days=default_days)
        return cls(start=start, end=end)


@dataclass
class StatusBreakdown:
    hours: float = 0.0
    percentage: float = 0.0
    sessions: int = 0


@dataclass
class ProductivityReport:
    window: TimeWindow
    total_hours: float = 0.0
    productivity_percentage: float = 0.0
    by_status: dict[AuxStatus, StatusBreakdown] = field(default_factory=dict)


@dataclass
class ActiveSummary:
    total_active: int = 0
    present: int = 0
    by_status: dict[AuxStatus, int] = field(default_factory=dict)


def _percent(part: float, whole: float) -> float:
    if whole <= 0:
        return 0.0
    return round(part / whole * 100, 2)


def _hours(seconds: float) -> float:
    return round(seconds / 3600, 2)


def aggregate(sessions: Iterable, window: TimeWindow, now: datetime) -> ProductivityReport:
    """Sum tracked time per status for sessions starting inside `window`.

    Sessions starting outside the window are dropped whole, not clipped. An open
    session is measured up to `now`.
    """
    seconds: dict[AuxStatus, float] = {}
    counts: Counter = Counter()

    for session in sessions:
        if not window.contains(session.start_time):
            continue
        status = AuxStatus.parse(session.status)
        elapsed = compute_elapsed(session, now).total_seconds()
        seconds[status] = seconds.get(status, 0.0) + elapsed
        counts[status] += 1

    total_seconds = sum(seconds.values())
    productive_seconds = sum(
        value for status, value in seconds.items() if status in PRODUCTIVE_STATUSES
    )

    by_status = {
        status: StatusBreakdown(
            hours=_hours(value),
            percentage=_percent(value, total_seconds),
            sessions=counts[status],
        )
        for status, value in seconds.items()
    }

    return ProductivityReport(
        window=window,
        total_hours=_hours(total_seconds),
        productivity_percentage=_percent(productive_seconds, total_seconds),
        by_status=by_status,
    )


def summarize_active(sessions: Iterable) -> ActiveSummary:
    """Head-count of open sessions per status for the admin dashboard."""
    counts: Counter = Counter(AuxStatus.parse(s.status) for s in sessions if s.end_time is None)
    return ActiveSummary(
        total_active=sum(counts.values()),
        present=sum(n for status, n in counts.items() if status in PRESENT_STATUSES),
        by_status=dict(counts),
    )
