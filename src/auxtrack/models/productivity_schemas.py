"""Pydantic schemas for productivity analytics."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from auxtrack.core.productivity import ActiveSummary, ProductivityReport


class StatusBreakdownRead(BaseModel):
    hours: float
    percentage: float
    sessions: int


class ProductivityRead(BaseModel):
    """Time distribution per AUX status over a window."""

    user_id: UUID | None = Field(None, description="None when aggregated over all users")
    window_start: datetime
    window_end: datetime
    total_hours: float
    productivity_percentage: float
    by_status: dict[str, StatusBreakdownRead]

    @classmethod
    def from_report(cls, report: ProductivityReport, user_id: UUID | None) -> "ProductivityRead":
        return cls(
            user_id=user_id,
            window_start=report.window.start,
            window_end=report.window.end,
            total_hours=report.total_hours,
            productivity_percentage=report.productivity_percentage,
            by_status={
                status.value: StatusBreakdownRead(
                    hours=item.hours,
                    percentage=item.percentage,
                    sessions=item.sessions,
                )
                for status, item in report.by_status.items()
            },
        )


class ActiveSummaryRead(BaseModel):
    total_active: int
    present: int
    by_status: dict[str, int]

    @classmethod
    def from_summary(cls, summary: ActiveSummary) -> "ActiveSummaryRead":
        return cls(
            total_active=summary.total_active,
            present=summary.present,
            by_status={status.value: count for status, count in summary.by_status.items()},
        )
