# ruff: noqa: TC001, TC003
from __future__ import annotations

from datetime import date

from pydantic import BaseModel

from zenhr.models.enums import LeaveType
from zenhr.schemas.request import LeaveRequest


class DashboardSummary(BaseModel):
    """Headline counts for a period, by request start date."""

    period_start: date | None
    period_end: date | None
    pending: int
    approved: int
    sick: int
    by_type: dict[LeaveType, int]
    by_department: dict[str, int]
    on_leave_today: list[LeaveRequest]


class QuotaBalance(BaseModel):
    """Used and remaining days of a quota-limited leave type in one year."""

    leave_type: LeaveType
    year: int
    limit: int
    used: int
    remaining: int


class UserLeaveStats(BaseModel):
    """Approved days taken by one user in one year, per leave type."""

    user_id: str
    year: int
    total_this_year: int
    total_this_month: int
    approved_days: dict[LeaveType, int]
    annual: QuotaBalance
    public_holiday: QuotaBalance
