"""Reporting views computed from the ledger's collections."""

# ruff: noqa: TC003
from __future__ import annotations

from collections import Counter
from datetime import date
from typing import TYPE_CHECKING

from zenhr.models.enums import LeaveStatus, LeaveType
from zenhr.schemas.report import DashboardSummary, QuotaBalance, UserLeaveStats
from zenhr.services.quota import compute_used_in_year, quota_limit

if TYPE_CHECKING:
    from collections.abc import Iterable

    from zenhr.schemas.organization import LeaveSettings
    from zenhr.schemas.request import LeaveRequest


def filter_requests(
    requests: Iterable[LeaveRequest],
    *,
    user_id: str | None = None,
    status: LeaveStatus | None = None,
    leave_type: LeaveType | None = None,
    department: str | None = None,
    year: int | None = None,
    month: int | None = None,
) -> list[LeaveRequest]:
    """Filter requests by owner, status, type, department and start-date year/month.

    The input order (newest first in the ledger) is preserved.
    """
    result: list[LeaveRequest] = []
    for r in requests:
        if user_id is not None and r.user_id != user_id:
            continue
        if status is not None and r.status != status:
            continue
        if leave_type is not None and r.type != leave_type:
            continue
        if department is not None and r.department != department:
            continue
        if year is not None and r.start_date.year != year:
            continue
        if month is not None and r.start_date.month != month:
            continue
        result.append(r)
    return result


def dashboard_summary(
    requests: Iterable[LeaveRequest],
    today: date,
    period_start: date | None = None,
    period_end: date | None = None,
) -> DashboardSummary:
    """Counts for requests starting inside the period, plus who is off today."""
    all_requests = list(requests)
    in_period = [
        r
        for r in all_requests
        if (period_start is None or r.start_date >= period_start) and (period_end is None or r.start_date <= period_end)
    ]

    on_leave_today = [
        r for r in all_requests if r.status == LeaveStatus.APPROVED and r.start_date <= today <= r.end_date
    ]

    return DashboardSummary(
        period_start=period_start,
        period_end=period_end,
        pending=sum(1 for r in in_period if r.status == LeaveStatus.PENDING),
        approved=sum(1 for r in in_period if r.status == LeaveStatus.APPROVED),
        sick=sum(1 for r in in_period if r.type == LeaveType.SICK),
        by_type=dict(Counter(r.type for r in in_period)),
        by_department=dict(Counter(r.department for r in in_period)),
        on_leave_today=on_leave_today,
    )


def user_leave_stats(
    requests: Iterable[LeaveRequest],
    user_id: str,
    year: int,
    today: date,
    settings: LeaveSettings,
) -> UserLeaveStats:
    """Approved days a user took in ``year``.

    The month total covers the current calendar month of ``year``. Quota
    balances here count approved days only; pending requests are not deducted.
    """
    approved_days: dict[LeaveType, int] = dict.fromkeys(LeaveType, 0)
    total_year = 0
    total_month = 0

    for r in requests:
        if r.user_id != user_id or r.status != LeaveStatus.APPROVED or r.start_date.year != year:
            continue
        total_year += r.days_count
        if r.start_date.month == today.month:
            total_month += r.days_count
        approved_days[r.type] += r.days_count

    def _balance(leave_type: LeaveType) -> QuotaBalance:
        limit = quota_limit(leave_type, settings) or 0
        used = approved_days[leave_type]
        return QuotaBalance(leave_type=leave_type, year=year, limit=limit, used=used, remaining=max(0, limit - used))

    return UserLeaveStats(
        user_id=user_id,
        year=year,
        total_this_year=total_year,
        total_this_month=total_month,
        approved_days=approved_days,
        annual=_balance(LeaveType.ANNUAL),
        public_holiday=_balance(LeaveType.PUBLIC_HOLIDAY),
    )


def quota_balance(
    requests: Iterable[LeaveRequest],
    user_id: str,
    leave_type: LeaveType,
    year: int,
    settings: LeaveSettings,
) -> QuotaBalance | None:
    """Bookable balance for a quota-limited type, reserving pending requests.

    This is the figure submission checks against. Returns None for
    unlimited types.
    """
    limit = quota_limit(leave_type, settings)
    if limit is None:
        return None
    used = compute_used_in_year(requests, user_id, leave_type, year)
    return QuotaBalance(leave_type=leave_type, year=year, limit=limit, used=used, remaining=max(0, limit - used))
