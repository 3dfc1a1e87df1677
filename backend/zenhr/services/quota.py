"""Pure quota arithmetic: day counts and per-year usage.

Nothing here touches the store or the clock; callers pass in every input.
"""

# ruff: noqa: TC003
from __future__ import annotations

from datetime import date, timedelta
from typing import TYPE_CHECKING

from zenhr.models.enums import LeaveStatus, LeaveType

if TYPE_CHECKING:
    from collections.abc import Iterable

    from zenhr.schemas.organization import LeaveSettings
    from zenhr.schemas.request import LeaveRequest

# date.weekday(): Monday is 0, Sunday is 6.
_SUNDAY = 6


def compute_day_count(start_date: date, end_date: date, leave_type: LeaveType) -> int:
    """Count leave days in ``[start_date, end_date]``, skipping Sundays.

    Notes never count. An inverted range counts as zero.
    """
    if leave_type == LeaveType.NOTE:
        return 0
    if end_date < start_date:
        return 0

    count = 0
    current = start_date
    one_day = timedelta(days=1)
    while current <= end_date:
        if current.weekday() != _SUNDAY:
            count += 1
        current += one_day
    return count


def compute_used_in_year(
    requests: Iterable[LeaveRequest],
    user_id: str,
    leave_type: LeaveType,
    year: int,
) -> int:
    """Sum days of a user's non-rejected requests of one type starting in ``year``.

    Pending requests are included so that they reserve quota until decided.
    """
    return sum(
        r.days_count
        for r in requests
        if r.user_id == user_id
        and r.type == leave_type
        and r.status != LeaveStatus.REJECTED
        and r.start_date.year == year
    )


def quota_limit(leave_type: LeaveType, settings: LeaveSettings) -> int | None:
    """Return the yearly limit for a leave type, or None when unlimited."""
    if leave_type == LeaveType.ANNUAL:
        return settings.annual_leave_limit
    if leave_type == LeaveType.PUBLIC_HOLIDAY:
        return settings.public_holiday_count
    return None


def remaining_in_year(
    requests: Iterable[LeaveRequest],
    user_id: str,
    leave_type: LeaveType,
    year: int,
    settings: LeaveSettings,
) -> int | None:
    """Days still bookable for a user/type/year, or None when unlimited."""
    limit = quota_limit(leave_type, settings)
    if limit is None:
        return None
    used = compute_used_in_year(requests, user_id, leave_type, year)
    return max(0, limit - used)
