"""Tests for day counting and per-year quota usage."""

from __future__ import annotations

from datetime import UTC, date, datetime

import pytest

from zenhr.models.enums import LeaveStatus, LeaveType
from zenhr.schemas.organization import LeaveSettings
from zenhr.schemas.request import LeaveRequest
from zenhr.services.quota import compute_day_count, compute_used_in_year, quota_limit, remaining_in_year

SETTINGS = LeaveSettings(annual_leave_limit=2, public_holiday_count=13)


def _request(
    request_id: str,
    *,
    user_id: str = "u1",
    leave_type: LeaveType = LeaveType.ANNUAL,
    start: date = date(2025, 6, 2),
    end: date | None = None,
    days: int = 1,
    status: LeaveStatus = LeaveStatus.PENDING,
) -> LeaveRequest:
    return LeaveRequest(
        id=request_id,
        user_id=user_id,
        user_name="Test User",
        department="IT",
        type=leave_type,
        start_date=start,
        end_date=end or start,
        days_count=days,
        status=status,
        created_at=datetime(2025, 1, 1, tzinfo=UTC),
    )


# ---------------------------------------------------------------------------
# compute_day_count
# ---------------------------------------------------------------------------


def test_friday_to_sunday_skips_sunday() -> None:
    assert compute_day_count(date(2024, 5, 10), date(2024, 5, 12), LeaveType.SICK) == 2


def test_full_week_counts_six_days() -> None:
    assert compute_day_count(date(2025, 6, 2), date(2025, 6, 8), LeaveType.ANNUAL) == 6


def test_single_day() -> None:
    assert compute_day_count(date(2025, 6, 3), date(2025, 6, 3), LeaveType.PERSONAL) == 1


def test_single_sunday_counts_zero() -> None:
    assert compute_day_count(date(2025, 6, 1), date(2025, 6, 1), LeaveType.ANNUAL) == 0


def test_saturday_counts() -> None:
    assert compute_day_count(date(2025, 6, 7), date(2025, 6, 7), LeaveType.ANNUAL) == 1


def test_note_always_zero() -> None:
    assert compute_day_count(date(2025, 6, 2), date(2025, 6, 20), LeaveType.NOTE) == 0


def test_inverted_range_is_zero() -> None:
    assert compute_day_count(date(2025, 6, 10), date(2025, 6, 2), LeaveType.ANNUAL) == 0


def test_range_across_year_end() -> None:
    # Wed 31 Dec 2025 .. Sun 4 Jan 2026: Sunday skipped.
    assert compute_day_count(date(2025, 12, 31), date(2026, 1, 4), LeaveType.ANNUAL) == 4


# ---------------------------------------------------------------------------
# compute_used_in_year
# ---------------------------------------------------------------------------


def test_used_counts_pending_and_approved() -> None:
    requests = [
        _request("a", days=1, status=LeaveStatus.PENDING),
        _request("b", days=2, status=LeaveStatus.APPROVED),
    ]
    assert compute_used_in_year(requests, "u1", LeaveType.ANNUAL, 2025) == 3


def test_used_excludes_rejected() -> None:
    requests = [
        _request("a", days=2, status=LeaveStatus.REJECTED),
        _request("b", days=1, status=LeaveStatus.APPROVED),
    ]
    assert compute_used_in_year(requests, "u1", LeaveType.ANNUAL, 2025) == 1


def test_used_filters_by_user_and_type() -> None:
    requests = [
        _request("a", user_id="u2", days=2),
        _request("b", leave_type=LeaveType.SICK, days=3),
        _request("c", days=1),
    ]
    assert compute_used_in_year(requests, "u1", LeaveType.ANNUAL, 2025) == 1


def test_used_is_keyed_on_start_year() -> None:
    requests = [_request("a", start=date(2025, 12, 31), end=date(2026, 1, 2), days=3)]
    assert compute_used_in_year(requests, "u1", LeaveType.ANNUAL, 2025) == 3
    assert compute_used_in_year(requests, "u1", LeaveType.ANNUAL, 2026) == 0


def test_used_empty_is_zero() -> None:
    assert compute_used_in_year([], "u1", LeaveType.ANNUAL, 2025) == 0


# ---------------------------------------------------------------------------
# Limits
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("leave_type", "expected"),
    [
        (LeaveType.ANNUAL, 2),
        (LeaveType.PUBLIC_HOLIDAY, 13),
        (LeaveType.SICK, None),
        (LeaveType.PERSONAL, None),
        (LeaveType.NOTE, None),
    ],
)
def test_quota_limit(leave_type: LeaveType, expected: int | None) -> None:
    assert quota_limit(leave_type, SETTINGS) == expected


def test_remaining_never_negative() -> None:
    requests = [_request("a", days=3, status=LeaveStatus.APPROVED)]
    assert remaining_in_year(requests, "u1", LeaveType.ANNUAL, 2025, SETTINGS) == 0


def test_remaining_unlimited_type_is_none() -> None:
    assert remaining_in_year([], "u1", LeaveType.SICK, 2025, SETTINGS) is None


def test_remaining_subtracts_pending() -> None:
    requests = [_request("a", days=1)]
    assert remaining_in_year(requests, "u1", LeaveType.ANNUAL, 2025, SETTINGS) == 1
