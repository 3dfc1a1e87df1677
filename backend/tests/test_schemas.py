"""Unit tests for Pydantic domain records, payloads and command results."""

from __future__ import annotations

from datetime import UTC, date, datetime

import pytest
from pydantic import ValidationError

from zenhr.exceptions import AppError, QuotaExceededError
from zenhr.models.enums import LeaveType, Role
from zenhr.schemas.organization import LeaveSettings
from zenhr.schemas.request import LeaveRequest, SubmitRequestPayload
from zenhr.schemas.result import CommandResult
from zenhr.schemas.user import UpdateUserPayload, User

# ---------------------------------------------------------------------------
# Domain records
# ---------------------------------------------------------------------------


def test_user_defaults() -> None:
    user = User(id="u1", name="Alice", department="IT")
    assert user.role == Role.EMPLOYEE
    assert user.annual_leave_used == 0
    assert user.avatar == ""


def test_user_counters_non_negative() -> None:
    with pytest.raises(ValidationError):
        User(id="u1", name="Alice", department="IT", annual_leave_used=-1)


def test_leave_request_days_non_negative() -> None:
    with pytest.raises(ValidationError):
        LeaveRequest(
            id="r1",
            user_id="u1",
            user_name="Alice",
            department="IT",
            type=LeaveType.SICK,
            start_date=date(2025, 6, 2),
            end_date=date(2025, 6, 2),
            days_count=-1,
            created_at=datetime(2025, 6, 1, tzinfo=UTC),
        )


def test_leave_type_parses_store_label() -> None:
    payload = SubmitRequestPayload.model_validate({"type": "Public Holiday", "start_date": "2025-04-14"})
    assert payload.type == LeaveType.PUBLIC_HOLIDAY
    assert payload.end_date is None


@pytest.mark.parametrize(("annual", "holidays"), [(0, 13), (2, 0), (-1, 5)])
def test_leave_settings_must_be_positive(annual: int, holidays: int) -> None:
    with pytest.raises(ValidationError):
        LeaveSettings(annual_leave_limit=annual, public_holiday_count=holidays)


def test_update_payload_tracks_set_fields() -> None:
    payload = UpdateUserPayload(name="Alice B")
    assert payload.model_dump(exclude_unset=True) == {"name": "Alice B"}


# ---------------------------------------------------------------------------
# CommandResult
# ---------------------------------------------------------------------------


def test_success_result() -> None:
    result: CommandResult[int] = CommandResult.success(3)
    assert result.ok
    assert result.message == "ok"
    assert result.unwrap() == 3


def test_failure_result_unwrap_raises() -> None:
    result: CommandResult[int] = CommandResult.failure(QuotaExceededError("Annual Leave", 1))
    assert not result.ok
    assert "1 day(s) remaining" in result.message
    with pytest.raises(QuotaExceededError) as excinfo:
        result.unwrap()
    assert excinfo.value.status_code == 400
    assert isinstance(excinfo.value, AppError)
