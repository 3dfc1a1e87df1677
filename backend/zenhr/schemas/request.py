# ruff: noqa: TC001, TC003
from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, Field

from zenhr.models.enums import LeaveStatus, LeaveType

# ---------------------------------------------------------------------------
# Domain record
# ---------------------------------------------------------------------------


class LeaveRequest(BaseModel):
    """A single leave instance.

    ``user_name`` and ``department`` are copied from the user at submission
    time and are not refreshed when the user record changes later.
    """

    id: str
    user_id: str
    user_name: str
    department: str
    type: LeaveType
    start_date: date
    end_date: date
    days_count: int = Field(ge=0)
    status: LeaveStatus = LeaveStatus.PENDING
    reason: str = ""
    created_at: datetime


# ---------------------------------------------------------------------------
# Request payloads
# ---------------------------------------------------------------------------


class SubmitRequestPayload(BaseModel):
    """Request body for submitting a leave request as the logged-in user.

    Dates are optional here so that missing values surface as ledger
    validation errors rather than schema errors.
    """

    type: LeaveType
    start_date: date | None = None
    end_date: date | None = None
    reason: str = Field(default="", max_length=2000)


class StatusUpdatePayload(BaseModel):
    """Request body for approving or rejecting a request."""

    status: LeaveStatus


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class RequestListResponse(BaseModel):
    """Filtered list of leave requests, newest first."""

    items: list[LeaveRequest]
    total: int
