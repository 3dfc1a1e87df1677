from __future__ import annotations

import datetime

import sqlalchemy as sa
from sqlmodel import Field

from zenhr.models.base import StringIDBase, TimestampMixin
from zenhr.models.enums import LeaveStatus


class LeaveRequestRecord(StringIDBase, TimestampMixin, table=True):
    """Stored copy of a leave request.

    ``user_name`` and ``department`` are the snapshot taken when the request
    was submitted.
    """

    __tablename__ = "leave_request"
    __table_args__ = (sa.Index("ix_leave_request_user_type", "user_id", "type"),)

    user_id: str = Field(index=True, max_length=64)
    user_name: str = Field(max_length=255)
    department: str = Field(index=True, max_length=255)
    type: str = Field(max_length=50)
    start_date: datetime.date
    end_date: datetime.date
    days_count: int = 0
    status: str = Field(
        default=LeaveStatus.PENDING, max_length=50, index=True, sa_column_kwargs={"server_default": "Pending"}
    )
    reason: str | None = None
