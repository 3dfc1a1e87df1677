from __future__ import annotations

from sqlmodel import Field

from zenhr.models.base import StringIDBase
from zenhr.models.enums import Role


class UserRecord(StringIDBase, table=True):
    """Stored copy of an application user and their used-day counters."""

    __tablename__ = "app_user"

    username: str | None = Field(default=None, max_length=255, unique=True)
    password: str | None = Field(default=None, max_length=255)
    name: str = Field(max_length=255)
    department: str = Field(index=True, max_length=255)
    role: str = Field(default=Role.EMPLOYEE, max_length=50)
    annual_leave_used: int = 0
    public_holiday_used: int = 0
    avatar: str | None = None
