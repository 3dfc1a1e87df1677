from __future__ import annotations

import sqlalchemy as sa
from sqlmodel import Field, SQLModel


class DepartmentRecord(SQLModel, table=True):
    """A department name. Users and requests reference it by name."""

    __tablename__ = "department"

    name: str = Field(primary_key=True, max_length=255)


class RolePermissionRecord(SQLModel, table=True):
    """One role/feature toggle."""

    __tablename__ = "role_permission"
    __table_args__ = (sa.UniqueConstraint("role", "feature", name="uq_role_permission"),)

    id: int | None = Field(default=None, primary_key=True)
    role: str = Field(max_length=50)
    feature: str = Field(max_length=50)
    allowed: bool = False


class LeaveSettingsRecord(SQLModel, table=True):
    """Global yearly quotas. A single row with id 1."""

    __tablename__ = "leave_settings"

    id: int = Field(default=1, primary_key=True)
    annual_leave_limit: int
    public_holiday_count: int
