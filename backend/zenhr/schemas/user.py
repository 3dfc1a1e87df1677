# ruff: noqa: TC001
from __future__ import annotations

from pydantic import BaseModel, Field

from zenhr.models.enums import Role


class User(BaseModel):
    """An application user with their used-day counters for the current year."""

    id: str
    username: str | None = None
    password: str | None = None
    name: str
    department: str
    role: Role = Role.EMPLOYEE
    annual_leave_used: int = Field(default=0, ge=0)
    public_holiday_used: int = Field(default=0, ge=0)
    avatar: str = ""


class CreateUserPayload(BaseModel):
    """Request body for creating a user."""

    id: str | None = Field(default=None, max_length=64)
    username: str | None = Field(default=None, max_length=255)
    password: str | None = Field(default=None, max_length=255)
    name: str = Field(min_length=1, max_length=255)
    department: str = Field(min_length=1, max_length=255)
    role: Role = Role.EMPLOYEE
    annual_leave_used: int = Field(default=0, ge=0)
    public_holiday_used: int = Field(default=0, ge=0)
    avatar: str = ""


class UpdateUserPayload(BaseModel):
    """Partial update for a user. Only fields that are set are applied."""

    username: str | None = Field(default=None, max_length=255)
    password: str | None = Field(default=None, max_length=255)
    name: str | None = Field(default=None, min_length=1, max_length=255)
    department: str | None = Field(default=None, min_length=1, max_length=255)
    role: Role | None = None
    annual_leave_used: int | None = Field(default=None, ge=0)
    public_holiday_used: int | None = Field(default=None, ge=0)
    avatar: str | None = None


class UserResponse(BaseModel):
    """Public view of a user. Credentials are never returned."""

    id: str
    username: str | None
    name: str
    department: str
    role: Role
    annual_leave_used: int
    public_holiday_used: int
    avatar: str


class UserListResponse(BaseModel):
    items: list[UserResponse]
    total: int
