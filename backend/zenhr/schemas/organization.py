# ruff: noqa: TC001
from __future__ import annotations

from pydantic import BaseModel, Field

from zenhr.models.enums import AppFeature, Role

RolePermissions = dict[Role, dict[AppFeature, bool]]


class LeaveSettings(BaseModel):
    """Global yearly quotas shared by every user."""

    annual_leave_limit: int = Field(gt=0)
    public_holiday_count: int = Field(gt=0)


class LimitsPayload(BaseModel):
    """Request body for updating the yearly quotas.

    Bounds are checked by the ledger so that bad values come back as
    validation errors from the command itself.
    """

    annual_leave_limit: int
    public_holiday_count: int


class DepartmentPayload(BaseModel):
    name: str = Field(max_length=255)


class DepartmentListResponse(BaseModel):
    items: list[str]
    total: int


class PermissionPayload(BaseModel):
    allowed: bool


class WebhookPayload(BaseModel):
    url: str = Field(default="", max_length=2000)


class WebhookResponse(BaseModel):
    url: str
    sent: bool | None = None
