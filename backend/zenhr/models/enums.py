from __future__ import annotations

import enum


class Role(enum.StrEnum):
    """Role of an application user."""

    EMPLOYEE = "EMPLOYEE"
    HR_ADMIN = "HR_ADMIN"


class LeaveType(enum.StrEnum):
    """Kind of leave. Values are the labels stored by the remote store."""

    ANNUAL = "Annual Leave"
    SICK = "Sick Leave"
    PERSONAL = "Personal Leave"
    PUBLIC_HOLIDAY = "Public Holiday"
    NOTE = "Note"


class LeaveStatus(enum.StrEnum):
    """State machine for leave requests."""

    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class AppFeature(enum.StrEnum):
    """Features that can be toggled per role."""

    VIEW_DASHBOARD = "VIEW_DASHBOARD"
    VIEW_CALENDAR = "VIEW_CALENDAR"
    REQUEST_LEAVE = "REQUEST_LEAVE"
    APPROVE_LEAVE = "APPROVE_LEAVE"
    MANAGE_SETTINGS = "MANAGE_SETTINGS"
    VIEW_REPORTS = "VIEW_REPORTS"
