from sqlmodel import SQLModel

from zenhr.models.base import StringIDBase, TimestampMixin
from zenhr.models.enums import AppFeature, LeaveStatus, LeaveType, Role
from zenhr.models.organization import DepartmentRecord, LeaveSettingsRecord, RolePermissionRecord
from zenhr.models.request import LeaveRequestRecord
from zenhr.models.user import UserRecord

__all__ = [
    "AppFeature",
    "DepartmentRecord",
    "LeaveRequestRecord",
    "LeaveSettingsRecord",
    "LeaveStatus",
    "LeaveType",
    "Role",
    "RolePermissionRecord",
    "SQLModel",
    "StringIDBase",
    "TimestampMixin",
    "UserRecord",
]
