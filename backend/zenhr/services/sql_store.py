"""Remote store backed by SQLModel tables through SQLAlchemy's async engine."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import sqlalchemy as sa
from sqlalchemy import select
from sqlmodel import col

from zenhr.models.enums import AppFeature, LeaveStatus, LeaveType, Role
from zenhr.models.organization import DepartmentRecord, LeaveSettingsRecord, RolePermissionRecord
from zenhr.models.request import LeaveRequestRecord
from zenhr.models.user import UserRecord
from zenhr.schemas.organization import LeaveSettings
from zenhr.schemas.request import LeaveRequest
from zenhr.schemas.user import User
from zenhr.services.store import StoreSnapshot

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    from zenhr.schemas.organization import RolePermissions

_SETTINGS_ROW_ID = 1


# ---------------------------------------------------------------------------
# Row mapping
# ---------------------------------------------------------------------------


def _user_from_record(record: UserRecord) -> User:
    return User(
        id=record.id,
        username=record.username,
        password=record.password,
        name=record.name,
        department=record.department,
        role=Role(record.role),
        annual_leave_used=record.annual_leave_used,
        public_holiday_used=record.public_holiday_used,
        avatar=record.avatar or "",
    )


def _user_to_record(user: User) -> UserRecord:
    return UserRecord(
        id=user.id,
        username=user.username or None,
        password=user.password or None,
        name=user.name,
        department=user.department,
        role=user.role.value,
        annual_leave_used=user.annual_leave_used,
        public_holiday_used=user.public_holiday_used,
        avatar=user.avatar or None,
    )


def _request_from_record(record: LeaveRequestRecord) -> LeaveRequest:
    return LeaveRequest(
        id=record.id,
        user_id=record.user_id,
        user_name=record.user_name,
        department=record.department,
        type=LeaveType(record.type),
        start_date=record.start_date,
        end_date=record.end_date,
        days_count=record.days_count,
        status=LeaveStatus(record.status),
        reason=record.reason or "",
        created_at=record.created_at,
    )


def _request_to_record(request: LeaveRequest) -> LeaveRequestRecord:
    return LeaveRequestRecord(
        id=request.id,
        user_id=request.user_id,
        user_name=request.user_name,
        department=request.department,
        type=request.type.value,
        start_date=request.start_date,
        end_date=request.end_date,
        days_count=request.days_count,
        status=request.status.value,
        reason=request.reason,
        created_at=request.created_at,
    )


def _user_columns(changes: dict[str, Any]) -> dict[str, Any]:
    """Translate a domain partial update into column values."""
    values: dict[str, Any] = {}
    for key, value in changes.items():
        if key in ("username", "password", "avatar"):
            values[key] = value or None
        elif key == "role":
            values[key] = Role(value).value
        else:
            values[key] = value
    return values


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------


class SqlLeaveStore:
    """LeaveStore implementation over the application database."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def ping(self) -> None:
        async with self._session_factory() as session:
            await session.execute(sa.text("SELECT 1"))

    async def fetch_all(self) -> StoreSnapshot:
        async with self._session_factory() as session:
            users_result = await session.execute(select(UserRecord))
            requests_result = await session.execute(
                select(LeaveRequestRecord).order_by(col(LeaveRequestRecord.created_at).desc())
            )
            return StoreSnapshot(
                users=[_user_from_record(u) for u in users_result.scalars().all()],
                requests=[_request_from_record(r) for r in requests_result.scalars().all()],
            )

    async def fetch_departments(self) -> list[str]:
        async with self._session_factory() as session:
            result = await session.execute(select(col(DepartmentRecord.name)).order_by(col(DepartmentRecord.name)))
            return [row[0] for row in result.all()]

    async def fetch_permissions(self) -> RolePermissions | None:
        async with self._session_factory() as session:
            result = await session.execute(select(RolePermissionRecord))
            rows = list(result.scalars().all())
        if not rows:
            return None
        permissions: RolePermissions = {}
        for row in rows:
            permissions.setdefault(Role(row.role), {})[AppFeature(row.feature)] = row.allowed
        return permissions

    async def fetch_settings(self) -> LeaveSettings | None:
        async with self._session_factory() as session:
            record = await session.get(LeaveSettingsRecord, _SETTINGS_ROW_ID)
        if record is None:
            return None
        return LeaveSettings(
            annual_leave_limit=record.annual_leave_limit,
            public_holiday_count=record.public_holiday_count,
        )

    async def insert_user(self, user: User) -> None:
        async with self._session_factory() as session:
            await session.merge(_user_to_record(user))
            await session.commit()

    async def update_user(self, user_id: str, changes: dict[str, Any]) -> None:
        if not changes:
            return
        async with self._session_factory() as session:
            await session.execute(
                sa.update(UserRecord).where(col(UserRecord.id) == user_id).values(**_user_columns(changes))
            )
            await session.commit()

    async def delete_user(self, user_id: str) -> None:
        async with self._session_factory() as session:
            await session.execute(sa.delete(UserRecord).where(col(UserRecord.id) == user_id))
            await session.commit()

    async def insert_leave_request(self, request: LeaveRequest) -> None:
        # Upsert by id so a replayed insert does not fail.
        async with self._session_factory() as session:
            await session.merge(_request_to_record(request))
            await session.commit()

    async def update_leave_status(self, request_id: str, status: LeaveStatus) -> None:
        async with self._session_factory() as session:
            await session.execute(
                sa.update(LeaveRequestRecord)
                .where(col(LeaveRequestRecord.id) == request_id)
                .values(status=LeaveStatus(status).value)
            )
            await session.commit()

    async def delete_leave_request(self, request_id: str) -> None:
        async with self._session_factory() as session:
            await session.execute(sa.delete(LeaveRequestRecord).where(col(LeaveRequestRecord.id) == request_id))
            await session.commit()

    async def insert_department(self, name: str) -> None:
        async with self._session_factory() as session:
            await session.merge(DepartmentRecord(name=name))
            await session.commit()

    async def rename_department(self, old_name: str, new_name: str) -> None:
        async with self._session_factory() as session:
            await session.execute(
                sa.update(DepartmentRecord).where(col(DepartmentRecord.name) == old_name).values(name=new_name)
            )
            await session.execute(
                sa.update(UserRecord).where(col(UserRecord.department) == old_name).values(department=new_name)
            )
            await session.execute(
                sa.update(LeaveRequestRecord)
                .where(col(LeaveRequestRecord.department) == old_name)
                .values(department=new_name)
            )
            await session.commit()

    async def delete_department(self, name: str) -> None:
        async with self._session_factory() as session:
            await session.execute(sa.delete(DepartmentRecord).where(col(DepartmentRecord.name) == name))
            await session.commit()

    async def upsert_permission(self, role: Role, feature: AppFeature, allowed: bool) -> None:
        async with self._session_factory() as session:
            result = await session.execute(
                select(RolePermissionRecord).where(
                    col(RolePermissionRecord.role) == Role(role).value,
                    col(RolePermissionRecord.feature) == AppFeature(feature).value,
                )
            )
            record = result.scalar_one_or_none()
            if record is None:
                session.add(
                    RolePermissionRecord(role=Role(role).value, feature=AppFeature(feature).value, allowed=allowed)
                )
            else:
                record.allowed = allowed
            await session.commit()

    async def upsert_settings(self, annual_leave_limit: int, public_holiday_count: int) -> None:
        async with self._session_factory() as session:
            await session.merge(
                LeaveSettingsRecord(
                    id=_SETTINGS_ROW_ID,
                    annual_leave_limit=annual_leave_limit,
                    public_holiday_count=public_holiday_count,
                )
            )
            await session.commit()
