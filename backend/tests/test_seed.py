from __future__ import annotations

from zenhr.models.enums import AppFeature, LeaveStatus, LeaveType, Role
from zenhr.seed import (
    DEFAULT_DEPARTMENTS,
    default_permissions,
    default_requests,
    default_settings,
    default_users,
    seed_store,
)
from zenhr.services.quota import compute_day_count
from zenhr.services.store import InMemoryLeaveStore


def test_default_users_reference_default_departments() -> None:
    assert all(u.department in DEFAULT_DEPARTMENTS for u in default_users())


def test_default_admin_account() -> None:
    admin = next(u for u in default_users() if u.username == "admin")
    assert admin.role == Role.HR_ADMIN
    assert admin.password == "123456"


def test_default_request_day_counts_match_calendar() -> None:
    for request in default_requests():
        assert request.days_count == compute_day_count(request.start_date, request.end_date, request.type)


def test_default_counters_match_approved_requests() -> None:
    # None of the sample requests is an approved quota-limited leave.
    quota_types = {LeaveType.ANNUAL, LeaveType.PUBLIC_HOLIDAY}
    assert not any(r.status == LeaveStatus.APPROVED and r.type in quota_types for r in default_requests())
    assert all(u.annual_leave_used == 0 and u.public_holiday_used == 0 for u in default_users())


def test_default_permissions() -> None:
    permissions = default_permissions()
    assert all(permissions[Role.HR_ADMIN].values())
    assert permissions[Role.EMPLOYEE][AppFeature.REQUEST_LEAVE]
    assert not permissions[Role.EMPLOYEE][AppFeature.APPROVE_LEAVE]
    assert not permissions[Role.EMPLOYEE][AppFeature.MANAGE_SETTINGS]


def test_default_settings() -> None:
    settings = default_settings()
    assert settings.annual_leave_limit == 2
    assert settings.public_holiday_count == 13


async def test_seed_store_populates_in_memory_store() -> None:
    store = InMemoryLeaveStore()
    await seed_store(store)

    snapshot = await store.fetch_all()
    assert len(snapshot.users) == len(default_users())
    assert store.departments == list(DEFAULT_DEPARTMENTS)
    assert await store.fetch_settings() == default_settings()
