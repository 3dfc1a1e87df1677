"""Built-in defaults and a seed script for development data.

The ledger falls back to these collections when neither the remote store nor
the local cache has anything to offer.

Run with:  python -m zenhr.seed
"""

from __future__ import annotations

import asyncio
import logging
import sys
from datetime import UTC, date, datetime
from typing import TYPE_CHECKING

from zenhr.config import get_settings
from zenhr.models.enums import AppFeature, LeaveStatus, LeaveType, Role
from zenhr.schemas.organization import LeaveSettings, RolePermissions
from zenhr.schemas.request import LeaveRequest
from zenhr.schemas.user import User

if TYPE_CHECKING:
    from zenhr.services.store import LeaveStore

logger = logging.getLogger(__name__)

DEFAULT_DEPARTMENTS: tuple[str, ...] = ("IT", "AI", "Ops")

_EMPLOYEE_FEATURES = {
    AppFeature.VIEW_DASHBOARD,
    AppFeature.VIEW_CALENDAR,
    AppFeature.REQUEST_LEAVE,
}


def default_permissions() -> RolePermissions:
    """Employees can view and request; HR admins can do everything."""
    return {
        Role.EMPLOYEE: {feature: feature in _EMPLOYEE_FEATURES for feature in AppFeature},
        Role.HR_ADMIN: dict.fromkeys(AppFeature, True),
    }


def default_settings() -> LeaveSettings:
    settings = get_settings()
    return LeaveSettings(
        annual_leave_limit=settings.default_annual_leave_limit,
        public_holiday_count=settings.default_public_holiday_count,
    )


def default_users() -> list[User]:
    return [
        User(
            id="admin_01",
            username="admin",
            password="123456",
            name="Super Admin",
            department="Ops",
            role=Role.HR_ADMIN,
            avatar="https://ui-avatars.com/api/?name=Super+Admin&background=0D8ABC&color=fff",
        ),
        User(
            id="u1",
            username="alice",
            password="123",
            name="Alice Engineer",
            department="IT",
            avatar="https://picsum.photos/seed/alice/100/100",
        ),
        User(
            id="u2",
            username="bob",
            password="123",
            name="Bob Data",
            department="AI",
            avatar="https://picsum.photos/seed/bob/100/100",
        ),
        User(
            id="u3",
            username="charlie",
            password="123",
            name="Charlie Ops",
            department="Ops",
            avatar="https://picsum.photos/seed/charlie/100/100",
        ),
        User(
            id="u4",
            username="diana",
            password="123",
            name="Diana Admin",
            department="Ops",
            role=Role.HR_ADMIN,
            avatar="https://picsum.photos/seed/diana/100/100",
        ),
    ]


def default_requests() -> list[LeaveRequest]:
    return [
        LeaveRequest(
            id="lr2",
            user_id="u2",
            user_name="Bob Data",
            department="AI",
            type=LeaveType.ANNUAL,
            start_date=date(2024, 6, 20),
            end_date=date(2024, 6, 20),
            days_count=1,
            status=LeaveStatus.PENDING,
            reason="Family visit",
            created_at=datetime(2024, 6, 15, tzinfo=UTC),
        ),
        LeaveRequest(
            id="lr3",
            user_id="u3",
            user_name="Charlie Ops",
            department="Ops",
            type=LeaveType.PERSONAL,
            start_date=date(2024, 5, 25),
            end_date=date(2024, 5, 25),
            days_count=1,
            status=LeaveStatus.APPROVED,
            reason="Bank appointment",
            created_at=datetime(2024, 5, 20, tzinfo=UTC),
        ),
        LeaveRequest(
            id="lr1",
            user_id="u1",
            user_name="Alice Engineer",
            department="IT",
            type=LeaveType.SICK,
            start_date=date(2024, 5, 10),
            end_date=date(2024, 5, 12),
            days_count=2,
            status=LeaveStatus.APPROVED,
            reason="Flu",
            created_at=datetime(2024, 5, 1, tzinfo=UTC),
        ),
    ]


async def seed_store(store: LeaveStore) -> None:
    """Push the built-in defaults into a store."""
    for name in DEFAULT_DEPARTMENTS:
        await store.insert_department(name)
    for user in default_users():
        await store.insert_user(user)
    for request in default_requests():
        await store.insert_leave_request(request)
    for role, features in default_permissions().items():
        for feature, allowed in features.items():
            await store.upsert_permission(role, feature, allowed)
    settings = default_settings()
    await store.upsert_settings(settings.annual_leave_limit, settings.public_holiday_count)


async def _run() -> None:
    from zenhr.db import dispose_engine, get_session_factory
    from zenhr.services.sql_store import SqlLeaveStore

    if not get_settings().database_url:
        logger.error("DATABASE_URL is not set; nothing to seed")
        sys.exit(1)

    try:
        await seed_store(SqlLeaveStore(get_session_factory()))
    finally:
        await dispose_engine()
    logger.info("Seeded %d users and %d requests", len(default_users()), len(default_requests()))


def main() -> None:
    """Entry point for the seed script."""
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    asyncio.run(_run())


if __name__ == "__main__":
    main()
