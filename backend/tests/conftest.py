from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

import pytest
from httpx import ASGITransport, AsyncClient

from zenhr.api.deps import get_ledger
from zenhr.main import app
from zenhr.models.enums import Role
from zenhr.schemas.user import User
from zenhr.services.cache import LocalCache
from zenhr.services.ledger import LeaveLedger
from zenhr.services.store import InMemoryLeaveStore

if TYPE_CHECKING:
    from collections.abc import AsyncIterator
    from pathlib import Path

# Monday 2 June 2025, 09:00 UTC.
FIXED_NOW = datetime(2025, 6, 2, 9, 0, tzinfo=UTC)

ADMIN_ID = "admin"
EMPLOYEE_ID = "emp"


def fixed_clock() -> datetime:
    return FIXED_NOW


@pytest.fixture
def store() -> InMemoryLeaveStore:
    """In-memory store seeded with one HR admin and one employee."""
    svc = InMemoryLeaveStore()
    svc.seed(
        users=[
            User(
                id=ADMIN_ID,
                username="admin",
                password="secret",
                name="Ada Admin",
                department="Ops",
                role=Role.HR_ADMIN,
            ),
            User(id=EMPLOYEE_ID, username="emp", password="pw", name="Eve Employee", department="IT"),
        ],
        departments=["IT", "AI", "Ops"],
    )
    return svc


@pytest.fixture
def cache(tmp_path: Path) -> LocalCache:
    return LocalCache(tmp_path / "cache.json")


@pytest.fixture
async def ledger(store: InMemoryLeaveStore, cache: LocalCache) -> LeaveLedger:
    """Ledger loaded from the seeded store, with the clock fixed at FIXED_NOW."""
    _ledger = LeaveLedger(store, cache, clock=fixed_clock)
    await _ledger.load()
    return _ledger


@pytest.fixture
async def async_client(ledger: LeaveLedger) -> AsyncIterator[AsyncClient]:
    """Async HTTP client with the ledger dependency overridden."""
    app.dependency_overrides[get_ledger] = lambda: ledger
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
