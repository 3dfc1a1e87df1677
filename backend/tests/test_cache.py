from __future__ import annotations

from datetime import UTC, date, datetime
from typing import TYPE_CHECKING

from zenhr.models.enums import AppFeature, LeaveType, Role
from zenhr.schemas.organization import LeaveSettings
from zenhr.schemas.request import LeaveRequest
from zenhr.schemas.user import User
from zenhr.services.cache import CacheSnapshot, LocalCache

if TYPE_CHECKING:
    from pathlib import Path


def test_load_missing_file(tmp_path: Path) -> None:
    assert LocalCache(tmp_path / "absent.json").load() is None


def test_load_corrupt_file(tmp_path: Path) -> None:
    path = tmp_path / "cache.json"
    path.write_text("{not json", encoding="utf-8")
    assert LocalCache(path).load() is None


def test_save_and_load(tmp_path: Path) -> None:
    cache = LocalCache(tmp_path / "nested" / "cache.json")
    snapshot = CacheSnapshot(
        users=[User(id="u1", name="Alice", department="IT")],
        requests=[
            LeaveRequest(
                id="r1",
                user_id="u1",
                user_name="Alice",
                department="IT",
                type=LeaveType.PUBLIC_HOLIDAY,
                start_date=date(2025, 4, 14),
                end_date=date(2025, 4, 15),
                days_count=2,
                created_at=datetime(2025, 4, 1, tzinfo=UTC),
            )
        ],
        departments=["IT"],
        permissions={Role.EMPLOYEE: {AppFeature.VIEW_REPORTS: False}},
        settings=LeaveSettings(annual_leave_limit=4, public_holiday_count=13),
        current_user_id="u1",
        webhook_url="https://sheet.test/exec",
    )

    cache.save(snapshot)
    loaded = cache.load()

    assert loaded == snapshot
    assert not cache.path.with_name("cache.json.tmp").exists()


def test_partial_snapshot_keeps_none_collections(tmp_path: Path) -> None:
    cache = LocalCache(tmp_path / "cache.json")
    cache.save(CacheSnapshot(departments=[]))
    loaded = cache.load()
    assert loaded is not None
    assert loaded.departments == []
    assert loaded.users is None
    assert loaded.settings is None
