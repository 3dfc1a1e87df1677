# ruff: noqa: B008
from __future__ import annotations

from fastapi import APIRouter, Query, status

from zenhr.api.auth import user_response
from zenhr.api.deps import CurrentUserDep, LedgerDep, SettingsManagerDep
from zenhr.exceptions import AppError, NotFoundError
from zenhr.models.enums import AppFeature
from zenhr.schemas.report import UserLeaveStats
from zenhr.schemas.user import CreateUserPayload, UpdateUserPayload, UserListResponse, UserResponse
from zenhr.services.report import user_leave_stats

users_router = APIRouter(prefix="/users", tags=["users"])

# Fields a user may change on their own profile without MANAGE_SETTINGS.
SELF_EDITABLE_FIELDS = frozenset({"name", "username", "password", "avatar"})


@users_router.get("", response_model=UserListResponse)
async def list_users(ledger: LedgerDep, user: CurrentUserDep) -> UserListResponse:
    """List all users."""
    users = ledger.users
    return UserListResponse(items=[user_response(u) for u in users], total=len(users))


@users_router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(payload: CreateUserPayload, ledger: LedgerDep, user: SettingsManagerDep) -> UserResponse:
    """Create a user (settings managers only)."""
    created = (await ledger.add_user(payload)).unwrap()
    if created is None:
        raise AppError("User was not created")
    return user_response(created)


@users_router.patch("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: str,
    payload: UpdateUserPayload,
    ledger: LedgerDep,
    user: CurrentUserDep,
) -> UserResponse:
    """Update a user.

    Settings managers may change any field of any user. Everyone else may
    only change the profile fields of their own account.
    """
    if not ledger.has_permission(user.role, AppFeature.MANAGE_SETTINGS):
        if user.id != user_id:
            raise AppError("Not authorized to edit this user", status_code=status.HTTP_403_FORBIDDEN)
        restricted = sorted(payload.model_fields_set - SELF_EDITABLE_FIELDS)
        if restricted:
            raise AppError(
                f"{AppFeature.MANAGE_SETTINGS.value} permission required to change {', '.join(restricted)}",
                status_code=status.HTTP_403_FORBIDDEN,
            )
    updated = (await ledger.update_user(user_id, payload)).unwrap()
    if updated is None:
        raise NotFoundError(f"User '{user_id}' not found")
    return user_response(updated)


@users_router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(user_id: str, ledger: LedgerDep, user: SettingsManagerDep) -> None:
    """Delete a user (settings managers only)."""
    (await ledger.delete_user(user_id)).unwrap()


@users_router.get("/{user_id}/stats", response_model=UserLeaveStats)
async def get_user_stats(
    user_id: str,
    ledger: LedgerDep,
    user: CurrentUserDep,
    year: int | None = Query(default=None),
) -> UserLeaveStats:
    """Approved leave taken by a user in a year."""
    if user.id != user_id and not ledger.has_permission(user.role, AppFeature.VIEW_REPORTS):
        raise AppError("Not authorized to view this user", status_code=status.HTTP_403_FORBIDDEN)
    if ledger.get_user(user_id) is None:
        raise NotFoundError(f"User '{user_id}' not found")
    today = ledger.today()
    return user_leave_stats(ledger.requests, user_id, year or today.year, today, ledger.settings)
