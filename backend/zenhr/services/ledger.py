"""The leave ledger: sole owner of users, requests, departments, permissions
and quota settings.

Every mutating command runs under one asyncio lock, applies its change to the
in-memory collections, rewrites the local cache and then mirrors the change
to the remote store. Store failures are logged and never undo local state.
"""

# ruff: noqa: TC003
from __future__ import annotations

import asyncio
import logging
from datetime import UTC, date, datetime, tzinfo
from typing import TYPE_CHECKING, Any, TypeVar

from zenhr.exceptions import (
    ConstraintViolationError,
    LeaveValidationError,
    NotAuthenticatedError,
    NotFoundError,
    QuotaExceededError,
    StorePersistenceError,
)
from zenhr.models.base import new_id, now_utc
from zenhr.models.enums import AppFeature, LeaveStatus, LeaveType, Role
from zenhr.schemas.organization import LeaveSettings, RolePermissions
from zenhr.schemas.request import LeaveRequest
from zenhr.schemas.result import CommandResult
from zenhr.schemas.user import CreateUserPayload, UpdateUserPayload, User
from zenhr.seed import DEFAULT_DEPARTMENTS, default_permissions, default_requests, default_settings, default_users
from zenhr.services.cache import CacheSnapshot, LocalCache
from zenhr.services.notifier import HEADER_ROW, build_leave_event, build_test_event
from zenhr.services.quota import compute_day_count, compute_used_in_year, quota_limit, remaining_in_year
from zenhr.services.session import SessionRegistry

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from zenhr.services.notifier import SheetsNotifier
    from zenhr.services.store import LeaveStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

# ---------------------------------------------------------------------------
# Counter transitions
# ---------------------------------------------------------------------------

_P, _A, _R = LeaveStatus.PENDING, LeaveStatus.APPROVED, LeaveStatus.REJECTED

# Sign of the used-day counter change for (old status, new status). Only
# leaving or entering APPROVED moves the counter.
COUNTER_SIGN: dict[tuple[LeaveStatus, LeaveStatus], int] = {
    (_P, _P): 0,
    (_P, _A): 1,
    (_P, _R): 0,
    (_A, _P): -1,
    (_A, _A): 0,
    (_A, _R): -1,
    (_R, _P): 0,
    (_R, _A): 1,
    (_R, _R): 0,
}

COUNTER_FIELD: dict[LeaveType, str] = {
    LeaveType.ANNUAL: "annual_leave_used",
    LeaveType.PUBLIC_HOLIDAY: "public_holiday_used",
}


def counter_delta(request: LeaveRequest, new_status: LeaveStatus, current_year: int) -> int:
    """Days to add to the owner's used counter when ``request`` moves to ``new_status``.

    Counters only track quota-limited types in the current calendar year.
    """
    if request.type not in COUNTER_FIELD or request.start_date.year != current_year:
        return 0
    return COUNTER_SIGN[(request.status, new_status)] * request.days_count


def _merge_permissions(stored: RolePermissions | None) -> RolePermissions:
    """Overlay stored toggles on the defaults so newly added features get a value."""
    merged = default_permissions()
    for role, features in (stored or {}).items():
        merged.setdefault(role, {}).update(features)
    return merged


# ---------------------------------------------------------------------------
# Ledger
# ---------------------------------------------------------------------------


class LeaveLedger:
    """In-memory leave state with quota enforcement and best-effort persistence."""

    def __init__(
        self,
        store: LeaveStore,
        cache: LocalCache | None = None,
        notifier: SheetsNotifier | None = None,
        *,
        store_timeout: float = 5.0,
        webhook_url: str = "",
        clock: Callable[[], datetime] = now_utc,
        tz: tzinfo = UTC,
        sessions: SessionRegistry | None = None,
    ) -> None:
        self._store = store
        self._cache = cache
        self._notifier = notifier
        self._store_timeout = store_timeout
        self._clock = clock
        self._tz = tz
        self._sessions = sessions if sessions is not None else SessionRegistry()
        self._lock = asyncio.Lock()
        self._background: set[asyncio.Task[bool]] = set()

        self._users: list[User] = []
        self._requests: list[LeaveRequest] = []
        self._departments: list[str] = list(DEFAULT_DEPARTMENTS)
        self._permissions: RolePermissions = default_permissions()
        self._settings: LeaveSettings = default_settings()
        self._current_user_id: str | None = None
        self._webhook_url = webhook_url

        self.last_store_error: StorePersistenceError | None = None

    # -- internals ----------------------------------------------------------

    def today(self) -> date:
        """Current date on the ledger clock, in the ledger's timezone."""
        return self._clock().astimezone(self._tz).date()

    async def _call_store(self, operation: str, call: Callable[..., Awaitable[T]], *args: Any) -> T | None:
        """Run one store call with a timeout. Failures are logged, never raised."""
        try:
            result = await asyncio.wait_for(call(*args), timeout=self._store_timeout)
        except Exception as exc:
            self.last_store_error = StorePersistenceError(operation, exc)
            logger.warning("%s; continuing with local state", self.last_store_error.message)
            return None
        return result

    def _write_cache(self) -> None:
        if self._cache is None:
            return
        snapshot = CacheSnapshot(
            users=self._users,
            requests=self._requests,
            departments=self._departments,
            permissions=self._permissions,
            settings=self._settings,
            current_user_id=self._current_user_id,
            webhook_url=self._webhook_url,
        )
        try:
            self._cache.save(snapshot)
        except OSError:
            logger.warning("Failed to write local cache to %s", self._cache.path, exc_info=True)

    def _notify(self, event: dict[str, Any]) -> None:
        """Post an event to the webhook in the background."""
        if self._notifier is None or not self._webhook_url:
            return
        task = asyncio.create_task(self._notifier.send(self._webhook_url, event))
        self._background.add(task)
        task.add_done_callback(self._on_notify_done)

    def _on_notify_done(self, task: asyncio.Task[bool]) -> None:
        self._background.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.warning("Webhook notification failed", exc_info=task.exception())

    def _user_index(self, user_id: str) -> int | None:
        for index, user in enumerate(self._users):
            if user.id == user_id:
                return index
        return None

    def _request_index(self, request_id: str) -> int | None:
        for index, request in enumerate(self._requests):
            if request.id == request_id:
                return index
        return None

    def _apply_counter_delta(self, user_id: str, leave_type: LeaveType, delta: int) -> dict[str, int] | None:
        """Move a user's used counter by ``delta`` days, clamped at zero."""
        if delta == 0:
            return None
        index = self._user_index(user_id)
        if index is None:
            logger.info("Counter change of %d for unknown user %s skipped", delta, user_id)
            return None
        field = COUNTER_FIELD[leave_type]
        user = self._users[index]
        changes = {field: max(0, getattr(user, field) + delta)}
        self._users[index] = user.model_copy(update=changes)
        return changes

    def _username_taken(self, username: str | None, exclude_user_id: str | None = None) -> bool:
        if not username:
            return False
        return any(u.username == username and u.id != exclude_user_id for u in self._users)

    # -- startup ------------------------------------------------------------

    async def load(self) -> None:
        """Populate state from the store, else the local cache, else defaults."""
        async with self._lock:
            cached = self._cache.load() if self._cache is not None else None

            snapshot = await self._call_store("fetch_all", self._store.fetch_all)
            if snapshot is not None and not snapshot.is_empty:
                self._users, self._requests = list(snapshot.users), list(snapshot.requests)
                source = "store"
            elif cached is not None and cached.users is not None:
                self._users, self._requests = list(cached.users), list(cached.requests or [])
                source = "cache"
            else:
                self._users, self._requests = default_users(), default_requests()
                source = "defaults"

            departments = await self._call_store("fetch_departments", self._store.fetch_departments)
            if departments:
                self._departments = list(departments)
            elif cached is not None and cached.departments is not None:
                self._departments = list(cached.departments)
            else:
                self._departments = list(DEFAULT_DEPARTMENTS)

            permissions = await self._call_store("fetch_permissions", self._store.fetch_permissions)
            if permissions is None and cached is not None:
                permissions = cached.permissions
            self._permissions = _merge_permissions(permissions)

            settings = await self._call_store("fetch_settings", self._store.fetch_settings)
            if settings is None and cached is not None:
                settings = cached.settings
            self._settings = settings or default_settings()

            if cached is not None:
                self._current_user_id = cached.current_user_id
                if cached.webhook_url is not None:
                    self._webhook_url = cached.webhook_url
            if self._current_user_id is not None and self._user_index(self._current_user_id) is None:
                self._current_user_id = None

            self._write_cache()

        logger.info(
            "Ledger loaded from %s: %d users, %d requests, %d departments",
            source,
            len(self._users),
            len(self._requests),
            len(self._departments),
        )

    async def ping_store(self) -> bool:
        """Report whether the remote store answers within the timeout."""
        try:
            await asyncio.wait_for(self._store.ping(), timeout=self._store_timeout)
        except Exception:
            logger.debug("Store ping failed", exc_info=True)
            return False
        return True

    async def drain_notifications(self) -> None:
        """Wait for in-flight webhook posts to finish."""
        if self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)

    # -- read accessors -----------------------------------------------------

    @property
    def users(self) -> list[User]:
        return list(self._users)

    @property
    def requests(self) -> list[LeaveRequest]:
        return list(self._requests)

    @property
    def departments(self) -> list[str]:
        return list(self._departments)

    @property
    def permissions(self) -> RolePermissions:
        return {role: dict(features) for role, features in self._permissions.items()}

    @property
    def settings(self) -> LeaveSettings:
        return self._settings

    @property
    def webhook_url(self) -> str:
        return self._webhook_url

    @property
    def current_user(self) -> User | None:
        if self._current_user_id is None:
            return None
        return self.get_user(self._current_user_id)

    @property
    def is_authenticated(self) -> bool:
        return self.current_user is not None

    def get_user(self, user_id: str) -> User | None:
        index = self._user_index(user_id)
        return self._users[index] if index is not None else None

    def get_request(self, request_id: str) -> LeaveRequest | None:
        index = self._request_index(request_id)
        return self._requests[index] if index is not None else None

    def has_permission(self, role: Role, feature: AppFeature) -> bool:
        return self._permissions.get(role, {}).get(feature, False)

    def remaining_balance(self, user_id: str, leave_type: LeaveType, year: int) -> int | None:
        """Days left for a user/type/year; None for unlimited types."""
        return remaining_in_year(self._requests, user_id, leave_type, year, self._settings)

    # -- session ------------------------------------------------------------

    def _match_credentials(self, username: str, password: str) -> User | None:
        for user in self._users:
            if user.username == username and user.password == password:
                return user
        logger.info("Failed login for username %r", username)
        return None

    async def login(self, username: str, password: str) -> bool:
        """Match plain credentials and make the user current."""
        async with self._lock:
            user = self._match_credentials(username, password)
            if user is None:
                return False
            self._current_user_id = user.id
            self._write_cache()
        logger.info("User %s logged in", user.id)
        return True

    async def logout(self) -> None:
        async with self._lock:
            self._current_user_id = None
            self._write_cache()

    async def open_session(self, username: str, password: str) -> str | None:
        """Match plain credentials and issue a bearer token for that user.

        Unlike ``login`` this leaves the current user alone, so every HTTP
        client keeps its own identity.
        """
        async with self._lock:
            user = self._match_credentials(username, password)
            if user is None:
                return None
            token = self._sessions.issue(user.id)
        logger.info("Opened session for user %s", user.id)
        return token

    def resolve_session(self, token: str) -> User | None:
        user_id = self._sessions.resolve(token)
        return self.get_user(user_id) if user_id is not None else None

    async def close_session(self, token: str) -> None:
        async with self._lock:
            self._sessions.revoke(token)

    # -- leave requests -----------------------------------------------------

    async def submit_request(
        self,
        leave_type: LeaveType,
        start_date: date | None,
        end_date: date | None,
        reason: str = "",
        *,
        user_id: str | None = None,
    ) -> CommandResult[LeaveRequest]:
        """Create a PENDING request for ``user_id``, or the current user when omitted.

        Flow:
        1. Require a logged-in user and consistent dates
        2. Count days (Sundays excluded, notes are zero)
        3. Check the quota of the start date's year, counting pending requests
        4. Prepend the request, write the cache, mirror to the store
        5. Notify the webhook

        Used-day counters are not touched until the request is approved.
        """
        async with self._lock:
            user = self.current_user if user_id is None else self.get_user(user_id)
            if user is None:
                return CommandResult.failure(NotAuthenticatedError())

            if start_date is None:
                return CommandResult.failure(LeaveValidationError("Start date is required"))
            if leave_type == LeaveType.NOTE:
                end_date = start_date
            elif end_date is None:
                return CommandResult.failure(LeaveValidationError("End date is required"))
            elif end_date < start_date:
                return CommandResult.failure(LeaveValidationError("End date must not be before start date"))

            days_count = compute_day_count(start_date, end_date, leave_type)

            limit = quota_limit(leave_type, self._settings)
            if limit is not None:
                used = compute_used_in_year(self._requests, user.id, leave_type, start_date.year)
                if used + days_count > limit:
                    return CommandResult.failure(QuotaExceededError(leave_type.value, max(0, limit - used)))

            request = LeaveRequest(
                id=new_id(),
                user_id=user.id,
                user_name=user.name,
                department=user.department,
                type=leave_type,
                start_date=start_date,
                end_date=end_date,
                days_count=days_count,
                status=LeaveStatus.PENDING,
                reason=reason,
                created_at=self._clock(),
            )
            self._requests.insert(0, request)
            self._write_cache()
            await self._call_store("insert_leave_request", self._store.insert_leave_request, request)

        logger.info(
            "Submitted %s request %s for user %s (%d day(s))", leave_type.value, request.id, user.id, days_count
        )
        self._notify(build_leave_event(request))
        return CommandResult.success(request)

    async def update_request_status(
        self, request_id: str, new_status: LeaveStatus
    ) -> CommandResult[LeaveRequest]:
        """Move a request to ``new_status`` and adjust its owner's used counter.

        An unknown id is treated as already handled. Re-applying the current
        status changes nothing.
        """
        async with self._lock:
            index = self._request_index(request_id)
            if index is None:
                logger.info("Status update for unknown request %s ignored", request_id)
                return CommandResult.success(None)

            request = self._requests[index]
            delta = counter_delta(request, new_status, self.today().year)
            updated = request.model_copy(update={"status": new_status})
            self._requests[index] = updated
            user_changes = self._apply_counter_delta(request.user_id, request.type, delta)
            self._write_cache()

            await self._call_store("update_leave_status", self._store.update_leave_status, request_id, new_status)
            if user_changes is not None:
                await self._call_store("update_user", self._store.update_user, request.user_id, user_changes)

        logger.info(
            "Request %s moved %s -> %s (counter delta %d)", request_id, request.status.value, new_status.value, delta
        )
        self._notify(build_leave_event(updated))
        return CommandResult.success(updated)

    async def delete_request(self, request_id: str) -> CommandResult[None]:
        """Remove a request, refunding its days when it had been approved."""
        async with self._lock:
            index = self._request_index(request_id)
            if index is None:
                logger.info("Delete of unknown request %s ignored", request_id)
                return CommandResult.success(None)

            request = self._requests.pop(index)
            delta = counter_delta(request, LeaveStatus.REJECTED, self.today().year)
            user_changes = self._apply_counter_delta(request.user_id, request.type, delta)
            self._write_cache()

            await self._call_store("delete_leave_request", self._store.delete_leave_request, request_id)
            if user_changes is not None:
                await self._call_store("update_user", self._store.update_user, request.user_id, user_changes)

        logger.info("Deleted request %s (counter delta %d)", request_id, delta)
        return CommandResult.success(None)

    # -- users --------------------------------------------------------------

    async def add_user(self, payload: CreateUserPayload) -> CommandResult[User]:
        async with self._lock:
            if payload.department not in self._departments:
                return CommandResult.failure(
                    ConstraintViolationError(f"Department '{payload.department}' does not exist")
                )
            if self._username_taken(payload.username):
                return CommandResult.failure(ConstraintViolationError(f"Username '{payload.username}' is taken"))
            if payload.id is not None and self._user_index(payload.id) is not None:
                return CommandResult.failure(ConstraintViolationError(f"User id '{payload.id}' already exists"))

            user = User(**payload.model_dump(exclude={"id"}), id=payload.id or new_id())
            self._users.append(user)
            self._write_cache()
            await self._call_store("insert_user", self._store.insert_user, user)

        logger.info("Added user %s", user.id)
        return CommandResult.success(user)

    async def update_user(self, user_id: str, payload: UpdateUserPayload) -> CommandResult[User]:
        """Apply the fields set on ``payload`` to a user."""
        async with self._lock:
            index = self._user_index(user_id)
            if index is None:
                return CommandResult.failure(NotFoundError(f"User '{user_id}' not found"))

            changes = payload.model_dump(exclude_unset=True, exclude_none=True)
            department = changes.get("department")
            if department is not None and department not in self._departments:
                return CommandResult.failure(ConstraintViolationError(f"Department '{department}' does not exist"))
            if self._username_taken(changes.get("username"), exclude_user_id=user_id):
                return CommandResult.failure(ConstraintViolationError(f"Username '{changes['username']}' is taken"))

            user = self._users[index].model_copy(update=changes)
            self._users[index] = user
            self._write_cache()
            if changes:
                await self._call_store("update_user", self._store.update_user, user_id, changes)

        return CommandResult.success(user)

    async def delete_user(self, user_id: str) -> CommandResult[None]:
        """Remove a user. Their requests keep the submission-time snapshot."""
        async with self._lock:
            index = self._user_index(user_id)
            if index is None:
                return CommandResult.failure(NotFoundError(f"User '{user_id}' not found"))

            self._users.pop(index)
            if self._current_user_id == user_id:
                self._current_user_id = None
            self._sessions.revoke_user(user_id)
            self._write_cache()
            await self._call_store("delete_user", self._store.delete_user, user_id)

        logger.info("Deleted user %s", user_id)
        return CommandResult.success(None)

    # -- departments --------------------------------------------------------

    async def add_department(self, name: str) -> CommandResult[str]:
        name = name.strip()
        async with self._lock:
            if not name:
                return CommandResult.failure(LeaveValidationError("Department name is required"))
            if name in self._departments:
                return CommandResult.failure(ConstraintViolationError(f"Department '{name}' already exists"))

            self._departments.append(name)
            self._write_cache()
            await self._call_store("insert_department", self._store.insert_department, name)

        return CommandResult.success(name)

    async def rename_department(self, old_name: str, new_name: str) -> CommandResult[str]:
        """Rename a department and repair every user and request that references it."""
        new_name = new_name.strip()
        async with self._lock:
            if not new_name:
                return CommandResult.failure(LeaveValidationError("Department name is required"))
            if old_name == new_name:
                return CommandResult.success(new_name)
            if old_name not in self._departments:
                return CommandResult.failure(NotFoundError(f"Department '{old_name}' not found"))
            if new_name in self._departments:
                return CommandResult.failure(ConstraintViolationError(f"Department '{new_name}' already exists"))

            self._departments = [new_name if d == old_name else d for d in self._departments]
            self._users = [
                u.model_copy(update={"department": new_name}) if u.department == old_name else u for u in self._users
            ]
            self._requests = [
                r.model_copy(update={"department": new_name}) if r.department == old_name else r
                for r in self._requests
            ]
            self._write_cache()
            await self._call_store("rename_department", self._store.rename_department, old_name, new_name)

        logger.info("Renamed department %r to %r", old_name, new_name)
        return CommandResult.success(new_name)

    async def delete_department(self, name: str) -> CommandResult[None]:
        async with self._lock:
            if name not in self._departments:
                return CommandResult.failure(NotFoundError(f"Department '{name}' not found"))
            blocking = sum(1 for u in self._users if u.department == name)
            if blocking > 0:
                return CommandResult.failure(
                    ConstraintViolationError(
                        f"Department '{name}' is still assigned to {blocking} user(s)",
                        blocking_count=blocking,
                    )
                )

            self._departments.remove(name)
            self._write_cache()
            await self._call_store("delete_department", self._store.delete_department, name)

        return CommandResult.success(None)

    # -- permissions and settings -------------------------------------------

    async def set_permission(self, role: Role, feature: AppFeature, allowed: bool) -> CommandResult[RolePermissions]:
        async with self._lock:
            self._permissions.setdefault(role, {})[feature] = allowed
            self._write_cache()
            await self._call_store("upsert_permission", self._store.upsert_permission, role, feature, allowed)

        return CommandResult.success(self.permissions)

    async def update_leave_limits(
        self, annual_leave_limit: int, public_holiday_count: int
    ) -> CommandResult[LeaveSettings]:
        """Replace the yearly quotas. Existing requests are not re-validated."""
        async with self._lock:
            if annual_leave_limit <= 0 or public_holiday_count <= 0:
                return CommandResult.failure(LeaveValidationError("Leave limits must be positive"))

            self._settings = LeaveSettings(
                annual_leave_limit=annual_leave_limit,
                public_holiday_count=public_holiday_count,
            )
            self._write_cache()
            await self._call_store(
                "upsert_settings", self._store.upsert_settings, annual_leave_limit, public_holiday_count
            )

        return CommandResult.success(self._settings)

    # -- webhook ------------------------------------------------------------

    async def save_webhook_url(self, url: str) -> CommandResult[str]:
        async with self._lock:
            self._webhook_url = url.strip()
            self._write_cache()
        return CommandResult.success(self._webhook_url)

    async def test_webhook(self) -> bool:
        """Post a dummy event and report whether it went through."""
        if self._notifier is None or not self._webhook_url:
            return False
        return await self._notifier.send(self._webhook_url, build_test_event(self._clock()))

    async def send_webhook_headers(self) -> bool:
        """Post the sheet's header row."""
        if self._notifier is None or not self._webhook_url:
            return False
        return await self._notifier.send(self._webhook_url, dict(HEADER_ROW))
