from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from pydantic import BaseModel

from zenhr.schemas.organization import LeaveSettings
from zenhr.schemas.request import LeaveRequest
from zenhr.schemas.user import User

if TYPE_CHECKING:
    from zenhr.models.enums import AppFeature, LeaveStatus, Role
    from zenhr.schemas.organization import RolePermissions


class StoreSnapshot(BaseModel):
    """Users and requests as returned by the remote store at startup."""

    users: list[User] = []
    requests: list[LeaveRequest] = []

    @property
    def is_empty(self) -> bool:
        return not self.users and not self.requests


@runtime_checkable
class LeaveStore(Protocol):
    """Interface for the remote persistent store.

    Every call may raise; the ledger treats any exception as a failed write.
    """

    async def ping(self) -> None:
        """Raise if the store is unreachable."""
        ...

    async def fetch_all(self) -> StoreSnapshot:
        """Fetch every user and every leave request (newest first)."""
        ...

    async def fetch_departments(self) -> list[str]: ...

    async def fetch_permissions(self) -> RolePermissions | None: ...

    async def fetch_settings(self) -> LeaveSettings | None: ...

    async def insert_user(self, user: User) -> None: ...

    async def update_user(self, user_id: str, changes: dict[str, Any]) -> None: ...

    async def delete_user(self, user_id: str) -> None: ...

    async def insert_leave_request(self, request: LeaveRequest) -> None: ...

    async def update_leave_status(self, request_id: str, status: LeaveStatus) -> None: ...

    async def delete_leave_request(self, request_id: str) -> None: ...

    async def insert_department(self, name: str) -> None: ...

    async def rename_department(self, old_name: str, new_name: str) -> None:
        """Rename a department and every user/request row that references it."""
        ...

    async def delete_department(self, name: str) -> None: ...

    async def upsert_permission(self, role: Role, feature: AppFeature, allowed: bool) -> None: ...

    async def upsert_settings(self, annual_leave_limit: int, public_holiday_count: int) -> None: ...


class StoreUnavailableError(ConnectionError):
    """Raised by the in-memory store while it is switched offline."""


class InMemoryLeaveStore:
    """In-memory store for development and tests.

    Set ``available = False`` to simulate an unreachable remote store.
    """

    def __init__(self) -> None:
        self.available = True
        self.operations: list[str] = []
        self._users: dict[str, User] = {}
        self._requests: dict[str, LeaveRequest] = {}
        self._departments: list[str] = []
        self._permissions: RolePermissions | None = None
        self._settings: LeaveSettings | None = None

    def seed(
        self,
        users: list[User] | None = None,
        requests: list[LeaveRequest] | None = None,
        departments: list[str] | None = None,
        permissions: RolePermissions | None = None,
        settings: LeaveSettings | None = None,
    ) -> None:
        """Seed store contents for testing."""
        for user in users or []:
            self._users[user.id] = user
        for request in requests or []:
            self._requests[request.id] = request
        self._departments.extend(d for d in departments or [] if d not in self._departments)
        if permissions is not None:
            self._permissions = permissions
        if settings is not None:
            self._settings = settings

    def _record(self, operation: str) -> None:
        if not self.available:
            raise StoreUnavailableError(f"store unavailable during {operation}")
        self.operations.append(operation)

    def get_user(self, user_id: str) -> User | None:
        return self._users.get(user_id)

    def get_request(self, request_id: str) -> LeaveRequest | None:
        return self._requests.get(request_id)

    @property
    def departments(self) -> list[str]:
        return list(self._departments)

    async def ping(self) -> None:
        self._record("ping")

    async def fetch_all(self) -> StoreSnapshot:
        self._record("fetch_all")
        requests = sorted(self._requests.values(), key=lambda r: r.created_at, reverse=True)
        return StoreSnapshot(users=list(self._users.values()), requests=requests)

    async def fetch_departments(self) -> list[str]:
        self._record("fetch_departments")
        return list(self._departments)

    async def fetch_permissions(self) -> RolePermissions | None:
        self._record("fetch_permissions")
        if self._permissions is None:
            return None
        return {role: dict(features) for role, features in self._permissions.items()}

    async def fetch_settings(self) -> LeaveSettings | None:
        self._record("fetch_settings")
        return self._settings

    async def insert_user(self, user: User) -> None:
        self._record("insert_user")
        self._users[user.id] = user

    async def update_user(self, user_id: str, changes: dict[str, Any]) -> None:
        self._record("update_user")
        user = self._users.get(user_id)
        if user is not None:
            self._users[user_id] = user.model_copy(update=changes)

    async def delete_user(self, user_id: str) -> None:
        self._record("delete_user")
        self._users.pop(user_id, None)

    async def insert_leave_request(self, request: LeaveRequest) -> None:
        self._record("insert_leave_request")
        self._requests[request.id] = request

    async def update_leave_status(self, request_id: str, status: LeaveStatus) -> None:
        self._record("update_leave_status")
        request = self._requests.get(request_id)
        if request is not None:
            self._requests[request_id] = request.model_copy(update={"status": status})

    async def delete_leave_request(self, request_id: str) -> None:
        self._record("delete_leave_request")
        self._requests.pop(request_id, None)

    async def insert_department(self, name: str) -> None:
        self._record("insert_department")
        if name not in self._departments:
            self._departments.append(name)

    async def rename_department(self, old_name: str, new_name: str) -> None:
        self._record("rename_department")
        self._departments = [new_name if d == old_name else d for d in self._departments]
        for user_id, user in self._users.items():
            if user.department == old_name:
                self._users[user_id] = user.model_copy(update={"department": new_name})
        for request_id, request in self._requests.items():
            if request.department == old_name:
                self._requests[request_id] = request.model_copy(update={"department": new_name})

    async def delete_department(self, name: str) -> None:
        self._record("delete_department")
        self._departments = [d for d in self._departments if d != name]

    async def upsert_permission(self, role: Role, feature: AppFeature, allowed: bool) -> None:
        self._record("upsert_permission")
        if self._permissions is None:
            self._permissions = {}
        self._permissions.setdefault(role, {})[feature] = allowed

    async def upsert_settings(self, annual_leave_limit: int, public_holiday_count: int) -> None:
        self._record("upsert_settings")
        self._settings = LeaveSettings(
            annual_leave_limit=annual_leave_limit,
            public_holiday_count=public_holiday_count,
        )
