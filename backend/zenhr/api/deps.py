from __future__ import annotations

from typing import TYPE_CHECKING, Annotated

from fastapi import Depends, Request, status

from zenhr.exceptions import AppError, NotAuthenticatedError
from zenhr.models.enums import AppFeature
from zenhr.schemas.user import User
from zenhr.services.ledger import LeaveLedger

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable


def get_ledger(request: Request) -> LeaveLedger:
    """Return the ledger created by the application lifespan."""
    ledger: LeaveLedger | None = getattr(request.app.state, "ledger", None)
    if ledger is None:
        raise AppError("Ledger is not initialised", status_code=status.HTTP_503_SERVICE_UNAVAILABLE)
    return ledger


LedgerDep = Annotated[LeaveLedger, Depends(get_ledger)]


def get_bearer_token(request: Request) -> str:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    scheme, _, token = request.headers.get("Authorization", "").partition(" ")
    if scheme.lower() != "bearer" or not token:
        raise NotAuthenticatedError()
    return token


BearerTokenDep = Annotated[str, Depends(get_bearer_token)]


async def get_current_user(token: BearerTokenDep, ledger: LedgerDep) -> User:
    """Require a live session token and return its user."""
    user = ledger.resolve_session(token)
    if user is None:
        raise NotAuthenticatedError()
    return user


CurrentUserDep = Annotated[User, Depends(get_current_user)]


def require_feature(feature: AppFeature) -> Callable[[LeaveLedger, User], Awaitable[User]]:
    """Build a dependency that checks the current user's role has ``feature``."""

    async def _check(ledger: LedgerDep, user: CurrentUserDep) -> User:
        if not ledger.has_permission(user.role, feature):
            raise AppError(f"{feature.value} permission required", status_code=status.HTTP_403_FORBIDDEN)
        return user

    return _check


RequesterDep = Annotated[User, Depends(require_feature(AppFeature.REQUEST_LEAVE))]
ApproverDep = Annotated[User, Depends(require_feature(AppFeature.APPROVE_LEAVE))]
SettingsManagerDep = Annotated[User, Depends(require_feature(AppFeature.MANAGE_SETTINGS))]
ReportViewerDep = Annotated[User, Depends(require_feature(AppFeature.VIEW_REPORTS))]
DashboardViewerDep = Annotated[User, Depends(require_feature(AppFeature.VIEW_DASHBOARD))]
