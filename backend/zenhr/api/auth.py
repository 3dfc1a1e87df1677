from __future__ import annotations

from fastapi import APIRouter, status

from zenhr.api.deps import BearerTokenDep, CurrentUserDep, LedgerDep
from zenhr.exceptions import NotAuthenticatedError
from zenhr.schemas.auth import LoginPayload, LoginResponse
from zenhr.schemas.user import User, UserResponse

auth_router = APIRouter(prefix="/auth", tags=["auth"])


def user_response(user: User) -> UserResponse:
    """Map a user to its public schema, dropping credentials."""
    return UserResponse.model_validate(user.model_dump(exclude={"password"}))


@auth_router.post("/login", response_model=LoginResponse)
async def login(payload: LoginPayload, ledger: LedgerDep) -> LoginResponse:
    """Log in with a plain username/password match and open a session.

    The returned token identifies this client only; send it back as
    ``Authorization: Bearer <token>``.
    """
    token = await ledger.open_session(payload.username, payload.password)
    if token is None:
        raise NotAuthenticatedError("Invalid username or password")
    user = ledger.resolve_session(token)
    if user is None:
        raise NotAuthenticatedError()
    return LoginResponse(access_token=token, user=user_response(user))


@auth_router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(token: BearerTokenDep, ledger: LedgerDep) -> None:
    """Revoke the caller's session token."""
    await ledger.close_session(token)


@auth_router.get("/me", response_model=UserResponse)
async def me(user: CurrentUserDep) -> UserResponse:
    """Return the user behind the session token."""
    return user_response(user)
