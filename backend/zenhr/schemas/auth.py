from __future__ import annotations

from pydantic import BaseModel

from zenhr.schemas.user import UserResponse


class LoginPayload(BaseModel):
    """Credentials for the plain username/password match."""

    username: str
    password: str


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse
