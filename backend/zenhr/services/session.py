"""Per-client login sessions for the HTTP surface.

Access tokens are signed JWTs. The registry also keeps the hash of every
token it issued, so logout and user deletion revoke tokens before they
expire.
"""

from __future__ import annotations

import hashlib
import logging
import secrets
import uuid
from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

logger = logging.getLogger(__name__)

_TOKEN_TYPE = "access"


def _hash_token(token: str) -> str:
    return hashlib.sha256(token.encode()).hexdigest()


class SessionRegistry:
    """Issues, resolves and revokes bearer tokens mapped to user ids.

    An empty ``secret`` gets a random per-process key, so tokens do not
    survive a restart.
    """

    def __init__(self, secret: str = "", ttl_hours: float = 12.0, algorithm: str = "HS256") -> None:
        self._secret = secret or secrets.token_urlsafe(32)
        self._ttl = timedelta(hours=ttl_hours)
        self._algorithm = algorithm
        self._active: dict[str, str] = {}

    def __len__(self) -> int:
        return len(self._active)

    def issue(self, user_id: str) -> str:
        payload = {
            "sub": user_id,
            "type": _TOKEN_TYPE,
            "jti": uuid.uuid4().hex,
            "exp": datetime.now(UTC) + self._ttl,
        }
        token = jwt.encode(payload, self._secret, algorithm=self._algorithm)
        self._active[_hash_token(token)] = user_id
        return token

    def resolve(self, token: str) -> str | None:
        """Return the user id behind a live token, or None."""
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except JWTError:
            logger.debug("Rejected undecodable or expired token")
            return None
        if payload.get("type") != _TOKEN_TYPE:
            return None
        user_id = self._active.get(_hash_token(token))
        if user_id is None or user_id != payload.get("sub"):
            return None
        return user_id

    def revoke(self, token: str) -> None:
        self._active.pop(_hash_token(token), None)

    def revoke_user(self, user_id: str) -> int:
        """Drop every token of a user. Returns how many were dropped."""
        hashes = [h for h, uid in self._active.items() if uid == user_id]
        for token_hash in hashes:
            del self._active[token_hash]
        return len(hashes)
