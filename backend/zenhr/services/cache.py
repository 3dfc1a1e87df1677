from __future__ import annotations

import logging
import os
from pathlib import Path

from pydantic import BaseModel, ValidationError

from zenhr.schemas.organization import LeaveSettings, RolePermissions
from zenhr.schemas.request import LeaveRequest
from zenhr.schemas.user import User

logger = logging.getLogger(__name__)


class CacheSnapshot(BaseModel):
    """Everything the ledger needs to start without the remote store.

    A ``None`` collection means it was never written, as opposed to empty.
    """

    users: list[User] | None = None
    requests: list[LeaveRequest] | None = None
    departments: list[str] | None = None
    permissions: RolePermissions | None = None
    settings: LeaveSettings | None = None
    current_user_id: str | None = None
    webhook_url: str | None = None


class LocalCache:
    """JSON snapshot of the ledger state on local disk."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def load(self) -> CacheSnapshot | None:
        """Read the snapshot. Missing or unreadable files yield None."""
        if not self.path.exists():
            return None
        try:
            return CacheSnapshot.model_validate_json(self.path.read_bytes())
        except (OSError, ValidationError):
            logger.warning("Ignoring unreadable local cache at %s", self.path, exc_info=True)
            return None

    def save(self, snapshot: CacheSnapshot) -> None:
        """Write the snapshot, replacing the previous file in one step."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(f"{self.path.name}.tmp")
        tmp_path.write_text(snapshot.model_dump_json(), encoding="utf-8")
        os.replace(tmp_path, self.path)
