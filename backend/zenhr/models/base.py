from __future__ import annotations

import uuid
from datetime import UTC, datetime

import sqlalchemy as sa
from sqlmodel import Field, SQLModel


def new_id() -> str:
    """Generate a new string identifier (UUID v4)."""
    return str(uuid.uuid4())


def now_utc() -> datetime:
    """Return the current UTC time."""
    return datetime.now(UTC)


class StringIDBase(SQLModel):
    """Base model with a string primary key.

    Identifiers are generated by the ledger before the row reaches the store,
    so rows created offline keep the same id once they are synced.
    """

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)


class TimestampMixin(SQLModel):
    """Mixin that adds a created_at timestamp."""

    created_at: datetime = Field(
        default_factory=now_utc,
        sa_type=sa.DateTime(timezone=True),  # ty: ignore[invalid-argument-type]
        sa_column_kwargs={"server_default": sa.func.now()},
    )
