from __future__ import annotations

import asyncio
from logging.config import fileConfig
from typing import Literal

from alembic import context
from sqlalchemy import pool
from sqlalchemy.ext.asyncio import create_async_engine

from zenhr.config import get_settings
from zenhr.models import SQLModel

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# Every store table (users, leave requests, departments, permissions, settings).
target_metadata = SQLModel.metadata


def _database_url() -> str:
    url = get_settings().database_url
    if not url:
        msg = "DATABASE_URL must be set to run migrations"
        raise RuntimeError(msg)
    return url


def render_item(type_: str, obj: object, autogen_context: object) -> str | Literal[False]:
    """Render SQLModel string columns as plain SQLAlchemy strings."""
    if type_ == "type":
        from sqlmodel.sql.sqltypes import AutoString

        if isinstance(obj, AutoString):
            if obj.length:
                return f"sa.String(length={obj.length})"
            return "sa.String()"
    return False


def run_migrations_offline() -> None:
    """Emit SQL for the leave store schema without a live connection."""
    context.configure(
        url=_database_url(),
        target_metadata=target_metadata,
        render_item=render_item,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection: object) -> None:
    context.configure(
        connection=connection,  # type: ignore[arg-type]
        target_metadata=target_metadata,
        render_item=render_item,
        compare_type=True,
    )
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    """Migrate the leave store through the async driver."""
    connectable = create_async_engine(_database_url(), poolclass=pool.NullPool)
    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)
    await connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
