from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING
from zoneinfo import ZoneInfo

from fastapi import FastAPI

from zenhr.api.health import router as health_router
from zenhr.api.router import api_router
from zenhr.config import get_settings
from zenhr.db import dispose_engine, get_session_factory
from zenhr.exceptions import setup_exception_handlers
from zenhr.middleware import setup_middleware
from zenhr.services.cache import LocalCache
from zenhr.services.ledger import LeaveLedger
from zenhr.services.notifier import SheetsNotifier
from zenhr.services.session import SessionRegistry
from zenhr.services.sql_store import SqlLeaveStore
from zenhr.services.store import InMemoryLeaveStore

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from zenhr.config import Settings
    from zenhr.services.store import LeaveStore

logger = logging.getLogger(__name__)


def build_ledger(settings: Settings, notifier: SheetsNotifier | None = None) -> LeaveLedger:
    """Wire a ledger to the configured store, local cache and webhook."""
    store: LeaveStore
    if settings.database_url:
        store = SqlLeaveStore(get_session_factory())
    else:
        logger.warning("DATABASE_URL is not set; using the in-memory store")
        store = InMemoryLeaveStore()

    return LeaveLedger(
        store,
        LocalCache(settings.cache_path),
        notifier,
        store_timeout=settings.store_timeout_seconds,
        webhook_url=settings.webhook_url,
        tz=ZoneInfo(settings.timezone),
        sessions=SessionRegistry(settings.jwt_secret, settings.session_ttl_hours),
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan manager for startup and shutdown."""
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    logger.info("Starting %s v%s [%s]", settings.app_name, settings.app_version, settings.environment)

    notifier = SheetsNotifier(timeout=settings.webhook_timeout_seconds)
    ledger = build_ledger(settings, notifier)
    await ledger.load()
    app.state.ledger = ledger
    try:
        yield
    finally:
        await ledger.drain_notifications()
        await notifier.aclose()
        await dispose_engine()
        logger.info("Shutting down %s", settings.app_name)


def create_app() -> FastAPI:
    """Application factory."""
    settings = get_settings()

    application = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan,
        docs_url="/docs" if settings.environment != "production" else None,
        redoc_url="/redoc" if settings.environment != "production" else None,
    )

    setup_middleware(application, settings)
    setup_exception_handlers(application)

    application.include_router(health_router)
    application.include_router(api_router)

    return application


app = create_app()
