import logging
from typing import Literal

from fastapi import APIRouter
from pydantic import BaseModel

from zenhr.api.deps import LedgerDep
from zenhr.config import get_settings

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: Literal["ok", "degraded", "error"]
    version: str
    environment: str


@router.get("/health", response_model=HealthResponse)
async def health(ledger: LedgerDep) -> HealthResponse:
    """Return the health status of the API service.

    The service keeps working on its local cache when the store is down, so
    an unreachable store reports ``degraded`` rather than ``error``.
    """
    settings = get_settings()
    status: Literal["ok", "degraded", "error"] = "ok"

    if not await ledger.ping_store():
        logger.warning("Health check: remote store unreachable")
        status = "degraded"

    return HealthResponse(
        status=status,
        version=settings.app_version,
        environment=settings.environment,
    )
