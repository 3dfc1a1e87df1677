from __future__ import annotations

from unittest.mock import AsyncMock

from httpx import ASGITransport, AsyncClient

from zenhr.api.deps import get_ledger
from zenhr.main import app
from zenhr.services.ledger import LeaveLedger
from zenhr.services.store import InMemoryLeaveStore


async def test_health_returns_200(async_client: AsyncClient) -> None:
    response = await async_client.get("/health")
    assert response.status_code == 200


async def test_health_response_body(async_client: AsyncClient) -> None:
    response = await async_client.get("/health")
    data = response.json()
    assert data["status"] == "ok"
    assert data["version"] == "0.1.0"
    assert data["environment"] == "development"


async def test_health_response_schema(async_client: AsyncClient) -> None:
    response = await async_client.get("/health")
    data = response.json()
    assert set(data.keys()) == {"status", "version", "environment"}
    assert data["status"] in ("ok", "degraded", "error")


async def test_health_degraded_when_store_offline(async_client: AsyncClient, store: InMemoryLeaveStore) -> None:
    store.available = False
    response = await async_client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "degraded"


async def test_health_degraded_on_store_error() -> None:
    """GET /health reports degraded when the store ping raises."""
    store = InMemoryLeaveStore()
    store.ping = AsyncMock(side_effect=ConnectionError("store unreachable"))  # type: ignore[method-assign]
    ledger = LeaveLedger(store)

    app.dependency_overrides[get_ledger] = lambda: ledger
    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.get("/health")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 200
    assert response.json()["status"] == "degraded"


async def test_health_without_ledger_is_unavailable() -> None:
    """Before the lifespan has run there is no ledger to serve requests."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.get("/health")
    assert response.status_code == 503
