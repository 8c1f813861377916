import contextlib

import pytest

from eventrsvp.routers.healthz import router as healthz_router
from eventrsvp.routers.healthz.router import check_database, get_database_check


@pytest.mark.asyncio
async def test_health_check(client):
    """Test the health check endpoint returns healthy status."""
    response = await client.get("/healthz/")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["database"] == "ok"
    assert data["version"] == "0.1.0"


@pytest.mark.asyncio
async def test_health_check_database_down(client_factory):
    async def _database_down() -> bool:
        return False

    async with client_factory({get_database_check: lambda: _database_down}) as client:
        response = await client.get("/healthz/")

    assert response.status_code == 200
    assert response.json() == {"status": "degraded", "database": "unavailable", "version": "0.1.0"}


@pytest.mark.asyncio
async def test_root_endpoint(client):
    """Test the root endpoint returns welcome message."""
    response = await client.get("/")

    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Welcome to the Event RSVP API"


class UnreachableEngine:
    def __init__(self, error: Exception):
        self.error = error

    @contextlib.asynccontextmanager
    async def connect(self):
        raise self.error
        yield


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [ConnectionRefusedError(111, "Connect call failed"), OSError("Name or service not known")],
)
async def test_check_database_reports_unreachable_server(monkeypatch, error):
    monkeypatch.setattr(healthz_router, "engine", UnreachableEngine(error))

    assert await check_database() is False
