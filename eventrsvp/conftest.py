import contextlib

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from eventrsvp.events.repository import orm_models as _event_models  # noqa: F401
from eventrsvp.guests.repository import orm_models as _guest_models  # noqa: F401
from eventrsvp.main import app
from eventrsvp.models import BaseModel
from eventrsvp.notifications.mail import orm_models as _email_models  # noqa: F401
from eventrsvp.routers.healthz.router import get_database_check

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
def client_factory():
    """
    Build an AsyncClient against the app with dependency overrides applied.

    Usage:
        async with client_factory({get_rsvp_read_model: lambda: read_model}) as client:
            ...
    """

    @contextlib.asynccontextmanager
    async def _factory(overrides: dict | None = None):
        app.dependency_overrides.update(overrides or {})
        transport = ASGITransport(app=app)
        try:
            async with AsyncClient(transport=transport, base_url="http://test") as client:
                yield client
        finally:
            app.dependency_overrides.clear()

    return _factory


@pytest.fixture
async def client(client_factory):
    """Plain client; the health check reports a reachable database."""

    async def _database_ok() -> bool:
        return True

    async with client_factory({get_database_check: lambda: _database_ok}) as ac:
        yield ac


@pytest.fixture
async def db_engine():
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def db_session(db_engine) -> AsyncSession:
    """One session per test over a fresh in-memory database."""
    session_factory = async_sessionmaker(db_engine, expire_on_commit=False)
    async with session_factory() as session:
        yield session
