"""
Test Fixtures
=============

An in-memory SQLite database replaces PostgreSQL and a dict-backed fake
replaces Redis. Requests go through the real ASGI app (middleware
included) via httpx.
"""

import time
from typing import AsyncGenerator, Optional
from unittest.mock import patch

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from deskflow.db.base import Base
from deskflow.db.session import get_db
from deskflow.main import app
from deskflow.models.catalog import ClientType, Currency, ProjectType, Status
import deskflow.models  # noqa: F401

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

DEFAULT_PASSWORD = "secret123"


class FakeRedis:
    """Just enough of redis.asyncio.Redis for CacheManager and RateLimiter."""

    def __init__(self):
        self.store: dict[str, str] = {}
        self.expiry: dict[str, float] = {}

    def _drop_if_expired(self, key: str) -> None:
        expires_at = self.expiry.get(key)
        if expires_at is not None and expires_at <= time.time():
            self.store.pop(key, None)
            self.expiry.pop(key, None)

    async def get(self, key: str) -> Optional[str]:
        self._drop_if_expired(key)
        return self.store.get(key)

    async def setex(self, key: str, ttl: int, value) -> bool:
        self.store[key] = str(value)
        self.expiry[key] = time.time() + ttl
        return True

    async def incr(self, key: str) -> int:
        self._drop_if_expired(key)
        value = int(self.store.get(key, 0)) + 1
        self.store[key] = str(value)
        return value

    async def expire(self, key: str, seconds: int) -> bool:
        if key not in self.store:
            return False
        self.expiry[key] = time.time() + seconds
        return True

    async def ttl(self, key: str) -> int:
        self._drop_if_expired(key)
        if key not in self.store:
            return -2
        expires_at = self.expiry.get(key)
        if expires_at is None:
            return -1
        return max(int(expires_at - time.time()), 0)

    async def delete(self, *keys: str) -> int:
        removed = 0
        for key in keys:
            if self.store.pop(key, None) is not None:
                removed += 1
            self.expiry.pop(key, None)
        return removed


async def _seed_catalogs(session: AsyncSession) -> None:
    session.add_all([
        Status(status_id=1, name="Not started", color="#9CA3AF"),
        Status(status_id=2, name="In progress", color="#3B82F6"),
        Status(status_id=3, name="Paused", color="#F59E0B"),
        Status(status_id=4, name="Completed", color="#10B981"),
        Status(status_id=5, name="Cancelled", color="#EF4444"),
        Currency(currency_id=1, code="USD", name="US Dollar", symbol="$"),
        Currency(currency_id=2, code="EUR", name="Euro", symbol="€"),
        ClientType(client_type_id=1, name="Company"),
        ClientType(client_type_id=2, name="Individual"),
        ProjectType(project_type_id=1, name="Web development", is_active=True),
    ])
    await session.commit()


@pytest_asyncio.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Fresh schema with seeded catalogs for every test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)
    async with factory() as session:
        await _seed_catalogs(session)

    yield factory

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """A session for calling services directly."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest_asyncio.fixture
async def client(session_factory, fake_redis) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to the app with the test database and cache."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def fake_get_redis():
        return fake_redis

    app.dependency_overrides[get_db] = override_get_db
    with patch("deskflow.services.cache.get_redis", fake_get_redis), \
            patch("deskflow.core.rate_limit.get_redis", fake_get_redis):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac
    app.dependency_overrides.clear()


async def register(
    client: AsyncClient,
    email: str = "ana@example.com",
    password: str = DEFAULT_PASSWORD,
    display_name: str = "Ana",
):
    """Register through the API; the client keeps the session cookie."""
    return await client.post(
        "/api/v1/auth/register",
        json={"email": email, "password": password, "displayName": display_name},
    )


@pytest_asyncio.fixture
async def auth_client(client: AsyncClient) -> AsyncClient:
    """Client already signed in as a fresh account."""
    response = await register(client)
    assert response.status_code == 201
    return client


async def create_client_record(client: AsyncClient, name: str = "Acme", **fields) -> dict:
    response = await client.post("/api/v1/clients", json={"name": name, **fields})
    assert response.status_code == 201, response.text
    return response.json()["data"]


async def create_project_record(
    client: AsyncClient,
    client_id: str,
    name: str = "Website",
    **fields,
) -> dict:
    response = await client.post(
        "/api/v1/projects",
        json={"name": name, "clientId": client_id, **fields},
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


async def create_task_record(
    client: AsyncClient,
    project_id: str,
    name: str = "Task",
    **fields,
) -> dict:
    response = await client.post(
        f"/api/v1/projects/{project_id}/tasks",
        json={"name": name, **fields},
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]
