"""Shared test fixtures.

Tests run against a throwaway SQLite database (aiosqlite) per test, created
from the ORM metadata. Redis is not initialized: rate limiting passes
requests through and reward broadcasts are skipped unless a test passes a
fake client.
"""

from __future__ import annotations

import uuid
from collections.abc import AsyncGenerator
from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from sizemissions.auth.jwt import create_access_token
from sizemissions.database import close_db, get_engine, get_session, init_db
from sizemissions.db.models import Base, Profile
from sizemissions.main import create_app
from sizemissions.missions.seed import seed_missions


@pytest_asyncio.fixture
async def database(tmp_path) -> AsyncGenerator[None, None]:
    """Fresh SQLite database with all tables created."""
    await init_db(f"sqlite+aiosqlite:///{tmp_path / 'missions.db'}")
    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    await close_db()


@pytest_asyncio.fixture
async def db_session(database: None) -> AsyncGenerator[AsyncSession, None]:
    """Direct database session for service calls and assertions."""
    async for session in get_session():
        yield session
        break


@pytest_asyncio.fixture
async def seeded_db(db_session: AsyncSession) -> AsyncSession:
    """Session over a database with the mission catalog seeded."""
    await seed_missions(db_session)
    return db_session


async def create_profile(db: AsyncSession, locale: str = "en") -> Profile:
    profile = Profile(id=str(uuid.uuid4()), display_name="Tester", locale=locale)
    db.add(profile)
    await db.commit()
    return profile


@pytest_asyncio.fixture
async def profile(seeded_db: AsyncSession) -> Profile:
    return await create_profile(seeded_db)


@pytest.fixture
def fake_redis() -> AsyncMock:
    """Stand-in for redis.asyncio.Redis that records publishes."""
    redis = AsyncMock()
    redis.publish = AsyncMock(return_value=1)
    return redis


@pytest.fixture
def now() -> datetime:
    return datetime(2026, 6, 15, 12, 0, tzinfo=timezone.utc)


@pytest_asyncio.fixture
async def client(seeded_db: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client over the app, sharing the seeded test database."""
    app = create_app()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def authed_client(client: AsyncClient, profile: Profile) -> AsyncClient:
    """Client carrying a bearer token for `profile`."""
    client.headers["Authorization"] = f"Bearer {create_access_token(profile.id)}"
    return client
