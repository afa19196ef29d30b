"""
Pytest fixtures for test database, client, stats client and seed data.

Every test gets a fresh in-memory SQLite database; the stats service is
replaced by the in-process client so hits can be inspected directly.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("STATS_DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("REDIS_ENABLED", "false")
os.environ.setdefault("STATS_CLIENT", "memory")

from datetime import datetime, timedelta
from typing import AsyncGenerator

import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from ewm.main import app
from ewm.db.base import Base
from ewm.db.session import get_db
from ewm.core.dates import DATE_FORMAT
from ewm.services.interfaces.memory_stats import InMemoryStatsClient
from ewm.services.stats_factory import get_stats_client
from ewm import models  # noqa: F401
from ewm_stats.db import Base as StatsBase, get_db as get_stats_db
from ewm_stats.main import app as stats_app
from ewm_stats import models as stats_models  # noqa: F401

TEST_DATABASE_URL = "sqlite+aiosqlite://"


def future(days: int = 30) -> str:
    return (datetime.now() + timedelta(days=days)).strftime(DATE_FORMAT)


def event_payload(category_id: int, **overrides) -> dict:
    payload = {
        "title": "Python Meetup",
        "annotation": "Monthly gathering of local Python developers",
        "description": "Talks, lightning talks and pizza for everyone who writes Python",
        "category": category_id,
        "eventDate": future(),
        "location": {"lat": 55.75, "lon": 37.62},
    }
    payload.update(overrides)
    return payload


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create tables on a private in-memory database, yield a session, dispose."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    await engine.dispose()


@pytest_asyncio.fixture
async def stats_client() -> InMemoryStatsClient:
    return InMemoryStatsClient()


@pytest_asyncio.fixture(scope="function")
async def client(
    db_session: AsyncSession, stats_client: InMemoryStatsClient
) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to the test session; commits or rolls back like get_db."""

    async def override_get_db():
        try:
            yield db_session
            await db_session.commit()
        except Exception:
            await db_session.rollback()
            raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_stats_client] = lambda: stats_client

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def make_user(client: AsyncClient):
    counter = {"n": 0}

    async def _make(name: str = "Test User") -> dict:
        counter["n"] += 1
        response = await client.post(
            "/admin/users", json={"name": name, "email": f"user{counter['n']}@example.com"}
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _make


@pytest_asyncio.fixture
async def category(client: AsyncClient) -> dict:
    response = await client.post("/admin/categories", json={"name": "Concerts"})
    assert response.status_code == 201, response.text
    return response.json()


@pytest_asyncio.fixture
async def initiator(make_user) -> dict:
    return await make_user("Initiator")


@pytest_asyncio.fixture
async def make_event(client: AsyncClient, initiator: dict, category: dict):
    """Create an event owned by `initiator`; published unless told otherwise."""

    async def _make(publish: bool = True, **overrides) -> dict:
        response = await client.post(
            f"/users/{initiator['id']}/events", json=event_payload(category["id"], **overrides)
        )
        assert response.status_code == 201, response.text
        event = response.json()
        if publish:
            response = await client.patch(
                f"/admin/events/{event['id']}", json={"stateAction": "PUBLISH_EVENT"}
            )
            assert response.status_code == 200, response.text
            event = response.json()
        return event

    return _make


@pytest_asyncio.fixture
async def pending_event(make_event) -> dict:
    return await make_event(publish=False)


@pytest_asyncio.fixture
async def published_event(make_event) -> dict:
    return await make_event()


@pytest_asyncio.fixture
async def stats_db() -> AsyncGenerator[AsyncSession, None]:
    """Private database for the stats service."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(StatsBase.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    await engine.dispose()


@pytest_asyncio.fixture
async def stats_transport(stats_db: AsyncSession) -> AsyncGenerator[ASGITransport, None]:
    """ASGI transport to the stats service app, backed by `stats_db`."""
    async def override_get_db():
        try:
            yield stats_db
            await stats_db.commit()
        except Exception:
            await stats_db.rollback()
            raise

    stats_app.dependency_overrides[get_stats_db] = override_get_db
    yield ASGITransport(app=stats_app)
    stats_app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def stats_api(stats_transport: ASGITransport) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(transport=stats_transport, base_url="http://stats") as ac:
        yield ac
