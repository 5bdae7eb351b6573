"""
FitGroup Backend — Test Configuration (conftest.py)
===================================================

What:  Shared pytest fixtures for the entire test suite.
Why:   Service tests run against a real (in-memory) database, so queries,
       constraints and eager loading are exercised as in production.
How:   Each test gets a fresh aiosqlite in-memory database. StaticPool keeps
       the single connection alive so every session sees the same tables.

Fixture Hierarchy (all function-scoped):
    engine ─┬── db_session: AsyncSession for service-level tests
            └── database ── test_client: HTTPX AsyncClient bound to a fresh app
    temp_storage: temporary upload directory
    sample_image_bytes: tiny JPEG payload
    make_group: helper that creates a group through GroupService
"""

import os
import tempfile
from typing import AsyncGenerator

# Override settings for testing BEFORE any app imports
# Settings are read once at import time
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="fitgroup_test_")
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

import fitgroup.models  # noqa: F401  (registers tables on Base.metadata)
from fitgroup.database import Base, Database
from fitgroup.schemas.group import GroupCreate
from fitgroup.services.group_service import GroupService

OWNER_PASSWORD = "ownerpass1"


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine) -> AsyncGenerator[AsyncSession, None]:
    """
    Session for service tests.

    Services only flush, so tests see their own writes without committing.
    """
    database = Database(engine)
    async with database.session_factory() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def database(engine) -> Database:
    return Database(engine)


@pytest_asyncio.fixture
async def test_client(database) -> AsyncGenerator[AsyncClient, None]:
    """
    HTTPX AsyncClient talking to an app bound to the test database.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from fitgroup.main import create_app

    app = create_app(database=database)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def temp_storage(tmp_path):
    storage_dir = tmp_path / "uploads"
    storage_dir.mkdir()
    return str(storage_dir)


@pytest.fixture
def sample_image_bytes():
    """Minimal JPEG: Start of Image (FFD8) + JFIF marker + End of Image (FFD9)."""
    return (
        b'\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00'
        b'\xff\xd9'
    )


@pytest.fixture
def make_group(db_session):
    """
    Factory creating a group (with owner) through the service.

    Usage:
        group = await make_group(name="Runners", tags=["run"])
    """

    async def _make_group(**overrides):
        payload = {
            "name": "Morning Runners",
            "goal_rep": 10,
            "owner_nickname": "alice",
            "owner_password": OWNER_PASSWORD,
            "tags": [],
        }
        payload.update(overrides)
        return await GroupService(db_session).create_group(GroupCreate(**payload))

    return _make_group
