"""
Shared fixtures: an in-memory SQLite store seeded with two organizations,
and an HTTP client bound to the ASGI app.
"""

import os

os.environ.setdefault("PM_DATABASE_URL", "sqlite+aiosqlite://")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

import app.models  # noqa: F401
from app.core import database
from app.scripts.seed_dev_data import seed_data


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine, monkeypatch):
    """Point the app's session factory at the test engine."""
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    monkeypatch.setattr(database, "async_session_factory", factory)
    return factory


@pytest.fixture
async def session(session_factory):
    async with session_factory() as s:
        yield s


@pytest.fixture
async def api_keys(session) -> dict[str, str]:
    """Seed Acme and Globex; returns plaintext API keys by org name."""
    keys = await seed_data(session)
    await session.commit()
    return keys


@pytest.fixture
async def client(session_factory):
    from app.main import app

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def acme_headers(api_keys) -> dict[str, str]:
    return {"Authorization": f"Bearer {api_keys['Acme']}"}


@pytest.fixture
def globex_headers(api_keys) -> dict[str, str]:
    return {"Authorization": f"Bearer {api_keys['Globex']}"}
