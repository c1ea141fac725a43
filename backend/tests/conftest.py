"""Pytest configuration and shared fixtures for API tests."""

import os
import random

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import delete

# Set test DB before app imports so config/engine use it
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test_rotation.db")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DEFAULT_RATE_LIMIT", "100000/minute")

from workout_rotation.api.deps import get_rng
from workout_rotation.core.auth import create_access_token
from workout_rotation.db.base import Base
from workout_rotation.db.session import async_session_maker, engine, init_db
from workout_rotation.main import app
from workout_rotation.models.user import User
from workout_rotation.services import catalog

pytest_plugins = ["pytest_asyncio"]

SEED = 20260419


@pytest_asyncio.fixture
async def ensure_db():
    """Create tables (no-op when they exist)."""
    await init_db()
    yield


async def _delete_all():
    """Delete all rows in reverse dependency order so tests start clean."""
    async with engine.begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            await conn.execute(delete(table))


@pytest_asyncio.fixture
async def client(ensure_db):
    """Yield AsyncClient with a seeded random source so selection is reproducible."""
    app.dependency_overrides[get_rng] = lambda: random.Random(SEED)
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
    app.dependency_overrides.pop(get_rng, None)


@pytest_asyncio.fixture
async def clean_db(ensure_db):
    """Empty all tables so the next test has a clean DB."""
    await _delete_all()
    yield


async def _create_user(email: str) -> tuple[int, str, str]:
    async with async_session_maker() as session:
        user = User(email=email, name=email.split("@")[0])
        session.add(user)
        await session.commit()
        await session.refresh(user)
        return user.id, user.email, create_access_token(user.id, user.email)


@pytest_asyncio.fixture
async def test_user(clean_db, client):
    """Create a user via DB (committed) and return (user_id, email, access_token)."""
    return await _create_user("test@test.com")


@pytest_asyncio.fixture
async def other_user(test_user):
    return await _create_user("other@test.com")


@pytest.fixture
def auth_headers(test_user):
    """Return dict of Authorization header for test_user."""
    _, __, token = test_user
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def other_headers(other_user):
    _, __, token = other_user
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def add_exercises(test_user):
    """Factory: add exercises straight to the catalog of test_user; returns their ids in order.

    `await add_exercises(station, day_type, count, focus=None, prefix=None, **extra)`
    """
    user_id = test_user[0]

    async def _add(station, day_type, count, focus=None, prefix=None, **extra):
        prefix = prefix or f"{day_type} S{station} {focus or ''}".strip()
        ids = []
        async with async_session_maker() as session:
            for i in range(count):
                ex = await catalog.create_exercise(
                    session,
                    user_id,
                    name=f"{prefix} #{i + 1}",
                    station=station,
                    day_type=day_type,
                    focus=focus,
                    **extra,
                )
                ids.append(ex.id)
            await session.commit()
        return ids

    return _add
