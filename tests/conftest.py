"""
Shared test fixtures for the Pesagem test suite.

Each test gets a fresh in-memory SQLite database (aiosqlite + StaticPool)
and a fresh in-memory session store, both wired into the app through
dependency overrides.
"""

import os
import sys
from typing import AsyncGenerator

import pytest

# Ensure project root is importable
ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

# Override environment BEFORE importing application modules
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["SESSION_BACKEND"] = "memory"
os.environ["RATE_LIMIT_ENABLED"] = "false"

from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from pesagem.api.v1.deps import get_db, get_session_store
from pesagem.core.security import create_session_token, get_password_hash
from pesagem.db.base import Base
from pesagem.main import app
from pesagem.models.user import User
from pesagem.services.sessions import MemorySessionStore

TEST_PASSWORD = "secret123"
# Hashing is slow; every fixture user shares one hash.
_TEST_PASSWORD_HASH = get_password_hash(TEST_PASSWORD)


@pytest.fixture
async def test_engine():
    """A private in-memory database with all tables created."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def session_store() -> MemorySessionStore:
    return MemorySessionStore(ttl_seconds=3600)


@pytest.fixture
async def async_client(session_factory, session_store) -> AsyncGenerator[AsyncClient, None]:
    """Return a httpx AsyncClient wired to the app."""

    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_session_store] = lambda: session_store

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


# ── Users ───────────────────────────────────────────────────────────
@pytest.fixture
def make_user(session_factory):
    """Factory: insert a user directly and return it (detached, attributes loaded)."""
    counter = {"n": 0}

    async def _make_user(**fields) -> User:
        counter["n"] += 1
        values = {
            "cpf": f"{counter['n']:011d}",
            "hashed_password": _TEST_PASSWORD_HASH,
            "first_name": f"Worker{counter['n']}",
            "last_name": "Test",
            "is_admin": False,
            "work_type": "filetagem",
            "is_active": True,
        }
        values.update(fields)
        async with session_factory() as session:
            user = User(**values)
            session.add(user)
            await session.commit()
            await session.refresh(user)
            return user

    return _make_user


@pytest.fixture
async def admin_user(make_user) -> User:
    return await make_user(
        cpf="99999999999", first_name="Ana", last_name="Admin", is_admin=True, work_type=None
    )


@pytest.fixture
async def worker(make_user) -> User:
    return await make_user(cpf="11111111111", first_name="Bruno", work_type="filetagem")


@pytest.fixture
async def other_worker(make_user) -> User:
    return await make_user(cpf="22222222222", first_name="Carla", work_type="espinho")


@pytest.fixture
def auth_headers(session_store):
    """Factory: open a session for *user* and return a Bearer header for it."""

    async def _auth_headers(user: User) -> dict[str, str]:
        session_id = await session_store.create(user.id)
        return {"Authorization": f"Bearer {create_session_token(session_id)}"}

    return _auth_headers


@pytest.fixture
async def admin_headers(auth_headers, admin_user) -> dict[str, str]:
    return await auth_headers(admin_user)


@pytest.fixture
async def worker_headers(auth_headers, worker) -> dict[str, str]:
    return await auth_headers(worker)
