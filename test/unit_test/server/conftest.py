"""Shared fixtures for server tests.

Every test gets its own in-memory SQLite database, an ``AsyncClient`` wired to
the app with the session dependencies overridden, and an upload root under
``tmp_path``.
"""

from __future__ import annotations

from typing import AsyncGenerator, Awaitable, Callable, Dict

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlmodel.ext.asyncio.session import AsyncSession
from sqlmodel.pool import StaticPool

from streamo.core.database import create_all, create_sessionmaker, get_session, get_session_factory
from streamo.core.database.base import utc_now
from streamo.core.database.entities.users import User
from streamo.core.security import create_access_token, hash_password
from streamo.server.core.config import settings

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
TEST_PASSWORD = "secret123"

UserFactory = Callable[..., Awaitable[User]]


@pytest_asyncio.fixture
async def test_engine():
    """Create a fresh in-memory database for each test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_all(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine) -> async_sessionmaker[AsyncSession]:
    return create_sessionmaker(test_engine)


@pytest_asyncio.fixture(name="session")
async def session_fixture(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture(autouse=True)
def upload_root(tmp_path, monkeypatch):
    """Store uploads under the test's temporary directory."""
    root = tmp_path / "uploads"
    monkeypatch.setattr(settings.uploads, "root", str(root))
    return root


@pytest_asyncio.fixture(name="client")
async def client_fixture(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client with overridden database dependencies."""
    from streamo.server.main import app

    async def get_session_override() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = get_session_override
    app.dependency_overrides[get_session_factory] = lambda: session_factory

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def make_user(session_factory) -> UserFactory:
    """Factory persisting a user; defaults to an approved, active artist."""

    async def _make(
        name: str = "Test Artist",
        email: str = "artist@example.com",
        role: str = "artist",
        is_approved: bool = True,
        is_active: bool = True,
        split: float = 100.0,
        password: str = TEST_PASSWORD,
        **fields,
    ) -> User:
        async with session_factory() as session:
            user = User(
                name=name,
                email=email,
                role=role,
                is_approved=is_approved,
                is_active=is_active,
                split=split,
                password_hash=hash_password(password),
                last_password_changed=utc_now(),
                **fields,
            )
            session.add(user)
            await session.commit()
            await session.refresh(user)
            return user

    return _make


def auth_headers(user: User) -> Dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest_asyncio.fixture
async def superadmin(make_user) -> User:
    return await make_user(name="Super Admin", email="super@example.com", role="superadmin")


@pytest_asyncio.fixture
async def admin(make_user) -> User:
    return await make_user(name="Staff Admin", email="admin@example.com", role="admin")


@pytest_asyncio.fixture
async def artist(make_user) -> User:
    return await make_user(name="Test Artist", email="artist@example.com", role="artist")


@pytest_asyncio.fixture
async def other_artist(make_user) -> User:
    return await make_user(name="Other Artist", email="other@example.com", role="artist")


@pytest_asyncio.fixture
async def labelowner(make_user) -> User:
    return await make_user(name="Label Owner", email="label@example.com", role="labelowner")


@pytest.fixture
def admin_headers(admin) -> Dict[str, str]:
    return auth_headers(admin)


@pytest.fixture
def superadmin_headers(superadmin) -> Dict[str, str]:
    return auth_headers(superadmin)


@pytest.fixture
def artist_headers(artist) -> Dict[str, str]:
    return auth_headers(artist)


@pytest.fixture
def other_headers(other_artist) -> Dict[str, str]:
    return auth_headers(other_artist)


@pytest.fixture
def labelowner_headers(labelowner) -> Dict[str, str]:
    return auth_headers(labelowner)


@pytest.fixture
def headers_for() -> Callable[[User], Dict[str, str]]:
    return auth_headers


@pytest.fixture
def add_rows(session_factory) -> Callable[..., Awaitable[list]]:
    """Persist arbitrary entities and return them refreshed."""

    async def _add(*rows):
        async with session_factory() as session:
            session.add_all(rows)
            await session.commit()
            for row in rows:
                await session.refresh(row)
        return list(rows)

    return _add
