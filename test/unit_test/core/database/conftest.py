"""Test configuration for database unit tests.

This module provides an in-memory SQLite engine and session for exercising the
repositories against a real schema, plus sample rows for the catalogue.
"""

from __future__ import annotations

from datetime import datetime
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine
from sqlmodel.ext.asyncio.session import AsyncSession
from sqlmodel.pool import StaticPool

from streamo.core.database import create_all, create_sessionmaker
from streamo.core.database.entities.users import User


@pytest_asyncio.fixture(scope="function")
async def in_memory_engine() -> AsyncGenerator:
    """Create in-memory SQLite engine for testing."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_all(engine)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture(scope="function")
def in_memory_session_factory(in_memory_engine):
    return create_sessionmaker(in_memory_engine)


@pytest_asyncio.fixture(scope="function")
async def in_memory_session(in_memory_session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create in-memory SQLite session for testing."""
    async with in_memory_session_factory() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def owner(in_memory_session) -> User:
    """A persisted, approved artist."""
    user = User(name="Owner", email="owner@example.com", password_hash="x", is_approved=True)
    in_memory_session.add(user)
    await in_memory_session.commit()
    await in_memory_session.refresh(user)
    return user


@pytest.fixture(scope="function")
def sample_transaction_data() -> dict:
    """Sample royalty transaction data for testing."""
    return {
        "transaction_id": "TRANS-upload-1",
        "title": "Night Drive",
        "artist": "Owner",
        "isrc": "US-ABC-24-00002",
        "service_type": "Spotify",
        "territory": "US",
        "quantity": 1200,
        "revenue_usd": 4.8,
        "transaction_date": datetime(2024, 3, 1),
    }
