"""
Global database session and engine management.

This module manages the global AsyncEngine and async_sessionmaker instances
that are used throughout the application for database access.
"""

from __future__ import annotations

from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import async_sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from streamo.core.logging_config import get_logger
from streamo.server.core.config import settings

from .seed import ensure_bootstrap_admin
from .utils import create_all, create_engine, create_sessionmaker

logger = get_logger(__name__)

# Create global engine and session factory
engine = create_engine(settings.database.url, echo=settings.database.echo)
async_session_maker = create_sessionmaker(engine)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency generator for database sessions.

    Yields:
        AsyncSession: An asynchronous SQLModel session.
    """
    async with async_session_maker() as session:
        yield session


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """
    Dependency returning the session factory.

    Background tasks outlive the request session and open their own sessions from it.
    """
    return async_session_maker


async def init_db() -> None:
    """
    Initialize the database.

    Creates all tables when ``DATABASE__CREATE_ALL`` is set; otherwise the schema
    is expected to come from the Alembic migrations. Then makes sure the
    bootstrap superadmin exists when one is configured.
    """
    if settings.database.create_all:
        await create_all(engine)
        logger.info("Database tables created")
    else:
        logger.info("Skipping create_all; schema is managed by Alembic migrations")
    await ensure_bootstrap_admin(async_session_maker, settings.auth)
