"""
Centralized database layer.

Exposes the session helpers used by the API and background tasks. Entities live in
``streamo.core.database.entities`` and data access in ``streamo.core.database.repositories``.
"""

from .base import Base, new_id, to_naive_utc, utc_now
from .session import async_session_maker, engine, get_session, get_session_factory, init_db
from .utils import create_all, create_engine, create_sessionmaker

__all__ = [
    "Base",
    "async_session_maker",
    "create_all",
    "create_engine",
    "create_sessionmaker",
    "engine",
    "get_session",
    "get_session_factory",
    "init_db",
    "new_id",
    "to_naive_utc",
    "utc_now",
]
