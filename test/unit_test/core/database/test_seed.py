"""Unit tests for the bootstrap superadmin seed and ``init_db``."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

from streamo.core.database import session as session_module
from streamo.core.database.repositories.users import UserRepository
from streamo.core.database.seed import ensure_bootstrap_admin
from streamo.core.security import verify_password
from streamo.server.core.config import AuthConfig


async def test_creates_superadmin_once(in_memory_session_factory):
    config = AuthConfig(
        bootstrap_admin_email=" Root@Example.com ", bootstrap_admin_password="change-me", bootstrap_admin_name="Root"
    )

    created = await ensure_bootstrap_admin(in_memory_session_factory, config)
    assert created is not None
    assert (created.email, created.role, created.is_approved) == ("root@example.com", "superadmin", True)
    assert verify_password("change-me", created.password_hash)

    assert await ensure_bootstrap_admin(in_memory_session_factory, config) is None
    async with in_memory_session_factory() as session:
        _, total = await UserRepository(session).search()
    assert total == 1


async def test_skipped_without_credentials(in_memory_session_factory):
    assert await ensure_bootstrap_admin(in_memory_session_factory, AuthConfig()) is None
    assert await ensure_bootstrap_admin(in_memory_session_factory, AuthConfig(bootstrap_admin_email="a@b.co")) is None


async def test_init_db_respects_create_all_flag(monkeypatch):
    seed = AsyncMock()
    monkeypatch.setattr(session_module.settings.database, "create_all", False)
    with patch.object(session_module, "create_all", new=AsyncMock()) as create_all, patch.object(
        session_module, "ensure_bootstrap_admin", new=seed
    ):
        await session_module.init_db()
        create_all.assert_not_awaited()

        monkeypatch.setattr(session_module.settings.database, "create_all", True)
        await session_module.init_db()
        create_all.assert_awaited_once_with(session_module.engine)

    assert seed.await_count == 2
