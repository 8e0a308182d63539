"""
Startup seed data.

Public sign-up only creates artists and label owners, so the first staff
account is created here from the ``AUTH__BOOTSTRAP_ADMIN_*`` settings.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy.ext.asyncio import async_sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from streamo.core.logging_config import get_logger
from streamo.core.models.domain.enums import UserRole
from streamo.core.security import hash_password
from streamo.server.core.config import AuthConfig

from .base import utc_now
from .entities.users import User
from .repositories.users import UserRepository

logger = get_logger(__name__)


async def ensure_bootstrap_admin(
    session_factory: async_sessionmaker[AsyncSession], config: AuthConfig
) -> Optional[User]:
    """
    Create the bootstrap superadmin unless its email is already registered.

    Returns:
        The created user, or None when nothing was created
    """
    email = (config.bootstrap_admin_email or "").strip().lower()
    if not email or not config.bootstrap_admin_password:
        return None

    async with session_factory() as session:
        users = UserRepository(session)
        if await users.get_by_email(email) is not None:
            logger.debug(f"Bootstrap superadmin {email} already exists")
            return None
        user = await users.create(
            User(
                name=config.bootstrap_admin_name,
                email=email,
                password_hash=hash_password(config.bootstrap_admin_password),
                role=UserRole.superadmin.value,
                is_approved=True,
                last_password_changed=utc_now(),
            )
        )
    logger.info(f"Created bootstrap superadmin {email}")
    return user
