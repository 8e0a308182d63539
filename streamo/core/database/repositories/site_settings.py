"""
Site settings repository.
"""

from __future__ import annotations

from sqlmodel.ext.asyncio.session import AsyncSession

from ..entities.site_settings import SINGLETON_ID, SiteSetting
from .base import AsyncBaseRepository


class SiteSettingRepository(AsyncBaseRepository[SiteSetting]):
    """Repository for the site settings singleton."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, SiteSetting)

    async def get_current(self) -> SiteSetting:
        """Return the stored settings, or an unsaved row holding the defaults."""
        current = await self.get_by_id(SINGLETON_ID)
        return current if current is not None else SiteSetting()

    async def save(self, **changes) -> SiteSetting:
        """Apply ``changes`` to the singleton, creating it on first write."""
        current = await self.get_by_id(SINGLETON_ID)
        if current is None:
            current = SiteSetting(**changes)
            return await self.create(current)
        for key, value in changes.items():
            setattr(current, key, value)
        return await self.update(current)
