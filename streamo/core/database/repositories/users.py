"""
User repository.

Data access for accounts: lookup by email, the admin user table and the
owner list used by royalty reconciliation.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..entities.users import User
from .base import AsyncBaseRepository, AsyncQueryBuilder

STAFF_ROLES = ("superadmin", "admin")


class UserRepository(AsyncBaseRepository[User]):
    """Repository for user data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, User)

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get a user by email (case-insensitive)."""
        stmt = select(User).where(User.email == email.strip().lower())
        result = await self.session.exec(stmt)
        return result.first()

    async def search(
        self,
        *,
        role: Optional[str] = None,
        is_approved: Optional[bool] = None,
        term: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Tuple[Sequence[User], int]:
        """Filter users for the admin table, newest first.

        Args:
            role: Exact role filter
            is_approved: Approval state filter
            term: Substring matched against name and email
            limit: Page size
            offset: Rows to skip

        Returns:
            Tuple of (page of users, total matching)
        """
        stmt = select(User)
        stmt = AsyncQueryBuilder.apply_filters(stmt, User, {"role": role, "is_approved": is_approved})
        stmt = AsyncQueryBuilder.apply_search(stmt, [User.name, User.email], term)
        stmt = stmt.order_by(User.created_at.desc())  # type: ignore[attr-defined]
        return await self.paginate(stmt, limit, offset)

    async def list_catalogue_owners(self) -> List[User]:
        """Non-staff users in creation order."""
        stmt = (
            select(User)
            .where(User.role.notin_(STAFF_ROLES))  # type: ignore[attr-defined]
            .order_by(User.created_at, User.id)
        )
        result = await self.session.exec(stmt)
        return list(result.all())

    async def list_invited_by(self, inviter_id: str) -> List[User]:
        """Users that registered with one of ``inviter_id``'s invitation codes."""
        stmt = select(User).where(User.invited_by == inviter_id).order_by(User.created_at.desc())  # type: ignore[attr-defined]
        result = await self.session.exec(stmt)
        return list(result.all())

    async def get_many(self, user_ids: Sequence[str]) -> dict[str, User]:
        """Fetch users by id, keyed by id."""
        ids = {user_id for user_id in user_ids if user_id}
        if not ids:
            return {}
        result = await self.session.exec(select(User).where(User.id.in_(ids)))  # type: ignore[attr-defined]
        return {user.id: user for user in result.all()}
