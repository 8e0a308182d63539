"""
Base repository interfaces and utilities.

This module provides the foundational repository patterns used across all
repository implementations in the database layer. Repositories wrap a SQLModel
``AsyncSession`` and commit after each write.
"""

from __future__ import annotations

from typing import Any, Dict, Generic, List, Optional, Sequence, Tuple, Type, TypeVar

from sqlalchemy import func, or_
from sqlmodel import SQLModel, select
from sqlmodel.ext.asyncio.session import AsyncSession

# Generic type for SQLModel entities
EntityType = TypeVar("EntityType", bound=SQLModel)


class AsyncBaseRepository(Generic[EntityType]):
    """Base async repository with common CRUD operations using SQLModel."""

    def __init__(self, session: AsyncSession, model: Type[EntityType]) -> None:
        """Initialize repository with async database session and SQLModel entity class.

        Args:
            session: Async SQLModel Session for database operations
            model: SQLModel entity class for this repository
        """
        self.session = session
        self.model = model

    async def create(self, entity: EntityType) -> EntityType:
        """Create a new entity record.

        Args:
            entity: SQLModel instance to persist

        Returns:
            Persisted entity with generated fields populated
        """
        self.session.add(entity)
        await self.session.commit()
        await self.session.refresh(entity)
        return entity

    async def get_by_id(self, entity_id: str | int) -> Optional[EntityType]:
        """Get entity by its primary identifier.

        Args:
            entity_id: Primary key value

        Returns:
            Entity instance or None if not found
        """
        return await self.session.get(self.model, entity_id)

    async def update(self, entity: EntityType) -> EntityType:
        """Persist changes made to an entity.

        Args:
            entity: SQLModel instance with updated fields

        Returns:
            Updated entity instance
        """
        self.session.add(entity)
        await self.session.commit()
        await self.session.refresh(entity)
        return entity

    async def delete(self, entity_id: str | int) -> bool:
        """Delete entity by its primary identifier.

        Args:
            entity_id: Primary key value

        Returns:
            True if deleted, False if not found
        """
        entity = await self.get_by_id(entity_id)
        if entity is None:
            return False
        await self.session.delete(entity)
        await self.session.commit()
        return True

    async def list(
        self, limit: Optional[int] = None, offset: Optional[int] = None, filters: Optional[Dict[str, Any]] = None
    ) -> List[EntityType]:
        """List entities with optional pagination and equality filters.

        Args:
            limit: Maximum number of records to return
            offset: Number of records to skip
            filters: Dictionary of field filters

        Returns:
            List of entity instances
        """
        stmt = select(self.model)
        if filters:
            stmt = AsyncQueryBuilder.apply_filters(stmt, self.model, filters)
        if hasattr(self.model, "created_at"):
            stmt = stmt.order_by(self.model.created_at.desc())  # type: ignore[attr-defined]
        stmt = AsyncQueryBuilder.apply_pagination(stmt, limit, offset)
        result = await self.session.exec(stmt)
        return list(result.all())

    async def count(self, stmt=None) -> int:
        """Count rows of ``stmt`` (or the whole table)."""
        if stmt is None:
            stmt = select(self.model)
        total = await self.session.exec(select(func.count()).select_from(stmt.subquery()))
        return int(total.one())

    async def paginate(self, stmt, limit: int, offset: int) -> Tuple[Sequence[EntityType], int]:
        """Return one page of ``stmt`` together with the unpaginated total."""
        total = await self.count(stmt.order_by(None))
        result = await self.session.exec(AsyncQueryBuilder.apply_pagination(stmt, limit, offset))
        return result.all(), total


class AsyncQueryBuilder:
    """Utility class for building async SQLModel-based database queries."""

    @staticmethod
    def apply_filters(stmt, model: Type[EntityType], filters: Dict[str, Any]):
        """Apply equality filters to a SQLModel select statement.

        ``None`` values are ignored so optional query parameters can be passed straight through.

        Args:
            stmt: SQLModel select statement
            model: SQLModel entity class
            filters: Dictionary of field filters

        Returns:
            Modified select statement with filters applied
        """
        for key, value in filters.items():
            if value is not None and hasattr(model, key):
                stmt = stmt.where(getattr(model, key) == value)
        return stmt

    @staticmethod
    def apply_search(stmt, columns: Sequence[Any], term: Optional[str]):
        """Apply a case-insensitive substring match over any of ``columns``."""
        if not term:
            return stmt
        pattern = f"%{term.lower()}%"
        clauses = [func.lower(column).like(pattern) for column in columns]
        return stmt.where(or_(*clauses))

    @staticmethod
    def apply_pagination(stmt, limit: Optional[int], offset: Optional[int]):
        """Apply pagination to a SQLModel select statement.

        Args:
            stmt: SQLModel select statement
            limit: Maximum number of records
            offset: Number of records to skip

        Returns:
            Modified select statement with pagination applied
        """
        if limit is not None:
            stmt = stmt.limit(limit)
        if offset is not None:
            stmt = stmt.offset(offset)
        return stmt


def apply_changes(entity: SQLModel, changes: Dict[str, Any]) -> SQLModel:
    """Copy ``changes`` onto ``entity`` (typically ``model_dump(exclude_unset=True)`` of an update model)."""
    for key, value in changes.items():
        setattr(entity, key, value)
    return entity
