"""
Base CRUD operations for SQLAlchemy models.

Generic create, lookup, locking lookup and delete shared by the user, chat
session, chat message, book and query log CRUD singletons.

Dependencies: sqlalchemy, uuid
System role: Foundation for all database CRUD operations
"""

from typing import Generic, TypeVar, Sequence
from uuid import UUID

from sqlalchemy import Select, select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from book_assistant.boundary.db.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseCRUD(Generic[ModelT]):
    """
    Generic base class for CRUD operations.

    Methods only flush. Commit and rollback belong to the adapter or service
    that owns the unit of work, so several CRUD calls can share one
    transaction (and one row lock).

    Attributes:
        model: The SQLAlchemy model class to operate on
    """

    def __init__(self, model: type[ModelT]) -> None:
        self.model = model

    def _by_id(self, id: UUID) -> Select:
        return select(self.model).where(self.model.id == id)

    async def create(self, session: AsyncSession, **kwargs) -> ModelT:
        """
        Insert a row and flush so the id, defaults and timestamps are set.

        Args:
            session: Async database session
            **kwargs: Model field values

        Returns:
            Created model instance

        Raises:
            IntegrityError: On a unique or foreign key violation at flush
        """
        instance = self.model(**kwargs)
        session.add(instance)
        await session.flush()
        await session.refresh(instance)
        return instance

    async def get_by_id(self, session: AsyncSession, id: UUID) -> ModelT | None:
        """Retrieve a single row by primary key, reloading any cached copy."""
        stmt = self._by_id(id).execution_options(populate_existing=True)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_for_update(self, session: AsyncSession, id: UUID) -> ModelT | None:
        """
        Retrieve a row with a lock held until the transaction ends.

        Serializes allocators that read max(...) under this parent row.
        Backends without row locks (SQLite) ignore FOR UPDATE.

        Args:
            session: Async database session
            id: UUID primary key

        Returns:
            Locked model instance, None if not found
        """
        result = await session.execute(self._by_id(id).with_for_update())
        return result.scalar_one_or_none()

    async def get_all(
        self,
        session: AsyncSession,
        limit: int | None = None,
        offset: int = 0,
    ) -> Sequence[ModelT]:
        """Retrieve rows with optional pagination."""
        stmt = select(self.model).offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def delete_by_id(self, session: AsyncSession, id: UUID) -> bool:
        """
        Delete a row by primary key.

        Dependent rows go with it through ON DELETE CASCADE.

        Returns:
            True if a row was deleted, False if not found
        """
        stmt = delete(self.model).where(self.model.id == id)
        result = await session.execute(stmt)
        return result.rowcount > 0
