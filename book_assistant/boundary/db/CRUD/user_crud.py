"""
User CRUD operations.

Lookups by handle and of the canonical anonymous account.

Dependencies: sqlalchemy, book_assistant.boundary.db.models
System role: Identity persistence operations
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from book_assistant.boundary.db.models.user_model import (
    ANONYMOUS_IDENTIFIER,
    UserModel,
    normalize_identifier,
)
from book_assistant.boundary.db.CRUD.base_crud import BaseCRUD


class UserCRUD(BaseCRUD[UserModel]):
    """CRUD operations for UserModel."""

    def __init__(self) -> None:
        """Initialize UserCRUD with UserModel."""
        super().__init__(UserModel)

    async def get_by_identifier(
        self,
        session: AsyncSession,
        identifier: str,
    ) -> UserModel | None:
        """
        Retrieve a user by handle, case-insensitively.

        Args:
            session: Async database session
            identifier: Handle in any casing

        Returns:
            UserModel if found, None otherwise
        """
        stmt = select(UserModel).where(
            UserModel.identifier == normalize_identifier(identifier)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_anonymous(self, session: AsyncSession) -> UserModel | None:
        """Retrieve the canonical anonymous account, if it exists."""
        stmt = select(UserModel).where(
            UserModel.anonymous.is_(True),
            UserModel.identifier == ANONYMOUS_IDENTIFIER,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()


user_crud = UserCRUD()
