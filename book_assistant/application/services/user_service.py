"""
User service.

Finds or creates users by handle and provides the canonical anonymous
account. Creation is race-safe: a concurrent insert of the same handle is
resolved by re-reading the winner's row.

Dependencies: sqlalchemy, book_assistant.boundary.db.CRUD.user_crud
System role: Identity use cases
"""

import logging
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from book_assistant.boundary.db.CRUD.user_crud import user_crud
from book_assistant.boundary.db.models.user_model import (
    ANONYMOUS_IDENTIFIER,
    IDENTIFIER_PATTERN,
    UserModel,
    normalize_identifier,
)
from book_assistant.core.exceptions import ValidationError

logger = logging.getLogger(__name__)


class UserService:
    """User lookup and creation."""

    def __init__(self, db: AsyncSession) -> None:
        """
        Initialize user service with async database session.

        Args:
            db: Async SQLAlchemy session
        """
        self.db = db

    async def find_or_create_by_identifier(self, identifier: str | None) -> UserModel | None:
        """
        Find the user with a handle, creating it on first use.

        Args:
            identifier: Handle as typed; trimmed and lower-cased

        Returns:
            UserModel, or None when the handle is blank

        Raises:
            ValidationError: If the handle is not alphanumeric or is reserved
        """
        normalized = normalize_identifier(identifier)
        if not normalized:
            return None
        if not IDENTIFIER_PATTERN.match(normalized):
            raise ValidationError(
                "Identifier can only contain letters and numbers",
                field="identifier",
            )
        if normalized == ANONYMOUS_IDENTIFIER:
            raise ValidationError("Identifier is reserved", field="identifier")

        return await self._find_or_create(normalized, anonymous=False)

    async def anonymous_user(self) -> UserModel:
        """The canonical anonymous account, created on first use."""
        user = await user_crud.get_anonymous(self.db)
        if user is not None:
            return user
        return await self._find_or_create(ANONYMOUS_IDENTIFIER, anonymous=True)

    async def get_user(self, user_id: UUID) -> UserModel | None:
        """Retrieve a user by id."""
        return await user_crud.get_by_id(self.db, user_id)

    async def _find_or_create(self, identifier: str, anonymous: bool) -> UserModel:
        user = await user_crud.get_by_identifier(self.db, identifier)
        if user is not None:
            return user

        try:
            user = await user_crud.create(self.db, identifier=identifier, anonymous=anonymous)
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            logger.info(
                f"{__name__}:_find_or_create - Concurrent insert for identifier={identifier}, re-reading"
            )
            user = await user_crud.get_by_identifier(self.db, identifier)
            if user is None:
                raise
            return user

        logger.info(f"{__name__}:_find_or_create - Created user id={user.id} anonymous={anonymous}")
        return user
