"""
Chat session CRUD operations.

Owner-scoped lookups, recency ordering, session number allocation and the
activity counters maintained on message append.

Dependencies: sqlalchemy, book_assistant.boundary.db.models
System role: Conversation thread persistence operations
"""

from datetime import datetime
from typing import Sequence
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from book_assistant.boundary.db.models.chat_session_model import ChatSessionModel
from book_assistant.boundary.db.CRUD.base_crud import BaseCRUD


class ChatSessionCRUD(BaseCRUD[ChatSessionModel]):
    """CRUD operations for ChatSessionModel."""

    def __init__(self) -> None:
        """Initialize ChatSessionCRUD with ChatSessionModel."""
        super().__init__(ChatSessionModel)

    async def get_for_user(
        self,
        session: AsyncSession,
        user_id: UUID,
        id: UUID,
    ) -> ChatSessionModel | None:
        """
        Retrieve a session only if it belongs to the user.

        Args:
            session: Async database session
            user_id: Owning user UUID
            id: Session UUID

        Returns:
            ChatSessionModel if it exists and is owned by the user, None otherwise
        """
        stmt = (
            select(ChatSessionModel)
            .where(ChatSessionModel.id == id, ChatSessionModel.user_id == user_id)
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_token(
        self,
        session: AsyncSession,
        user_id: UUID,
        access_token: str,
    ) -> ChatSessionModel | None:
        """Retrieve a user's session by its capability token."""
        stmt = (
            select(ChatSessionModel)
            .where(
                ChatSessionModel.user_id == user_id,
                ChatSessionModel.access_token == access_token,
            )
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_for_user(
        self,
        session: AsyncSession,
        user_id: UUID,
        limit: int | None = None,
    ) -> Sequence[ChatSessionModel]:
        """
        Retrieve a user's sessions, most recently active first.

        Args:
            session: Async database session
            user_id: Owning user UUID
            limit: Maximum number of sessions to return

        Returns:
            Sessions ordered by last activity, then session number, descending
        """
        stmt = (
            select(ChatSessionModel)
            .where(ChatSessionModel.user_id == user_id)
            .order_by(
                ChatSessionModel.last_activity_at.desc(),
                ChatSessionModel.session_number.desc(),
            )
            .execution_options(populate_existing=True)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def next_session_number(self, session: AsyncSession, user_id: UUID) -> int:
        """Return max(session_number) + 1 for the user (1 for a first session)."""
        stmt = select(func.coalesce(func.max(ChatSessionModel.session_number), 0)).where(
            ChatSessionModel.user_id == user_id
        )
        result = await session.execute(stmt)
        return int(result.scalar_one()) + 1

    async def record_activity(
        self,
        session: AsyncSession,
        id: UUID,
        at: datetime,
    ) -> None:
        """
        Increment messages_count and set last_activity_at in one statement.

        Args:
            session: Async database session
            id: Session UUID
            at: Activity timestamp
        """
        stmt = (
            update(ChatSessionModel)
            .where(ChatSessionModel.id == id)
            .values(
                messages_count=ChatSessionModel.messages_count + 1,
                last_activity_at=at,
            )
            .execution_options(synchronize_session=False)
        )
        await session.execute(stmt)


chat_session_crud = ChatSessionCRUD()
