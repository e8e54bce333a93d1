"""
Chat message CRUD operations.

Position allocation and ordered retrieval of a session's messages.

Dependencies: sqlalchemy, book_assistant.boundary.db.models
System role: Conversation turn persistence operations
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from book_assistant.boundary.db.models.chat_message_model import ChatMessageModel
from book_assistant.boundary.db.CRUD.base_crud import BaseCRUD


class ChatMessageCRUD(BaseCRUD[ChatMessageModel]):
    """CRUD operations for ChatMessageModel."""

    def __init__(self) -> None:
        """Initialize ChatMessageCRUD with ChatMessageModel."""
        super().__init__(ChatMessageModel)

    async def next_position(self, session: AsyncSession, chat_session_id: UUID) -> int:
        """Return max(position) + 1 within the session (1 for a first message)."""
        stmt = select(func.coalesce(func.max(ChatMessageModel.position), 0)).where(
            ChatMessageModel.chat_session_id == chat_session_id
        )
        result = await session.execute(stmt)
        return int(result.scalar_one()) + 1

    async def list_for_session(
        self,
        session: AsyncSession,
        chat_session_id: UUID,
    ) -> Sequence[ChatMessageModel]:
        """
        Retrieve a session's messages in position order.

        Args:
            session: Async database session
            chat_session_id: Session UUID

        Returns:
            Messages ordered by position ascending
        """
        stmt = (
            select(ChatMessageModel)
            .where(ChatMessageModel.chat_session_id == chat_session_id)
            .order_by(ChatMessageModel.position)
        )
        result = await session.execute(stmt)
        return result.scalars().all()


chat_message_crud = ChatMessageCRUD()
