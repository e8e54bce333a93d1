"""
Conversation store.

The only writer of conversation state. Creates numbered chat sessions,
appends ordered messages and keeps the per-session activity counters in
step, all inside one database transaction per mutation.

Dependencies: sqlalchemy, book_assistant.boundary.db.CRUD
System role: Relational persistence of users' chat sessions and messages
"""

import logging
from typing import Awaitable, Callable, Sequence, TypeVar
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from book_assistant.boundary.db.base import utcnow
from book_assistant.boundary.db.CRUD.chat_message_crud import chat_message_crud
from book_assistant.boundary.db.CRUD.chat_session_crud import chat_session_crud
from book_assistant.boundary.db.CRUD.user_crud import user_crud
from book_assistant.boundary.db.models.chat_message_model import ChatMessageModel
from book_assistant.boundary.db.models.chat_session_model import (
    ChatSessionModel,
    new_access_token,
)
from book_assistant.boundary.db.models.user_model import UserModel
from book_assistant.core.exceptions import NotFoundError, SessionNotFoundError

logger = logging.getLogger(__name__)

T = TypeVar("T")

ALLOCATION_ATTEMPTS = 2


def _as_uuid(value: UUID | str) -> UUID | None:
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except ValueError:
        return None


class ConversationStore:
    """
    Relational store for chat sessions and their messages.

    Bound to one AsyncSession. Each mutating call commits; on failure the
    transaction is rolled back before the error propagates.
    """

    def __init__(self, db: AsyncSession) -> None:
        """
        Initialize conversation store.

        Args:
            db: AsyncSession for database operations
        """
        self.db = db

    async def _allocate(self, operation: Callable[[], Awaitable[T]], what: str) -> T:
        """
        Run an allocating write, retrying once on a unique-constraint race.

        Args:
            operation: Coroutine factory performing the write and commit
            what: Description for logs

        Returns:
            Result of the operation
        """
        for attempt in range(1, ALLOCATION_ATTEMPTS + 1):
            try:
                return await operation()
            except IntegrityError:
                await self.db.rollback()
                if attempt == ALLOCATION_ATTEMPTS:
                    logger.error(f"{__name__}:_allocate - {what} failed after {attempt} attempts")
                    raise
                logger.warning(f"{__name__}:_allocate - {what} collided, retrying")
            except Exception:
                await self.db.rollback()
                raise
        raise AssertionError("unreachable")

    async def create_session(self, user: UserModel) -> ChatSessionModel:
        """
        Create the user's next numbered chat session.

        Args:
            user: Owning user

        Returns:
            ChatSessionModel: Session numbered max(existing) + 1, no messages

        Raises:
            NotFoundError: If the user row no longer exists
        """
        user_id = user.id

        async def _create() -> ChatSessionModel:
            if await user_crud.get_for_update(self.db, user_id) is None:
                raise NotFoundError("User not found", {"user_id": str(user_id)})
            number = await chat_session_crud.next_session_number(self.db, user_id)
            chat_session = await chat_session_crud.create(
                self.db,
                user_id=user_id,
                session_number=number,
                last_activity_at=utcnow(),
                messages_count=0,
                access_token=new_access_token(),
            )
            await self.db.commit()
            return chat_session

        chat_session = await self._allocate(_create, f"session number for user {user_id}")
        logger.info(
            f"{__name__}:create_session - Created session #{chat_session.session_number} "
            f"id={chat_session.id} user_id={user_id}"
        )
        return chat_session

    async def get_session(self, user: UserModel, session_id: UUID | str) -> ChatSessionModel:
        """
        Retrieve one of the user's sessions.

        Args:
            user: Owning user
            session_id: Session UUID

        Returns:
            ChatSessionModel

        Raises:
            SessionNotFoundError: If the session does not exist or belongs to
                another user
        """
        parsed = _as_uuid(session_id)
        chat_session = None
        if parsed is not None:
            chat_session = await chat_session_crud.get_for_user(self.db, user.id, parsed)
        if chat_session is None:
            raise SessionNotFoundError(str(session_id))
        return chat_session

    async def get_session_by_token(
        self,
        user: UserModel,
        access_token: str,
    ) -> ChatSessionModel | None:
        """Find the user's session holding a capability token, if any."""
        if not access_token:
            return None
        return await chat_session_crud.get_by_token(self.db, user.id, access_token)

    async def most_recent_session(self, user: UserModel) -> ChatSessionModel | None:
        """The user's most recently active session, None if there is none."""
        sessions = await chat_session_crud.list_for_user(self.db, user.id, limit=1)
        return sessions[0] if sessions else None

    async def list_sessions(self, user: UserModel) -> Sequence[ChatSessionModel]:
        """
        All of the user's sessions.

        Returns:
            Sessions by last activity descending, ties broken by session
            number descending
        """
        return await chat_session_crud.list_for_user(self.db, user.id)

    async def append_message(
        self,
        session_id: UUID | str,
        role: str,
        content: str,
    ) -> ChatMessageModel:
        """
        Append a message at the session's next position.

        Position allocation, the messages_count increment and the
        last_activity_at bump commit together.

        Args:
            session_id: Session UUID
            role: "user", "assistant" or "system"
            content: Non-blank message text

        Returns:
            ChatMessageModel: Stored message with its position

        Raises:
            ValidationError: If role or content is invalid
            SessionNotFoundError: If the session does not exist
        """
        parsed = _as_uuid(session_id)
        if parsed is None:
            raise SessionNotFoundError(str(session_id))

        async def _append() -> ChatMessageModel:
            if await chat_session_crud.get_for_update(self.db, parsed) is None:
                raise SessionNotFoundError(str(session_id))
            position = await chat_message_crud.next_position(self.db, parsed)
            message = await chat_message_crud.create(
                self.db,
                chat_session_id=parsed,
                role=role,
                content=content,
                position=position,
            )
            await chat_session_crud.record_activity(self.db, parsed, utcnow())
            await self.db.commit()
            return message

        message = await self._allocate(_append, f"message position in session {parsed}")
        logger.debug(
            f"{__name__}:append_message - session_id={parsed} role={message.role} "
            f"position={message.position}"
        )
        return message

    async def get_messages(self, session_id: UUID | str) -> Sequence[ChatMessageModel]:
        """Messages of a session in position order."""
        parsed = _as_uuid(session_id)
        if parsed is None:
            raise SessionNotFoundError(str(session_id))
        return await chat_message_crud.list_for_session(self.db, parsed)

    async def format_for_completion(self, session_id: UUID | str) -> list[dict[str, str]]:
        """
        Session history as role/content pairs for the completion provider.

        Args:
            session_id: Session UUID

        Returns:
            list[dict]: [{"role": ..., "content": ...}] in position order
        """
        messages = await self.get_messages(session_id)
        return [{"role": m.role, "content": m.content} for m in messages]
