"""
Session resolver.

Maps a caller's client state (who they said they are, which anonymous
conversation they hold) to a user and the chat session a request acts on.
Framework-free: the HTTP layer is responsible for carrying ClientState.

Dependencies: book_assistant.application.adapters.conversation_store,
              book_assistant.application.services.user_service
System role: Identity and session selection per request
"""

import logging
from dataclasses import dataclass
from uuid import UUID

from book_assistant.application.adapters.conversation_store import ConversationStore
from book_assistant.application.services.user_service import UserService
from book_assistant.boundary.db.models.chat_session_model import ChatSessionModel
from book_assistant.boundary.db.models.user_model import UserModel
from book_assistant.core.exceptions import SessionNotFoundError, ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClientState:
    """
    State a client carries between requests.

    Attributes:
        user_id: Identified user, None for anonymous callers
        anonymous_token: Capability token of the anonymous caller's session
    """

    user_id: UUID | None = None
    anonymous_token: str | None = None


@dataclass(frozen=True)
class ResolvedSession:
    """User and chat session a request acts on, plus the state to hand back."""

    user: UserModel
    chat_session: ChatSessionModel
    state: ClientState

    @property
    def anonymous(self) -> bool:
        return self.user.anonymous


class SessionResolver:
    """Selects the user and chat session for identified and anonymous callers."""

    def __init__(self, store: ConversationStore, users: UserService) -> None:
        """
        Initialize session resolver.

        Args:
            store: Conversation store bound to the request's database session
            users: User service bound to the same session
        """
        self.store = store
        self.users = users

    async def current_user(self, state: ClientState) -> UserModel | None:
        """
        The identified user named by the state.

        Returns:
            UserModel, or None for anonymous callers and stale user ids
        """
        if state.user_id is None:
            return None
        user = await self.users.get_user(state.user_id)
        if user is None or user.anonymous:
            logger.info(f"{__name__}:current_user - Unknown user_id={state.user_id}, treating as anonymous")
            return None
        return user

    async def resolve(
        self,
        state: ClientState,
        session_id: UUID | str | None = None,
    ) -> ResolvedSession:
        """
        Resolve the user and chat session for a request.

        Identified callers get the requested session (which must be theirs),
        else their most recent one, else a new one. Anonymous callers share
        the anonymous account and are confined to the session their token
        names; a new session (and token) is issued when the token resolves
        to nothing.

        Args:
            state: Client state from the caller
            session_id: Explicitly requested session

        Returns:
            ResolvedSession

        Raises:
            SessionNotFoundError: If the requested session is not the caller's
        """
        user = await self.current_user(state)
        if user is not None:
            if session_id is not None:
                chat_session = await self.store.get_session(user, session_id)
            else:
                chat_session = await self.store.most_recent_session(user)
                if chat_session is None:
                    chat_session = await self.store.create_session(user)
            return ResolvedSession(user, chat_session, ClientState(user_id=user.id))

        anonymous = await self.users.anonymous_user()
        chat_session = None
        if state.anonymous_token:
            chat_session = await self.store.get_session_by_token(anonymous, state.anonymous_token)

        if session_id is not None and (
            chat_session is None or str(chat_session.id) != str(session_id)
        ):
            raise SessionNotFoundError(str(session_id))

        if chat_session is None:
            chat_session = await self.store.create_session(anonymous)

        return ResolvedSession(
            anonymous,
            chat_session,
            ClientState(anonymous_token=chat_session.access_token),
        )

    async def identify(self, state: ClientState, identifier: str | None) -> ClientState:
        """
        Switch the caller to the user with a handle.

        Args:
            state: Current client state (unchanged on failure)
            identifier: Handle as typed

        Returns:
            ClientState naming the user, without an anonymous token

        Raises:
            ValidationError: If the handle is blank, not alphanumeric or reserved
        """
        user = await self.users.find_or_create_by_identifier(identifier)
        if user is None:
            raise ValidationError("Identifier can't be blank", field="identifier")
        logger.info(f"{__name__}:identify - Identified user_id={user.id}")
        return ClientState(user_id=user.id)

    async def start_new_session(self, state: ClientState) -> ResolvedSession:
        """
        Begin a new conversation for the caller.

        Anonymous callers get a fresh token for the new session.
        """
        user = await self.current_user(state)
        if user is not None:
            chat_session = await self.store.create_session(user)
            return ResolvedSession(user, chat_session, ClientState(user_id=user.id))

        anonymous = await self.users.anonymous_user()
        chat_session = await self.store.create_session(anonymous)
        return ResolvedSession(
            anonymous,
            chat_session,
            ClientState(anonymous_token=chat_session.access_token),
        )

    async def logout(self, state: ClientState) -> ClientState:
        """Forget the caller's identity and anonymous session."""
        return ClientState()
