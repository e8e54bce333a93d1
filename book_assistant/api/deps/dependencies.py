"""
Dependency injection container.

Factory functions for FastAPI dependencies.

Dependencies: book_assistant.configs, book_assistant.application, book_assistant.boundary
System role: DI container for service injection
"""

from uuid import UUID

from fastapi import Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from book_assistant.application.adapters.conversation_store import ConversationStore
from book_assistant.application.adapters.query_log_adapter import QueryLogAdapter
from book_assistant.application.services.chat_service import ChatService
from book_assistant.application.services.session_resolver import ClientState, SessionResolver
from book_assistant.application.services.user_service import UserService
from book_assistant.boundary.db import get_async_db
from book_assistant.configs import Settings, get_settings
from book_assistant.core.agentic_system.agent.book_agent import BookAssistantAgent


class ServiceCache:
    """Container for cached, request-independent service instances."""

    def __init__(self):
        self._completion_provider = None
        self._catalog = None
        self._tools = None

    @property
    def completion_provider(self):
        """Get cached completion provider."""
        if self._completion_provider is None:
            from book_assistant.core.agentic_system.agent.completion_provider import (
                LangChainCompletionProvider,
            )

            llm = get_settings().llm
            self._completion_provider = LangChainCompletionProvider(
                model_id=llm.model_id,
                temperature=llm.temperature,
            )
        return self._completion_provider

    @property
    def catalog(self):
        """Get cached SQL book catalog."""
        if self._catalog is None:
            from book_assistant.application.adapters.book_catalog import SqlBookCatalog
            from book_assistant.boundary.db import get_async_session_factory

            self._catalog = SqlBookCatalog(get_async_session_factory())
        return self._catalog

    @property
    def tools(self):
        """Get cached agent tools."""
        if self._tools is None:
            from book_assistant.core.agentic_system.agent.book_agent_tool import build_tools

            assistant = get_settings().assistant
            self._tools = build_tools(
                self.catalog,
                news_api_key=assistant.news_api_key,
                max_results=assistant.max_search_results,
            )
        return self._tools

    def clear(self) -> None:
        """Clear all cached instances."""
        self._completion_provider = None
        self._catalog = None
        self._tools = None


# Global service cache
_service_cache = ServiceCache()


def get_service_cache() -> ServiceCache:
    """Get service cache singleton."""
    return _service_cache


def get_settings_dependency() -> Settings:
    """Get settings singleton."""
    return get_settings()


def get_conversation_store(db: AsyncSession = Depends(get_async_db)) -> ConversationStore:
    """
    Get conversation store bound to the request's database session.

    Args:
        db: Async database session (injected via Depends)

    Returns:
        ConversationStore: Conversation store instance
    """
    return ConversationStore(db=db)


def get_user_service(db: AsyncSession = Depends(get_async_db)) -> UserService:
    """Get user service bound to the request's database session."""
    return UserService(db=db)


def get_session_resolver(
    store: ConversationStore = Depends(get_conversation_store),
    users: UserService = Depends(get_user_service),
) -> SessionResolver:
    """Get session resolver for the request."""
    return SessionResolver(store=store, users=users)


def get_chat_service(
    db: AsyncSession = Depends(get_async_db),
    store: ConversationStore = Depends(get_conversation_store),
    cache: ServiceCache = Depends(get_service_cache),
    settings: Settings = Depends(get_settings_dependency),
) -> ChatService:
    """
    Get chat service instance.

    The agent is cheap to build; its provider and tools come from the
    service cache and its query log is bound to the request's session.

    Args:
        db: Async database session (injected via Depends)
        store: Conversation store for the request
        cache: Service cache with provider and tools
        settings: Application settings

    Returns:
        ChatService: Chat service instance
    """
    agent = BookAssistantAgent(
        completion_provider=cache.completion_provider,
        query_log=QueryLogAdapter(db=db),
        tools=cache.tools,
        news_enabled=bool(settings.assistant.news_api_key),
        history_limit=settings.assistant.message_history_limit,
        timeout_seconds=settings.llm.timeout_seconds,
        use_prompt_registry=settings.assistant.use_prompt_registry,
        prompt_label=settings.assistant.prompt_label,
    )
    return ChatService(store=store, agent=agent)


def get_client_state(
    request: Request,
    settings: Settings = Depends(get_settings_dependency),
) -> ClientState:
    """
    Read the caller's client state from its cookies.

    A malformed user cookie is treated as absent.
    """
    assistant = settings.assistant
    user_id = None
    raw_user_id = request.cookies.get(assistant.user_cookie_name)
    if raw_user_id:
        try:
            user_id = UUID(raw_user_id)
        except ValueError:
            user_id = None
    return ClientState(
        user_id=user_id,
        anonymous_token=request.cookies.get(assistant.chat_cookie_name) or None,
    )


def store_client_state(response: Response, state: ClientState, settings: Settings) -> None:
    """
    Write client state to the response cookies, deleting unset values.

    Args:
        response: Outgoing response
        state: State to persist on the client
        settings: Application settings (cookie names and flags)
    """
    assistant = settings.assistant
    values = {
        assistant.user_cookie_name: str(state.user_id) if state.user_id else None,
        assistant.chat_cookie_name: state.anonymous_token,
    }
    for name, value in values.items():
        if value:
            response.set_cookie(
                name,
                value,
                httponly=True,
                samesite="lax",
                secure=assistant.cookie_secure,
            )
        else:
            response.delete_cookie(name)
