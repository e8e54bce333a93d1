"""API-specific dependencies."""

from .dependencies import (
    ServiceCache,
    get_chat_service,
    get_client_state,
    get_conversation_store,
    get_service_cache,
    get_session_resolver,
    get_settings_dependency,
    get_user_service,
    store_client_state,
)

__all__ = [
    "ServiceCache",
    "get_chat_service",
    "get_client_state",
    "get_conversation_store",
    "get_service_cache",
    "get_session_resolver",
    "get_settings_dependency",
    "get_user_service",
    "store_client_state",
]
