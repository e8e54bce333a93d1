"""
Application services.

Exports:
  - UserService: Identity find-or-create
  - SessionResolver, ClientState, ResolvedSession: Per-request session selection
  - ChatService: One chat turn end to end
"""

from book_assistant.application.services.chat_service import ChatService
from book_assistant.application.services.session_resolver import (
    ClientState,
    ResolvedSession,
    SessionResolver,
)
from book_assistant.application.services.user_service import UserService

__all__ = [
    "ChatService",
    "ClientState",
    "ResolvedSession",
    "SessionResolver",
    "UserService",
]
