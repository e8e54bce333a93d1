"""
Database boundary layer: ORM models, CRUD operations, and connection management.

Exports:
  - Base, UUIDMixin, TimestampMixin: Model building blocks
  - get_async_engine(), get_async_session_factory(), get_async_db(): Async connection management
  - UserModel, ChatSessionModel, ChatMessageModel: Conversation state
  - BookQueryModel: Assistant query log
  - BookModel, ReviewModel, BookSimilarityModel: Book catalog

Dependencies: sqlalchemy, book_assistant.configs
System role: Database adapter providing persistent storage for users,
conversations, query logs and the book catalog.
"""

from book_assistant.boundary.db.base import Base, TimestampMixin, UUIDMixin
from book_assistant.boundary.db.connection import (
    get_async_db,
    get_async_engine,
    get_async_session_factory,
)
from book_assistant.boundary.db.models import (
    BookModel,
    BookQueryModel,
    BookSimilarityModel,
    ChatMessageModel,
    ChatSessionModel,
    ReviewModel,
    UserModel,
)

__all__ = [
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    "get_async_db",
    "get_async_engine",
    "get_async_session_factory",
    "UserModel",
    "ChatSessionModel",
    "ChatMessageModel",
    "BookQueryModel",
    "BookModel",
    "ReviewModel",
    "BookSimilarityModel",
]
