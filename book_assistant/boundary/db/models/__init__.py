"""
Database models package.

Exports:
  - UserModel: Identity (handle or canonical anonymous account)
  - ChatSessionModel, ChatMessageModel: Conversation threads and turns
  - BookQueryModel: Assistant query log
  - BookModel, ReviewModel, BookSimilarityModel: Book catalog

Dependencies: sqlalchemy, book_assistant.boundary.db.base
System role: Database model definitions for domain entities
"""

from book_assistant.boundary.db.models.user_model import UserModel
from book_assistant.boundary.db.models.chat_session_model import ChatSessionModel
from book_assistant.boundary.db.models.chat_message_model import ChatMessageModel
from book_assistant.boundary.db.models.book_query_model import BookQueryModel
from book_assistant.boundary.db.models.book_model import (
    BookModel,
    BookSimilarityModel,
    ReviewModel,
)

__all__ = [
    "UserModel",
    "ChatSessionModel",
    "ChatMessageModel",
    "BookQueryModel",
    "BookModel",
    "ReviewModel",
    "BookSimilarityModel",
]
