"""
CRUD operations for database models.

Exports base CRUD class and model-specific CRUD implementations
with pre-instantiated singletons for direct use.

Usage:
    from book_assistant.boundary.db.CRUD import chat_session_crud, book_crud

    # Use singleton instances
    chat_session = await chat_session_crud.get_by_id(db, session_id)

    # Or instantiate classes directly for custom behavior
    from book_assistant.boundary.db.CRUD import BookCRUD
    custom_crud = BookCRUD()
"""

from book_assistant.boundary.db.CRUD.base_crud import BaseCRUD
from book_assistant.boundary.db.CRUD.user_crud import UserCRUD, user_crud
from book_assistant.boundary.db.CRUD.chat_session_crud import ChatSessionCRUD, chat_session_crud
from book_assistant.boundary.db.CRUD.chat_message_crud import ChatMessageCRUD, chat_message_crud
from book_assistant.boundary.db.CRUD.book_query_crud import BookQueryCRUD, book_query_crud
from book_assistant.boundary.db.CRUD.book_crud import BookCRUD, book_crud, similarity_score

__all__ = [
    "BaseCRUD",
    "UserCRUD",
    "user_crud",
    "ChatSessionCRUD",
    "chat_session_crud",
    "ChatMessageCRUD",
    "chat_message_crud",
    "BookQueryCRUD",
    "book_query_crud",
    "BookCRUD",
    "book_crud",
    "similarity_score",
]
