"""
Router helpers.

Maps domain exceptions to HTTP errors and ORM rows to response schemas.

Dependencies: fastapi, book_assistant.core.exceptions, book_assistant.models
System role: Shared router utilities
"""

import logging
from typing import Sequence

from fastapi import HTTPException

from book_assistant.boundary.db.models.chat_message_model import ChatMessageModel
from book_assistant.boundary.db.models.chat_session_model import ChatSessionModel
from book_assistant.core.exceptions import NotFoundError, ValidationError
from book_assistant.models.session import (
    ChatMessageResponse,
    ChatSessionDetail,
    ChatSessionSummary,
)
from book_assistant.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)


def to_http_exception(exc: Exception, action: str) -> HTTPException:
    """
    Translate an exception raised while handling a request.

    ValidationError -> 400 with its message, NotFoundError -> 404 with a
    generic message, anything else -> 500 without internal detail.

    Args:
        exc: Raised exception
        action: Description for logs

    Returns:
        HTTPException to raise
    """
    if isinstance(exc, ValidationError):
        return HTTPException(status_code=400, detail=exc.message)
    if isinstance(exc, NotFoundError):
        logger.info(f"{__name__}:to_http_exception - {action}: {exc}")
        return HTTPException(status_code=404, detail="Session not found")
    log_exception_with_context(logger, f"{__name__}:to_http_exception - {action} failed", exc)
    return HTTPException(status_code=500, detail=f"{action} failed")


def session_summary(chat_session: ChatSessionModel) -> ChatSessionSummary:
    """Serialize a session without its messages."""
    return ChatSessionSummary.model_validate(chat_session)


def session_detail(
    chat_session: ChatSessionModel,
    messages: Sequence[ChatMessageModel],
) -> ChatSessionDetail:
    """Serialize a session with its messages."""
    return ChatSessionDetail(
        **session_summary(chat_session).model_dump(),
        messages=[ChatMessageResponse.model_validate(m) for m in messages],
    )
