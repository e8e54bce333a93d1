"""
Book query ORM model.

Append-only telemetry row per assistant invocation.

Dependencies: sqlalchemy, book_assistant.boundary.db.base
System role: Query log persistence
"""

from sqlalchemy import Boolean, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from book_assistant.boundary.db.base import Base, UUIDMixin, TimestampMixin


class BookQueryModel(Base, UUIDMixin, TimestampMixin):
    """
    Book query log entry.

    Attributes:
        query_text: The user's message
        response_text: Extracted response text, raw completion or error message
        success: Whether the completion was parsed and answered
        error_message: Copy of the response text for failed queries
        response_time_ms: Wall-clock duration of the invocation
    """

    __tablename__ = "book_queries"

    query_text: Mapped[str] = mapped_column(Text, nullable=False)
    response_text: Mapped[str | None] = mapped_column(Text, nullable=True)
    success: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    error_message: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    response_time_ms: Mapped[int | None] = mapped_column(Integer, nullable=True)
