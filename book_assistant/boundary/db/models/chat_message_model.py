"""
Chat message ORM model.

One role-tagged turn inside a chat session, ordered by position.

Dependencies: sqlalchemy, book_assistant.boundary.db.base
System role: Conversation turn persistence
"""

from uuid import UUID

from sqlalchemy import CheckConstraint, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from book_assistant.boundary.db.base import Base, UUIDMixin, TimestampMixin
from book_assistant.core.exceptions import ValidationError

MESSAGE_ROLES = ("user", "assistant", "system")


class ChatMessageModel(Base, UUIDMixin, TimestampMixin):
    """
    Chat message ORM model.

    Messages are append-only. position is 1-based and unique within a
    session; it is assigned by the conversation store, never by callers.

    Attributes:
        chat_session_id: Owning session
        role: "user", "assistant" or "system"
        content: Non-blank message text
        position: Order within the session
    """

    __tablename__ = "chat_messages"
    __table_args__ = (
        UniqueConstraint("chat_session_id", "position", name="uq_chat_messages_session_position"),
        CheckConstraint("role IN ('user', 'assistant', 'system')", name="role"),
    )

    chat_session_id: Mapped[UUID] = mapped_column(
        ForeignKey("chat_sessions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    role: Mapped[str] = mapped_column(String(20), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False)

    chat_session = relationship("ChatSessionModel", back_populates="chat_messages")

    @validates("role")
    def _validate_role(self, key: str, value: str) -> str:
        role = str(value or "").strip().lower()
        if role not in MESSAGE_ROLES:
            raise ValidationError(
                f"Invalid role: {value}. Must be one of {', '.join(MESSAGE_ROLES)}",
                field="role",
            )
        return role

    @validates("content")
    def _validate_content(self, key: str, value: str) -> str:
        if value is None or not str(value).strip():
            raise ValidationError("Message content can't be blank", field="content")
        return value
