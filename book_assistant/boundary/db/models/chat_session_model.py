"""
Chat session ORM model.

A numbered conversation thread owned by one user (or the anonymous account).

Dependencies: sqlalchemy, book_assistant.boundary.db.base
System role: Conversation thread persistence
"""

import secrets
from datetime import datetime
from uuid import UUID

from sqlalchemy import DateTime, ForeignKey, Integer, String, UniqueConstraint, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from book_assistant.boundary.db.base import Base, UUIDMixin, TimestampMixin, utcnow


def new_access_token() -> str:
    """Unguessable capability token for re-finding an anonymous session."""
    return secrets.token_urlsafe(32)


class ChatSessionModel(Base, UUIDMixin, TimestampMixin):
    """
    Chat session ORM model.

    session_number counts 1, 2, 3... per user. last_activity_at and
    messages_count are maintained by message appends and drive the
    "recent chats" ordering.

    Attributes:
        user_id: Owning user
        session_number: Per-user sequence number (unique per user)
        last_activity_at: Time of the last appended message
        messages_count: Number of messages in the session
        access_token: Capability token held by anonymous clients
    """

    __tablename__ = "chat_sessions"
    __table_args__ = (
        UniqueConstraint("user_id", "session_number", name="uq_chat_sessions_user_number"),
        Index("ix_chat_sessions_user_activity", "user_id", "last_activity_at"),
    )

    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    session_number: Mapped[int] = mapped_column(Integer, nullable=False)
    last_activity_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
    messages_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    access_token: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        unique=True,
        default=new_access_token,
    )

    user = relationship("UserModel", back_populates="chat_sessions")
    chat_messages = relationship(
        "ChatMessageModel",
        back_populates="chat_session",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ChatMessageModel.position",
    )

    @property
    def display_name(self) -> str:
        return f"Session #{self.session_number}"
