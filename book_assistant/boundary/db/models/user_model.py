"""
User ORM model.

A user is identified by a self-chosen alphanumeric handle, or is the single
canonical anonymous account shared by everyone who has not identified.

Dependencies: sqlalchemy, book_assistant.boundary.db.base
System role: Identity persistence for chat ownership
"""

import re

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from book_assistant.boundary.db.base import Base, UUIDMixin, TimestampMixin

ANONYMOUS_IDENTIFIER = "anonymous"
IDENTIFIER_PATTERN = re.compile(r"^[a-zA-Z0-9]+$")


def normalize_identifier(identifier: str | None) -> str:
    """Trim and lower-case a handle."""
    return (identifier or "").strip().lower()


class UserModel(Base, UUIDMixin, TimestampMixin):
    """
    User ORM model.

    Identifiers are stored lower-cased so uniqueness is case-insensitive.
    Deleting a user cascades to all of its chat sessions and their messages.

    Attributes:
        identifier: Normalized handle (unique)
        anonymous: True only for the canonical anonymous account
        chat_sessions: Sessions owned by the user
    """

    __tablename__ = "users"

    identifier: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
        doc="Lower-cased handle",
    )
    anonymous: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        index=True,
    )

    chat_sessions = relationship(
        "ChatSessionModel",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @validates("identifier")
    def _normalize(self, key: str, value: str) -> str:
        return normalize_identifier(value)
