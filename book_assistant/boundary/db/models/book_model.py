"""
Book catalog ORM models.

Books, their reviews and precomputed pairwise similarities. Read by the
catalog adapter behind the assistant's search tools.

Dependencies: sqlalchemy, book_assistant.boundary.db.base
System role: Book catalog persistence
"""

from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import (
    JSON,
    Boolean,
    Date,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from book_assistant.boundary.db.base import Base, UUIDMixin, TimestampMixin


class BookModel(Base, UUIDMixin, TimestampMixin):
    """Book ORM model."""

    __tablename__ = "books"

    isbn: Mapped[str] = mapped_column(String(32), nullable=False, unique=True, index=True)
    title: Mapped[str] = mapped_column(String(512), nullable=False, index=True)
    author: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    publisher: Mapped[str | None] = mapped_column(String(255), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    price: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    genres: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    rating: Mapped[Decimal] = mapped_column(Numeric(3, 2), nullable=False, default=Decimal("0.0"))
    page_count: Mapped[int | None] = mapped_column(Integer, nullable=True)
    language: Mapped[str] = mapped_column(String(16), nullable=False, default="en")
    published_at: Mapped[date | None] = mapped_column(Date, nullable=True)
    availability_status: Mapped[str] = mapped_column(String(32), nullable=False, default="available")
    is_trending: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    trending_score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    image_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    thumbnail_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)

    reviews = relationship(
        "ReviewModel",
        back_populates="book",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class ReviewModel(Base, UUIDMixin, TimestampMixin):
    """Reader review of a book (rating 1-5)."""

    __tablename__ = "reviews"

    book_id: Mapped[UUID] = mapped_column(
        ForeignKey("books.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    content: Mapped[str | None] = mapped_column(Text, nullable=True)
    reviewer_name: Mapped[str | None] = mapped_column(String(255), nullable=True)

    book = relationship("BookModel", back_populates="reviews")


class BookSimilarityModel(Base, UUIDMixin, TimestampMixin):
    """Directed similarity score (0-1) from one book to another."""

    __tablename__ = "book_similarities"
    __table_args__ = (
        UniqueConstraint("book_id", "similar_book_id", name="uq_book_similarities_pair"),
    )

    book_id: Mapped[UUID] = mapped_column(
        ForeignKey("books.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    similar_book_id: Mapped[UUID] = mapped_column(
        ForeignKey("books.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    similarity_score: Mapped[Decimal] = mapped_column(Numeric(3, 2), nullable=False)
