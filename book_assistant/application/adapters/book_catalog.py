"""
SQL book catalog.

Read-only catalog queries for the assistant's tools, serialized to plain
dicts the model can read. Each call opens its own short-lived session so
tools can run independently of the request's unit of work.

Dependencies: sqlalchemy, book_assistant.boundary.db.CRUD.book_crud
System role: Catalog collaborator implementation backed by the database
"""

import calendar
import logging
from datetime import date
from decimal import Decimal
from typing import Any, Sequence

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from book_assistant.boundary.db.CRUD.book_crud import book_crud
from book_assistant.boundary.db.models.book_model import BookModel
from book_assistant.core.exceptions import BookNotFoundError

logger = logging.getLogger(__name__)

DETAIL_REVIEW_LIMIT = 3


def _number(value: Decimal | float | None) -> float | None:
    return float(value) if value is not None else None


def months_before(today: date, months: int) -> date:
    """Same day-of-month `months` earlier, clamped to the month's last day."""
    month_index = today.year * 12 + (today.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(today.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def book_summary(book: BookModel, review_count: int = 0) -> dict[str, Any]:
    """
    Serialize a book for search results.

    Args:
        book: Book row
        review_count: Number of reviews of the book

    Returns:
        dict: isbn, title, author, genres, rating, review_count, price,
        published_at (YYYY-MM-DD) and image_url
    """
    return {
        "isbn": book.isbn,
        "title": book.title,
        "author": book.author,
        "genres": list(book.genres or []),
        "rating": _number(book.rating),
        "review_count": review_count,
        "price": _number(book.price),
        "published_at": book.published_at.strftime("%Y-%m-%d") if book.published_at else None,
        "image_url": book.image_url,
    }


class SqlBookCatalog:
    """Book catalog backed by the books, reviews and book_similarities tables."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """
        Initialize SQL catalog.

        Args:
            session_factory: Factory for per-call database sessions
        """
        self.session_factory = session_factory

    async def _summaries(self, db: AsyncSession, books: Sequence[BookModel]) -> list[dict[str, Any]]:
        counts = await book_crud.review_counts(db, [book.id for book in books])
        return [book_summary(book, counts.get(book.id, 0)) for book in books]

    async def search_by_title(self, query: str, limit: int = 10) -> list[dict[str, Any]]:
        async with self.session_factory() as db:
            books = await book_crud.search_by_title(db, query, limit=limit)
            return await self._summaries(db, books)

    async def search_by_author(self, query: str, limit: int = 10) -> list[dict[str, Any]]:
        async with self.session_factory() as db:
            books = await book_crud.search_by_author(db, query, limit=limit)
            return await self._summaries(db, books)

    async def search_by_isbn(self, isbn: str, limit: int = 10) -> list[dict[str, Any]]:
        async with self.session_factory() as db:
            book = await book_crud.get_by_isbn(db, isbn)
            return await self._summaries(db, [book] if book else [])

    async def get_details(self, isbn: str) -> dict[str, Any]:
        """
        Full description of one book.

        Args:
            isbn: Book ISBN

        Returns:
            dict: Summary fields plus description, publisher, page_count,
            language, availability_status, similar_books_count and up to
            three reviews

        Raises:
            BookNotFoundError: If no book has the ISBN
        """
        async with self.session_factory() as db:
            book = await book_crud.get_by_isbn(db, isbn)
            if book is None:
                raise BookNotFoundError(isbn)

            counts = await book_crud.review_counts(db, [book.id])
            reviews = await book_crud.get_reviews(db, book.id, limit=DETAIL_REVIEW_LIMIT)
            similar_count = await book_crud.count_similar(db, book.id)

            details = book_summary(book, counts.get(book.id, 0))
            details.update(
                {
                    "description": book.description,
                    "publisher": book.publisher,
                    "page_count": book.page_count,
                    "language": book.language,
                    "availability_status": book.availability_status,
                    "similar_books_count": similar_count,
                    "reviews": [
                        {"rating": review.rating, "content": review.content}
                        for review in reviews
                    ],
                }
            )
            return details

    async def get_similar(self, isbn: str, limit: int = 5) -> list[dict[str, Any]]:
        """
        Books similar to the one with the ISBN.

        Raises:
            BookNotFoundError: If no book has the ISBN
        """
        async with self.session_factory() as db:
            book = await book_crud.get_by_isbn(db, isbn)
            if book is None:
                raise BookNotFoundError(isbn)
            similar = await book_crud.get_similar(db, book, limit=limit)
            return await self._summaries(db, similar)

    async def get_trending(self, limit: int = 10) -> list[dict[str, Any]]:
        async with self.session_factory() as db:
            books = await book_crud.get_trending(db, limit=limit)
            return await self._summaries(db, books)

    async def get_by_genre(self, genre: str, limit: int = 10) -> list[dict[str, Any]]:
        async with self.session_factory() as db:
            books = await book_crud.get_by_genre(db, genre, limit=limit)
            return await self._summaries(db, books)

    async def get_highly_rated(
        self,
        limit: int = 10,
        min_rating: float = 4.0,
    ) -> list[dict[str, Any]]:
        async with self.session_factory() as db:
            books = await book_crud.get_highly_rated(db, limit=limit, min_rating=min_rating)
            return await self._summaries(db, books)

    async def get_recent(self, limit: int = 10, months_ago: int = 12) -> list[dict[str, Any]]:
        """Books published within the last `months_ago` months, newest first."""
        since = months_before(date.today(), months_ago)
        logger.debug(f"{__name__}:get_recent - since={since.isoformat()} limit={limit}")
        async with self.session_factory() as db:
            books = await book_crud.get_published_since(db, since, limit=limit)
            return await self._summaries(db, books)
