"""
Book catalog CRUD operations.

Search, ranking and similarity queries behind the assistant's catalog tools.
Read-mostly: the only writer is similarity bookkeeping used when seeding.

Dependencies: sqlalchemy, book_assistant.boundary.db.models
System role: Book catalog query operations
"""

from datetime import date
from decimal import Decimal
from typing import Iterable, Sequence
from uuid import UUID

from sqlalchemy import String, cast, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from book_assistant.boundary.db.models.book_model import (
    BookModel,
    BookSimilarityModel,
    ReviewModel,
)
from book_assistant.boundary.db.CRUD.base_crud import BaseCRUD

AUTHOR_SIMILARITY_BONUS = 0.2


def similarity_score(book: BookModel, other: BookModel) -> Decimal:
    """
    Score two books by genre overlap (Jaccard) plus a same-author bonus.

    Returns:
        Decimal: Score clamped to [0, 1], two decimal places
    """
    genres = set(book.genres or [])
    other_genres = set(other.genres or [])
    if not genres or not other_genres:
        return Decimal("0.00")

    score = len(genres & other_genres) / len(genres | other_genres)
    if book.author == other.author:
        score += AUTHOR_SIMILARITY_BONUS
    score = min(max(score, 0.0), 1.0)
    return Decimal(str(round(score, 2)))


class BookCRUD(BaseCRUD[BookModel]):
    """CRUD operations for BookModel."""

    def __init__(self) -> None:
        """Initialize BookCRUD with BookModel."""
        super().__init__(BookModel)

    async def get_by_isbn(self, session: AsyncSession, isbn: str) -> BookModel | None:
        """Retrieve a book by exact ISBN."""
        stmt = select(BookModel).where(BookModel.isbn == isbn)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def search_by_title(
        self,
        session: AsyncSession,
        query: str,
        limit: int = 10,
    ) -> Sequence[BookModel]:
        """Case-insensitive substring match on title."""
        stmt = (
            select(BookModel)
            .where(BookModel.title.ilike(f"%{query}%"))
            .order_by(BookModel.title)
            .limit(limit)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def search_by_author(
        self,
        session: AsyncSession,
        query: str,
        limit: int = 10,
    ) -> Sequence[BookModel]:
        """Case-insensitive substring match on author."""
        stmt = (
            select(BookModel)
            .where(BookModel.author.ilike(f"%{query}%"))
            .order_by(BookModel.author, BookModel.title)
            .limit(limit)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def get_trending(self, session: AsyncSession, limit: int = 10) -> Sequence[BookModel]:
        """Trending books, highest trending score first."""
        stmt = (
            select(BookModel)
            .where(BookModel.is_trending.is_(True))
            .order_by(BookModel.trending_score.desc())
            .limit(limit)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def get_by_genre(
        self,
        session: AsyncSession,
        genre: str,
        limit: int = 10,
        exclude_id: UUID | None = None,
    ) -> Sequence[BookModel]:
        """
        Books whose genre list mentions the genre (substring, case-insensitive).

        Args:
            session: Async database session
            genre: Genre text to look for
            limit: Maximum number of books
            exclude_id: Book to leave out of the result

        Returns:
            Matching books, best rated first
        """
        stmt = select(BookModel).where(cast(BookModel.genres, String).ilike(f"%{genre}%"))
        if exclude_id is not None:
            stmt = stmt.where(BookModel.id != exclude_id)
        stmt = stmt.order_by(BookModel.rating.desc()).limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def get_highly_rated(
        self,
        session: AsyncSession,
        limit: int = 10,
        min_rating: float = 4.0,
    ) -> Sequence[BookModel]:
        """Books rated at least min_rating, best rated first."""
        stmt = (
            select(BookModel)
            .where(BookModel.rating >= min_rating)
            .order_by(BookModel.rating.desc())
            .limit(limit)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def get_published_since(
        self,
        session: AsyncSession,
        since: date,
        limit: int = 10,
    ) -> Sequence[BookModel]:
        """Books published on or after a date, newest first."""
        stmt = (
            select(BookModel)
            .where(BookModel.published_at >= since)
            .order_by(BookModel.published_at.desc())
            .limit(limit)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def get_similar(
        self,
        session: AsyncSession,
        book: BookModel,
        limit: int = 5,
    ) -> Sequence[BookModel]:
        """
        Books most similar to the given one.

        Uses stored similarity scores, highest first. A book without stored
        similarities falls back to books sharing its first genre.

        Args:
            session: Async database session
            book: Reference book
            limit: Maximum number of books

        Returns:
            Similar books
        """
        stmt = (
            select(BookModel)
            .join(BookSimilarityModel, BookSimilarityModel.similar_book_id == BookModel.id)
            .where(BookSimilarityModel.book_id == book.id)
            .order_by(BookSimilarityModel.similarity_score.desc())
            .limit(limit)
        )
        result = await session.execute(stmt)
        similar = result.scalars().all()
        if similar:
            return similar

        first_genre = (book.genres or [""])[0]
        return await self.get_by_genre(session, first_genre, limit=limit, exclude_id=book.id)

    async def count_similar(self, session: AsyncSession, book_id: UUID) -> int:
        """Number of stored similarities from a book."""
        stmt = select(func.count(BookSimilarityModel.id)).where(
            BookSimilarityModel.book_id == book_id
        )
        result = await session.execute(stmt)
        return int(result.scalar_one())

    async def review_counts(
        self,
        session: AsyncSession,
        book_ids: Iterable[UUID],
    ) -> dict[UUID, int]:
        """
        Review counts for several books in one query.

        Returns:
            dict: book id -> review count (books without reviews are absent)
        """
        ids = list(book_ids)
        if not ids:
            return {}
        stmt = (
            select(ReviewModel.book_id, func.count(ReviewModel.id))
            .where(ReviewModel.book_id.in_(ids))
            .group_by(ReviewModel.book_id)
        )
        result = await session.execute(stmt)
        return {book_id: int(count) for book_id, count in result.all()}

    async def get_reviews(
        self,
        session: AsyncSession,
        book_id: UUID,
        limit: int = 3,
    ) -> Sequence[ReviewModel]:
        """Most recent reviews of a book."""
        stmt = (
            select(ReviewModel)
            .where(ReviewModel.book_id == book_id)
            .order_by(ReviewModel.created_at.desc())
            .limit(limit)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def store_similarity(
        self,
        session: AsyncSession,
        book: BookModel,
        other: BookModel,
    ) -> Decimal:
        """
        Compute and store the similarity of two books in both directions.

        Existing pairs are updated in place.

        Returns:
            Decimal: The stored score
        """
        score = similarity_score(book, other)
        for source, target in ((book, other), (other, book)):
            stmt = select(BookSimilarityModel).where(
                BookSimilarityModel.book_id == source.id,
                BookSimilarityModel.similar_book_id == target.id,
            )
            existing = (await session.execute(stmt)).scalar_one_or_none()
            if existing is None:
                session.add(
                    BookSimilarityModel(
                        book_id=source.id,
                        similar_book_id=target.id,
                        similarity_score=score,
                    )
                )
            else:
                existing.similarity_score = score
        await session.flush()
        return score


book_crud = BookCRUD()
