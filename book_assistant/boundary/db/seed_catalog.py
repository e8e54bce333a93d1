"""
Book catalog seeding script.

Loads books (with optional reviews) from a JSON file and precomputes the
pairwise similarity scores the similar-books lookup reads.

Dependencies: sqlalchemy, pydantic, book_assistant.boundary.db.CRUD
System role: Catalog data loading

Usage:
    python -m book_assistant.boundary.db.seed_catalog books.json
"""

import argparse
import asyncio
import itertools
import json
import logging
from datetime import date
from decimal import Decimal
from pathlib import Path

from pydantic import BaseModel, Field, TypeAdapter
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from book_assistant.boundary.db.connection import get_async_session_factory
from book_assistant.boundary.db.CRUD.book_crud import book_crud, similarity_score
from book_assistant.boundary.db.models import BookModel, ReviewModel

logger = logging.getLogger(__name__)


class ReviewSeed(BaseModel):
    rating: int = Field(ge=1, le=5)
    content: str | None = None
    reviewer_name: str | None = None


class BookSeed(BaseModel):
    """One catalog entry as it appears in a seed file."""

    isbn: str
    title: str
    author: str
    publisher: str | None = None
    description: str | None = None
    price: Decimal | None = None
    genres: list[str] = Field(default_factory=list)
    rating: Decimal = Decimal("0.0")
    page_count: int | None = None
    language: str = "en"
    published_at: date | None = None
    availability_status: str = "available"
    is_trending: bool = False
    trending_score: int = 0
    image_url: str | None = None
    thumbnail_url: str | None = None
    reviews: list[ReviewSeed] = Field(default_factory=list)


class SeedResult(BaseModel):
    books_created: int = 0
    books_skipped: int = 0
    similarities_stored: int = 0


def load_seed_file(path: Path) -> list[BookSeed]:
    """
    Read and validate a seed file holding a JSON array of books.

    Raises:
        OSError: If the file cannot be read
        ValidationError: If an entry does not match BookSeed
    """
    raw = json.loads(path.read_text(encoding="utf-8"))
    return TypeAdapter(list[BookSeed]).validate_python(raw)


async def _store_similarities(session: AsyncSession, books: list[BookModel]) -> int:
    stored = 0
    for book, other in itertools.combinations(books, 2):
        if similarity_score(book, other) > 0:
            await book_crud.store_similarity(session, book, other)
            stored += 1
    return stored


async def seed_catalog(
    entries: list[BookSeed],
    session_factory: async_sessionmaker[AsyncSession] | None = None,
) -> SeedResult:
    """
    Insert books not yet in the catalog and refresh similarity scores.

    Books are matched by ISBN; existing ones are left untouched. Similarities
    are recomputed over the whole catalog and stored for every pair with a
    non-zero score, in both directions. Runs in one transaction.

    Args:
        entries: Validated seed entries
        session_factory: Session factory (defaults to the application's)

    Returns:
        SeedResult: Counts of created and skipped books and stored pairs
    """
    factory = session_factory or get_async_session_factory()
    result = SeedResult()

    async with factory() as session:
        try:
            for entry in entries:
                if await book_crud.get_by_isbn(session, entry.isbn) is not None:
                    result.books_skipped += 1
                    continue

                book = await book_crud.create(session, **entry.model_dump(exclude={"reviews"}))
                session.add_all(
                    ReviewModel(book_id=book.id, **review.model_dump())
                    for review in entry.reviews
                )
                result.books_created += 1

            await session.flush()
            books = list(await book_crud.get_all(session, limit=None))
            result.similarities_stored = await _store_similarities(session, books)
            await session.commit()
        except Exception:
            await session.rollback()
            raise

    logger.info(
        f"{__name__}:seed_catalog - created={result.books_created} "
        f"skipped={result.books_skipped} similarities={result.similarities_stored}"
    )
    return result


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed the book catalog from a JSON file")
    parser.add_argument("path", type=Path, help="JSON array of books")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO)
    asyncio.run(seed_catalog(load_seed_file(args.path)))


if __name__ == "__main__":
    main()
