"""
Integration tests for catalog seeding.

Seeds books from a JSON file into in-memory SQLite and checks the stored
books, reviews and precomputed similarities.
"""

import json
from decimal import Decimal

import pytest
from pydantic import ValidationError
from sqlalchemy import select

from book_assistant.boundary.db.CRUD.book_crud import book_crud
from book_assistant.boundary.db.models import BookSimilarityModel, ReviewModel
from book_assistant.boundary.db.seed_catalog import load_seed_file, seed_catalog

BOOKS = [
    {
        "isbn": "2001",
        "title": "Dune",
        "author": "Frank Herbert",
        "genres": ["Science Fiction", "Classic"],
        "rating": 4.6,
        "published_at": "1965-08-01",
        "reviews": [{"rating": 5, "content": "Spice."}],
    },
    {
        "isbn": "2002",
        "title": "Dune Messiah",
        "author": "Frank Herbert",
        "genres": ["Science Fiction"],
    },
    {
        "isbn": "2003",
        "title": "Emma",
        "author": "Jane Austen",
        "genres": ["Romance"],
    },
]


@pytest.fixture
def seed_file(tmp_path):
    path = tmp_path / "books.json"
    path.write_text(json.dumps(BOOKS), encoding="utf-8")
    return path


class TestLoadSeedFile:
    def test_parses_entries(self, seed_file) -> None:
        entries = load_seed_file(seed_file)

        assert [e.isbn for e in entries] == ["2001", "2002", "2003"]
        assert entries[0].rating == Decimal("4.6")
        assert entries[0].reviews[0].rating == 5

    def test_rejects_invalid_review_rating(self, tmp_path) -> None:
        path = tmp_path / "bad.json"
        path.write_text(
            json.dumps([{**BOOKS[0], "reviews": [{"rating": 9}]}]),
            encoding="utf-8",
        )

        with pytest.raises(ValidationError):
            load_seed_file(path)


class TestSeedCatalog:
    async def test_books_reviews_and_similarities_stored(
        self, seed_file, test_session_factory
    ) -> None:
        result = await seed_catalog(load_seed_file(seed_file), test_session_factory)

        assert result.books_created == 3
        assert result.books_skipped == 0
        # Only the two Herbert books share a genre
        assert result.similarities_stored == 1

        async with test_session_factory() as session:
            dune = await book_crud.get_by_isbn(session, "2001")
            messiah = await book_crud.get_by_isbn(session, "2002")
            reviews = (await session.execute(select(ReviewModel))).scalars().all()
            pairs = (await session.execute(select(BookSimilarityModel))).scalars().all()
            similar = await book_crud.get_similar(session, dune)

        assert len(reviews) == 1
        assert reviews[0].book_id == dune.id
        assert {(p.book_id, p.similar_book_id) for p in pairs} == {
            (dune.id, messiah.id),
            (messiah.id, dune.id),
        }
        assert all(p.similarity_score == Decimal("0.70") for p in pairs)
        assert [b.isbn for b in similar] == ["2002"]

    async def test_reseeding_skips_existing_books(
        self, seed_file, test_session_factory
    ) -> None:
        entries = load_seed_file(seed_file)
        await seed_catalog(entries, test_session_factory)

        result = await seed_catalog(entries, test_session_factory)

        assert result.books_created == 0
        assert result.books_skipped == 3
        async with test_session_factory() as session:
            pairs = (await session.execute(select(BookSimilarityModel))).scalars().all()
            reviews = (await session.execute(select(ReviewModel))).scalars().all()
        assert len(pairs) == 2
        assert len(reviews) == 1
