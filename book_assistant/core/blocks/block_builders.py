"""
Block builders.

Turn catalog book summaries into block content so book cards rendered from
catalog data match what the model is asked to produce.

Dependencies: book_assistant.core.blocks.block_schema
System role: Producer-side helpers for the block protocol
"""

from collections.abc import Iterable, Mapping
from typing import Any

from book_assistant.core.blocks.block_schema import (
    Block,
    BlockType,
    BookCardContent,
    BookListContent,
    TextContent,
)


def text_block(markdown: str) -> Block:
    """Wrap markdown in a text block."""
    return Block(
        type=BlockType.TEXT.value,
        content=TextContent(markdown=markdown).model_dump(),
    )


def book_card_content(book: Mapping[str, Any]) -> BookCardContent:
    """
    Build card content from a catalog book summary.

    Args:
        book: Summary or detail mapping as returned by the catalog

    Returns:
        BookCardContent: Card content with missing optional fields left empty
    """
    return BookCardContent(
        isbn=str(book["isbn"]),
        title=str(book["title"]),
        author=str(book["author"]),
        rating=book.get("rating"),
        genres=list(book.get("genres") or []),
        price=book.get("price"),
        image_url=book.get("image_url"),
        description=book.get("description"),
    )


def book_to_card_block(book: Mapping[str, Any]) -> Block:
    """Build a book_card block from a catalog book summary."""
    return Block(
        type=BlockType.BOOK_CARD.value,
        content=book_card_content(book).model_dump(),
    )


def books_to_list_block(
    books: Iterable[Mapping[str, Any]],
    title: str | None = None,
) -> Block:
    """
    Build a book_list block from catalog book summaries.

    Args:
        books: Catalog book summaries
        title: Optional list heading

    Returns:
        Block: book_list block holding one card per book
    """
    content = BookListContent(
        title=title,
        books=[book_card_content(book) for book in books],
    )
    return Block(type=BlockType.BOOK_LIST.value, content=content.model_dump())
