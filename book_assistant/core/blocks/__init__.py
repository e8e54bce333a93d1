"""
Structured response protocol.

Block schema, parsing/validation, text extraction and block builders.
"""

from book_assistant.core.blocks.block_builders import (
    book_to_card_block,
    books_to_list_block,
    text_block,
)
from book_assistant.core.blocks.block_schema import (
    VALID_BLOCK_TYPES,
    Block,
    BlockDocument,
    BlockType,
    BookCardContent,
    BookListContent,
    BookSpotlightContent,
    TextContent,
    block_json_schema,
    parse,
    validate,
)
from book_assistant.core.blocks.response_extractor import (
    extract_embedded_json,
    extract_text,
    summarize,
)

__all__ = [
    "VALID_BLOCK_TYPES",
    "Block",
    "BlockDocument",
    "BlockType",
    "BookCardContent",
    "BookListContent",
    "BookSpotlightContent",
    "TextContent",
    "block_json_schema",
    "parse",
    "validate",
    "extract_embedded_json",
    "extract_text",
    "summarize",
    "book_to_card_block",
    "books_to_list_block",
    "text_block",
]
