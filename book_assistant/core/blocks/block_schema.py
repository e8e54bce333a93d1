"""
Block document schema.

Defines the closed vocabulary of content blocks the assistant may emit, the
typed content shapes producers follow, and parsing/validation of a completion
into a BlockDocument.

Dependencies: pydantic
System role: Structured response contract between the assistant and the UI
"""

import json
import re
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from book_assistant.core.exceptions import InvalidBlockTypeError, MalformedJsonError


class BlockType(str, Enum):
    """Recognized block types."""

    TEXT = "text"
    BOOK_CARD = "book_card"
    BOOK_LIST = "book_list"
    BOOK_SPOTLIGHT = "book_spotlight"
    IMAGE = "image"


VALID_BLOCK_TYPES: frozenset[str] = frozenset(t.value for t in BlockType)


class TextContent(BaseModel):
    """Content of a text block."""

    markdown: str = Field(description="Conversational text in Markdown")


class BookCardContent(BaseModel):
    """Content of a single book recommendation card."""

    isbn: str
    title: str
    author: str
    rating: float | None = None
    genres: list[str] = Field(default_factory=list)
    price: float | None = None
    image_url: str | None = None
    description: str | None = None


class BookListContent(BaseModel):
    """Content of a list of related book cards."""

    title: str | None = None
    books: list[BookCardContent] = Field(default_factory=list)


class BookSpotlightContent(BookCardContent):
    """Content of an in-depth presentation of one book."""

    extended_description: str | None = None
    key_themes: list[str] = Field(default_factory=list)
    why_recommended: str | None = None
    similar_books: list[str] = Field(default_factory=list)


class ImageContent(BaseModel):
    """Content of an image block; extra keys are passed through."""

    model_config = ConfigDict(extra="allow")

    url: str
    alt: str | None = None


class _TextBlock(BaseModel):
    type: Literal["text"]
    content: TextContent


class _BookCardBlock(BaseModel):
    type: Literal["book_card"]
    content: BookCardContent


class _BookListBlock(BaseModel):
    type: Literal["book_list"]
    content: BookListContent


class _BookSpotlightBlock(BaseModel):
    type: Literal["book_spotlight"]
    content: BookSpotlightContent


class _ImageBlock(BaseModel):
    type: Literal["image"]
    content: ImageContent


_TypedBlock = Annotated[
    Union[_TextBlock, _BookCardBlock, _BookListBlock, _BookSpotlightBlock, _ImageBlock],
    Field(discriminator="type"),
]


class _TypedBlockDocument(BaseModel):
    """Producer-side shape of a block document, used only for its schema."""

    model_config = ConfigDict(title="BlockDocument")

    blocks: list[_TypedBlock]


class Block(BaseModel):
    """
    One typed unit of assistant content.

    `type` is kept as a plain string so documents parsed with validation
    disabled can still be represented; `content` is type-specific and is not
    structurally checked at parse time.
    """

    type: str
    content: dict[str, Any] = Field(default_factory=dict)


class BlockDocument(BaseModel):
    """Top-level container for one assistant turn."""

    blocks: list[Block] = Field(default_factory=list)


_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])([A-Z])")


def _normalize_key(key: str) -> str:
    return _CAMEL_BOUNDARY.sub(r"_\1", key).replace("-", "_").lower()


def _normalize_keys(value: Any) -> Any:
    """Recursively convert object keys to snake_case."""
    if isinstance(value, dict):
        return {_normalize_key(str(k)): _normalize_keys(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_normalize_keys(item) for item in value]
    return value


def validate(document: BlockDocument) -> None:
    """
    Check every block type against the block vocabulary.

    A document with no blocks is valid.

    Args:
        document: Parsed block document

    Raises:
        InvalidBlockTypeError: On the first block with an unknown type
    """
    _check_block_types(document)


def _check_block_types(document: BlockDocument) -> None:
    for block in document.blocks or []:
        if block.type not in VALID_BLOCK_TYPES:
            raise InvalidBlockTypeError(block.type)


def parse(json_text: str, validate: bool = True) -> BlockDocument:
    """
    Parse a JSON completion into a BlockDocument.

    Object keys are normalized to snake_case so producers that emit
    camelCase (``imageUrl``) are read the same as ``image_url``.

    Args:
        json_text: Raw JSON text
        validate: Also check block types against the vocabulary

    Returns:
        BlockDocument: Parsed document

    Raises:
        MalformedJsonError: If the text is not a JSON object of blocks
        InvalidBlockTypeError: If validation is on and a block type is unknown
    """
    try:
        raw = json.loads(json_text)
    except (TypeError, ValueError) as e:
        raise MalformedJsonError(str(e)) from e
    except RecursionError as e:
        raise MalformedJsonError("JSON nested too deeply") from e

    if not isinstance(raw, dict):
        raise MalformedJsonError(f"expected a JSON object, got {type(raw).__name__}")

    try:
        raw = _normalize_keys(raw)
    except RecursionError as e:
        raise MalformedJsonError("JSON nested too deeply") from e
    raw_blocks = raw.get("blocks")
    if raw_blocks is None:
        raw_blocks = []
    if not isinstance(raw_blocks, list):
        raise MalformedJsonError("'blocks' must be an array")

    blocks = []
    for index, item in enumerate(raw_blocks):
        if not isinstance(item, dict):
            raise MalformedJsonError(f"block {index} is not an object")
        content = item.get("content")
        blocks.append(
            Block(
                type=str(item.get("type")),
                content=content if isinstance(content, dict) else {},
            )
        )

    document = BlockDocument(blocks=blocks)
    if validate:
        _check_block_types(document)
    return document


def block_json_schema() -> dict[str, Any]:
    """
    JSON schema of a block document, as shown to the model.

    Derived from the typed content models: one variant per block type,
    discriminated by `type`.

    Returns:
        dict: JSON schema with a `$defs` entry per content model
    """
    return _TypedBlockDocument.model_json_schema()
