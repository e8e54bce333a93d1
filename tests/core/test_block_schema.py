"""Tests for the block response contract.

Tests all components:
- block_schema.py: parse, validate, key normalization, JSON schema
- response_extractor.py: extract_text, summarize, extract_embedded_json
- block_builders.py: catalog summaries to card/list blocks

Dependencies: pytest, pydantic
System role: Structured response parsing and text derivation
"""

import json

import pytest

from book_assistant.core.blocks import (
    Block,
    BlockDocument,
    BlockType,
    VALID_BLOCK_TYPES,
    block_json_schema,
    book_to_card_block,
    books_to_list_block,
    extract_embedded_json,
    extract_text,
    parse,
    summarize,
    text_block,
    validate,
)
from book_assistant.core.exceptions import (
    BlockSchemaError,
    InvalidBlockTypeError,
    MalformedJsonError,
)


@pytest.fixture
def sample_book() -> dict:
    """Catalog book summary."""
    return {
        "isbn": "9780441013593",
        "title": "Dune",
        "author": "Frank Herbert",
        "genres": ["Science Fiction", "Classic"],
        "rating": 4.5,
        "review_count": 3,
        "price": 9.99,
        "published_at": "1965-08-01",
        "image_url": "https://example.com/dune.jpg",
    }


# ============================================================================
# Parsing and validation
# ============================================================================


class TestParse:
    """Test parse() of completions into BlockDocument."""

    def test_parse_single_text_block(self) -> None:
        """Should parse a text block document."""
        document = parse('{"blocks":[{"type":"text","content":{"markdown":"Hi"}}]}')

        assert len(document.blocks) == 1
        assert document.blocks[0].type == "text"
        assert document.blocks[0].content == {"markdown": "Hi"}

    def test_parse_empty_blocks_is_valid(self) -> None:
        """A document with zero blocks parses and validates."""
        document = parse('{"blocks": []}')

        assert document.blocks == []
        validate(document)

    def test_parse_missing_blocks_key_yields_empty_document(self) -> None:
        """An object without blocks is an empty document."""
        assert parse("{}").blocks == []

    def test_parse_rejects_unknown_block_type(self) -> None:
        """Unknown type raises InvalidBlockTypeError naming the type."""
        with pytest.raises(InvalidBlockTypeError) as exc_info:
            parse('{"blocks":[{"type":"bogus","content":{}}]}')

        assert exc_info.value.block_type == "bogus"
        assert "bogus" in exc_info.value.message

    def test_parse_without_validation_keeps_unknown_type(self) -> None:
        """validate=False represents unknown types as-is."""
        document = parse('{"blocks":[{"type":"bogus","content":{}}]}', validate=False)

        assert document.blocks[0].type == "bogus"

    @pytest.mark.parametrize(
        "text",
        ["not json", "", "[1, 2]", '"blocks"', '{"blocks": "nope"}', '{"blocks": [1]}'],
    )
    def test_parse_malformed_raises(self, text: str) -> None:
        """Non-object or badly shaped JSON raises MalformedJsonError."""
        with pytest.raises(MalformedJsonError):
            parse(text)

    def test_parse_deep_nesting_raises_malformed(self) -> None:
        """Nesting beyond the interpreter's recursion limit is malformed input."""
        with pytest.raises(MalformedJsonError):
            parse("[" * 100000 + "]" * 100000)
        with pytest.raises(MalformedJsonError):
            parse('{"blocks": ' + "[" * 100000 + "]" * 100000 + "}")

    def test_malformed_json_is_block_schema_error(self) -> None:
        """Both parse failures share the BlockSchemaError base."""
        with pytest.raises(BlockSchemaError):
            parse("not json")

    def test_parse_normalizes_camel_case_keys(self) -> None:
        """camelCase keys are read as snake_case."""
        document = parse(json.dumps({
            "blocks": [{
                "type": "book_card",
                "content": {"isbn": "1", "title": "T", "author": "A", "imageUrl": "u"},
            }]
        }))

        assert document.blocks[0].content["image_url"] == "u"
        assert "imageUrl" not in document.blocks[0].content

    def test_parse_non_object_content_becomes_empty(self) -> None:
        """Content that is not an object is replaced by {}."""
        document = parse('{"blocks":[{"type":"text","content":"Hi"}]}')

        assert document.blocks[0].content == {}


class TestValidate:
    """Test validate() against the block vocabulary."""

    def test_validate_accepts_all_known_types(self) -> None:
        """Every BlockType value validates."""
        document = BlockDocument(blocks=[Block(type=t.value, content={}) for t in BlockType])

        validate(document)

    def test_validate_reports_first_invalid_type(self) -> None:
        """The first unknown type is the one reported."""
        document = BlockDocument(blocks=[
            Block(type="text", content={"markdown": "ok"}),
            Block(type="bogus", content={}),
            Block(type="worse", content={}),
        ])

        with pytest.raises(InvalidBlockTypeError) as exc_info:
            validate(document)

        assert exc_info.value.block_type == "bogus"

    def test_vocabulary_contents(self) -> None:
        assert VALID_BLOCK_TYPES == {"text", "book_card", "book_list", "book_spotlight", "image"}

    def test_json_schema_lists_block_types(self) -> None:
        schema = block_json_schema()

        declared = set()
        for definition in schema["$defs"].values():
            type_schema = definition.get("properties", {}).get("type", {})
            if "const" in type_schema:
                declared.add(type_schema["const"])
            declared.update(type_schema.get("enum", []))

        assert declared == VALID_BLOCK_TYPES
        assert schema["required"] == ["blocks"]
        assert "discriminator" in schema["properties"]["blocks"]["items"]

    def test_json_schema_describes_content_fields(self) -> None:
        defs = block_json_schema()["$defs"]

        assert "key_themes" in defs["BookSpotlightContent"]["properties"]
        assert "isbn" in defs["BookCardContent"]["required"]
        assert defs["TextContent"]["required"] == ["markdown"]


# ============================================================================
# Text derivation
# ============================================================================


class TestExtractText:
    """Test extract_text() over mixed documents."""

    def test_joins_text_blocks_in_order(self) -> None:
        """Text blocks are joined by a blank line, other blocks skipped."""
        blocks = [
            Block(type="text", content={"markdown": "A"}),
            Block(type="book_card", content={"isbn": "1", "title": "T", "author": "X"}),
            Block(type="text", content={"markdown": "B"}),
        ]

        assert extract_text(blocks) == "A\n\nB"

    def test_no_text_blocks_is_empty(self) -> None:
        blocks = [Block(type="book_list", content={"books": [{}, {}]})]

        assert extract_text(blocks) == ""

    def test_none_and_empty(self) -> None:
        assert extract_text(None) == ""
        assert extract_text([]) == ""


class TestSummarize:
    """Test summarize() fallback sentences."""

    def test_book_list_summary(self) -> None:
        """A two-book list is described by its count."""
        blocks = [Block(type="book_list", content={"books": [{"isbn": "1"}, {"isbn": "2"}]})]

        assert summarize(blocks) == "I showed you 2 book recommendations."

    def test_card_and_spotlight_summary(self) -> None:
        """Each non-text block contributes one sentence."""
        blocks = [
            Block(type="book_card", content={"title": "Dune", "author": "Frank Herbert"}),
            Block(type="book_spotlight", content={"title": "Emma"}),
        ]

        assert summarize(blocks) == (
            "I recommended Dune by Frank Herbert. "
            "I provided detailed information about Emma."
        )

    def test_text_only_has_no_summary(self) -> None:
        assert summarize([Block(type="text", content={"markdown": "Hi"})]) == ""
        assert summarize(None) == ""


class TestExtractEmbeddedJson:
    """Test recovery of JSON wrapped in prose."""

    def test_recovers_object_from_prose(self) -> None:
        """The embedded object is returned verbatim and parses."""
        payload = '{"blocks":[{"type":"text","content":{"markdown":"Hi"}}]}'
        text = f"Here are your books:\n{payload}\nEnjoy!"

        embedded = extract_embedded_json(text)

        assert embedded == payload
        assert parse(embedded).blocks[0].content["markdown"] == "Hi"

    def test_skips_leading_braces_without_blocks(self) -> None:
        """An earlier object without blocks is not chosen."""
        payload = '{"blocks":[]}'
        text = f'Note {{"a": 1}} then {payload}'

        assert extract_embedded_json(text) == payload

    def test_returns_none_without_blocks_key(self) -> None:
        assert extract_embedded_json("plain prose {not json}") is None
        assert extract_embedded_json("") is None
        assert extract_embedded_json(None) is None

    def test_falls_back_to_greedy_span(self) -> None:
        """Undecodable candidates still yield the greedy span."""
        text = 'prefix {"blocks": [oops]} suffix'

        embedded = extract_embedded_json(text)

        assert embedded == '{"blocks": [oops]}'
        with pytest.raises(MalformedJsonError):
            parse(embedded)

    def test_deep_nesting_falls_back_to_greedy_span(self) -> None:
        payload = '{"blocks": ' + "[" * 100000 + "]" * 100000 + "}"

        assert extract_embedded_json(f"Here: {payload}") == payload


# ============================================================================
# Builders
# ============================================================================


class TestBlockBuilders:
    """Test block builders from catalog summaries."""

    def test_text_block(self) -> None:
        block = text_block("Hello")

        assert block.type == "text"
        assert block.content == {"markdown": "Hello"}

    def test_book_to_card_block(self, sample_book: dict) -> None:
        """Card content copies catalog fields and drops extras."""
        block = book_to_card_block(sample_book)

        assert block.type == "book_card"
        assert block.content["isbn"] == "9780441013593"
        assert block.content["genres"] == ["Science Fiction", "Classic"]
        assert block.content["description"] is None
        assert "review_count" not in block.content

    def test_books_to_list_block(self, sample_book: dict) -> None:
        """List block holds one card per book and summarizes by count."""
        other = dict(sample_book, isbn="2", title="Children of Dune")

        block = books_to_list_block([sample_book, other], title="Dune saga")

        assert block.type == "book_list"
        assert block.content["title"] == "Dune saga"
        assert [b["title"] for b in block.content["books"]] == ["Dune", "Children of Dune"]
        assert summarize([block]) == "I showed you 2 book recommendations."
