"""
Response extraction helpers.

Derives human-readable text from block documents and recovers JSON payloads
that the model wrapped in explanatory prose.

Dependencies: book_assistant.core.blocks.block_schema
System role: Text summary of assistant turns for chat history storage
"""

import json
import re
from collections.abc import Sequence

from book_assistant.core.blocks.block_schema import Block, BlockType

_GREEDY_BLOCKS_OBJECT = re.compile(r"\{.*\"blocks\".*\}", re.DOTALL)


def extract_text(blocks: Sequence[Block] | None) -> str:
    """
    Join the markdown of every text block, in document order.

    Args:
        blocks: Blocks of one assistant turn

    Returns:
        str: Markdown joined by blank lines, empty if there is none
    """
    if not blocks:
        return ""

    parts = []
    for block in blocks:
        if block.type != BlockType.TEXT.value:
            continue
        markdown = block.content.get("markdown")
        if isinstance(markdown, str) and markdown:
            parts.append(markdown)
    return "\n\n".join(parts)


def summarize(blocks: Sequence[Block] | None) -> str:
    """
    Describe non-text blocks in one short sentence each.

    Used when a turn carries book content but no text block.

    Args:
        blocks: Blocks of one assistant turn

    Returns:
        str: Sentences joined by ". " with a trailing period, or ""
    """
    if not blocks:
        return ""

    sentences = []
    for block in blocks:
        content = block.content
        if block.type == BlockType.BOOK_CARD.value:
            sentences.append(
                f"I recommended {content.get('title')} by {content.get('author')}"
            )
        elif block.type == BlockType.BOOK_LIST.value:
            books = content.get("books") or []
            sentences.append(f"I showed you {len(books)} book recommendations")
        elif block.type == BlockType.BOOK_SPOTLIGHT.value:
            sentences.append(
                f"I provided detailed information about {content.get('title')}"
            )

    if not sentences:
        return ""
    return ". ".join(sentences) + "."


def extract_embedded_json(text: str | None) -> str | None:
    """
    Find a JSON block document embedded in surrounding prose.

    Tries each ``{`` in order and returns the first span that decodes as an
    object with a ``blocks`` key. When none decodes, falls back to the greedy
    span from the first ``{`` to the last ``}`` around a ``"blocks"`` key so
    the caller can still attempt a parse.

    Args:
        text: Raw completion text

    Returns:
        str | None: Candidate JSON text verbatim, None if no pattern is present
    """
    if not text or '"blocks"' not in text:
        return None

    decoder = json.JSONDecoder()
    start = text.find("{")
    while start != -1:
        try:
            candidate, end = decoder.raw_decode(text, start)
        except ValueError:
            candidate = None
        except RecursionError:
            # Later starts sit inside the same over-deep value
            break
        if isinstance(candidate, dict) and "blocks" in candidate:
            return text[start:end]
        start = text.find("{", start + 1)

    match = _GREEDY_BLOCKS_OBJECT.search(text)
    return match.group(0) if match else None
