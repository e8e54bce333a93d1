"""Tests for BookAssistantAgent orchestration.

Covers the blank-message greeting, history bounding, block parsing with
embedded-JSON recovery and plain-text degradation, provider failures and
timeouts, tool-name deduplication and query log recording.

Dependencies: pytest, pytest-asyncio
System role: Verification of one assistant turn end to end (provider faked)
"""

import asyncio
import json

import pytest

from book_assistant.core.agentic_system.agent.book_agent import (
    FALLBACK_MESSAGE,
    GENERIC_ERROR_MESSAGE,
    GREETING_MESSAGE,
    MESSAGE_HISTORY_LIMIT,
    NOT_FOUND_MESSAGE,
    PROVIDER_ERROR_MESSAGE,
    BookAssistantAgent,
    apology_for,
    bound_history,
)
from book_assistant.core.exceptions import (
    BookNotFoundError,
    CompletionTimeoutError,
    ProviderError,
)


def _history(count: int) -> list[dict[str, str]]:
    roles = ("user", "assistant")
    return [{"role": roles[i % 2], "content": f"turn {i}"} for i in range(count)]


@pytest.fixture
def agent(fake_provider, fake_query_log) -> BookAssistantAgent:
    """Agent over a fake provider and in-memory query log, no tools."""
    return BookAssistantAgent(
        completion_provider=fake_provider,
        query_log=fake_query_log,
        tools=[],
    )


# ============================================================================
# History bounding
# ============================================================================


class TestBoundHistory:
    """Test bound_history() truncation."""

    def test_keeps_everything_under_limit(self) -> None:
        working = bound_history(_history(3), "new")

        assert len(working) == 4
        assert working[-1] == {"role": "user", "content": "new"}

    def test_drops_oldest_first(self) -> None:
        """24 prior turns plus the message keep the most recent 20."""
        working = bound_history(_history(24), "new")

        assert len(working) == MESSAGE_HISTORY_LIMIT
        assert working[0]["content"] == "turn 5"
        assert working[-1]["content"] == "new"

    def test_does_not_mutate_input(self) -> None:
        history = _history(2)

        bound_history(history, "new")

        assert len(history) == 2

    def test_custom_limit(self) -> None:
        working = bound_history(_history(10), "new", limit=3)

        assert [m["content"] for m in working] == ["turn 8", "turn 9", "new"]


class TestApologyFor:
    """Test apology selection by exception type."""

    def test_provider_error(self) -> None:
        assert apology_for(ProviderError("boom")) == PROVIDER_ERROR_MESSAGE

    def test_timeout_is_provider_error(self) -> None:
        assert apology_for(CompletionTimeoutError(30)) == PROVIDER_ERROR_MESSAGE

    def test_not_found(self) -> None:
        assert apology_for(BookNotFoundError("123")) == NOT_FOUND_MESSAGE

    def test_anything_else(self) -> None:
        assert apology_for(RuntimeError("db down")) == GENERIC_ERROR_MESSAGE


# ============================================================================
# process_query
# ============================================================================


class TestProcessQueryBlankMessage:
    """Blank input short-circuits to the greeting."""

    @pytest.mark.parametrize("message", ["", "   ", None])
    async def test_blank_message_returns_greeting(
        self, agent, fake_provider, fake_query_log, message
    ) -> None:
        result = await agent.process_query(message)

        assert result.success is True
        assert result.message == GREETING_MESSAGE
        assert result.blocks[0].content == {"markdown": GREETING_MESSAGE}
        assert result.tools_used == []
        assert fake_provider.calls == []
        assert fake_query_log.records == []


class TestProcessQueryParsed:
    """Completions that are block documents."""

    async def test_text_block_reply(self, agent, fake_provider, fake_query_log) -> None:
        """A single text block becomes the reply and one successful log row."""
        fake_provider.text = '{"blocks":[{"type":"text","content":{"markdown":"Hi"}}]}'

        result = await agent.process_query("Hello")

        assert result.success is True
        assert result.message == "Hi"
        assert len(result.blocks) == 1
        assert result.error is None
        assert len(fake_query_log.records) == 1
        record = fake_query_log.records[0]
        assert record["query_text"] == "Hello"
        assert record["response_text"] == "Hi"
        assert record["success"] is True
        assert record["response_time_ms"] >= 0

    async def test_book_only_reply_uses_summary(self, agent, fake_provider) -> None:
        fake_provider.text = json.dumps({
            "blocks": [{"type": "book_list", "content": {"books": [{"isbn": "1"}, {"isbn": "2"}]}}]
        })

        result = await agent.process_query("Recommend two books")

        assert result.message == "I showed you 2 book recommendations."
        assert result.blocks[0].type == "book_list"

    async def test_empty_document_uses_fallback(self, agent, fake_provider) -> None:
        fake_provider.text = '{"blocks":[]}'

        result = await agent.process_query("Anything?")

        assert result.success is True
        assert result.message == FALLBACK_MESSAGE
        assert result.blocks == []

    async def test_embedded_json_is_recovered(self, agent, fake_provider, fake_query_log) -> None:
        """JSON wrapped in prose is still parsed and logged as success."""
        fake_provider.text = (
            'Sure! {"blocks":[{"type":"text","content":{"markdown":"Try Dune"}}]} Enjoy.'
        )

        result = await agent.process_query("Sci-fi please")

        assert result.message == "Try Dune"
        assert fake_query_log.records[0]["success"] is True


class TestProcessQueryUnparsed:
    """Completions that are not block documents degrade to text."""

    async def test_plain_text_degrades_to_text_block(
        self, agent, fake_provider, fake_query_log
    ) -> None:
        fake_provider.text = "not json"

        result = await agent.process_query("Hello")

        assert result.success is True
        assert result.message == "not json"
        assert [b.model_dump() for b in result.blocks] == [
            {"type": "text", "content": {"markdown": "not json"}}
        ]
        record = fake_query_log.records[0]
        assert record["success"] is False
        assert record["response_text"] == "not json"

    async def test_invalid_block_type_degrades(self, agent, fake_provider, fake_query_log) -> None:
        fake_provider.text = '{"blocks":[{"type":"bogus","content":{}}]}'

        result = await agent.process_query("Hello")

        assert result.success is True
        assert result.blocks[0].type == "text"
        assert result.message == fake_provider.text
        assert fake_query_log.records[0]["success"] is False

    async def test_empty_completion_uses_fallback(self, agent, fake_provider) -> None:
        fake_provider.text = ""

        result = await agent.process_query("Hello")

        assert result.message == FALLBACK_MESSAGE
        assert result.blocks[0].content == {"markdown": FALLBACK_MESSAGE}

    async def test_deeply_nested_completion_degrades(
        self, agent, fake_provider, fake_query_log
    ) -> None:
        fake_provider.text = "[" * 100000 + "]" * 100000

        result = await agent.process_query("Hello")

        assert result.success is True
        assert result.blocks[0].type == "text"
        assert len(fake_query_log.records) == 1
        assert fake_query_log.records[0]["success"] is False

    async def test_deeply_nested_blocks_object_degrades(
        self, agent, fake_provider, fake_query_log
    ) -> None:
        fake_provider.text = 'Here: {"blocks": ' + "[" * 100000 + "]" * 100000 + "}"

        result = await agent.process_query("Hello")

        assert result.success is True
        assert result.message == fake_provider.text
        assert len(fake_query_log.records) == 1
        assert fake_query_log.records[0]["success"] is False


class TestProcessQueryFailures:
    """Provider failures surface as unsuccessful results."""

    async def test_provider_error(self, agent, fake_provider, fake_query_log) -> None:
        fake_provider.error = ProviderError("quota exceeded")

        result = await agent.process_query("Hello")

        assert result.success is False
        assert result.message == PROVIDER_ERROR_MESSAGE
        assert "quota exceeded" not in result.message
        assert result.error == "quota exceeded"
        assert result.blocks is None
        record = fake_query_log.records[0]
        assert record["success"] is False
        assert record["response_text"] == "quota exceeded"

    async def test_unexpected_error_uses_generic_apology(
        self, agent, fake_provider, fake_query_log
    ) -> None:
        fake_provider.error = RuntimeError("socket closed")

        result = await agent.process_query("Hello")

        assert result.success is False
        assert result.message == GENERIC_ERROR_MESSAGE
        assert result.error == "socket closed"
        assert fake_query_log.records[0]["success"] is False

    async def test_timeout(self, fake_query_log) -> None:
        """A provider slower than the timeout fails fast."""

        class SlowProvider:
            async def run(self, system_prompt, tools, history):
                await asyncio.sleep(5)

        agent = BookAssistantAgent(
            completion_provider=SlowProvider(),
            query_log=fake_query_log,
            tools=[],
            timeout_seconds=0.01,
        )

        result = await agent.process_query("Hello")

        assert result.success is False
        assert result.message == PROVIDER_ERROR_MESSAGE
        assert "timed out" in result.error
        assert fake_query_log.records[0]["success"] is False

    async def test_query_log_failure_does_not_fail_turn(self, fake_provider) -> None:
        """A broken query log is logged, not raised."""

        class BrokenLog:
            async def record(self, **kwargs):
                raise RuntimeError("log table missing")

        fake_provider.text = '{"blocks":[{"type":"text","content":{"markdown":"Hi"}}]}'
        agent = BookAssistantAgent(
            completion_provider=fake_provider,
            query_log=BrokenLog(),
            tools=[],
        )

        result = await agent.process_query("Hello")

        assert result.success is True
        assert result.message == "Hi"


class TestProcessQueryProviderInput:
    """What the provider receives."""

    async def test_history_is_bounded_before_provider(self, agent, fake_provider) -> None:
        """25 prior turns: the most recent 20 entries reach the provider."""
        fake_provider.text = '{"blocks":[]}'

        await agent.process_query("new", history=_history(25))

        sent = fake_provider.calls[0]["history"]
        assert len(sent) == MESSAGE_HISTORY_LIMIT
        assert sent[0]["content"] == "turn 6"
        assert sent[-1] == {"role": "user", "content": "new"}

    async def test_tools_used_deduplicated_in_order(self, agent, fake_provider) -> None:
        fake_provider.text = '{"blocks":[]}'
        fake_provider.tool_call_names = [
            "search_books",
            "get_book_details",
            "search_books",
            "get_similar_books",
        ]

        result = await agent.process_query("Books like Dune")

        assert result.tools_used == ["search_books", "get_book_details", "get_similar_books"]

    async def test_system_prompt_mentions_news_only_when_enabled(
        self, fake_provider, fake_query_log
    ) -> None:
        fake_provider.text = '{"blocks":[]}'
        without_news = BookAssistantAgent(fake_provider, fake_query_log, tools=[])
        with_news = BookAssistantAgent(fake_provider, fake_query_log, tools=[], news_enabled=True)

        await without_news.process_query("Hello")
        await with_news.process_query("Hello")

        assert "search_book_news" not in fake_provider.calls[0]["system_prompt"]
        assert "search_book_news" in fake_provider.calls[1]["system_prompt"]

    async def test_tools_are_passed_through(self, fake_provider, fake_query_log) -> None:
        sentinel_tools = [object(), object()]
        fake_provider.text = '{"blocks":[]}'
        agent = BookAssistantAgent(fake_provider, fake_query_log, tools=sentinel_tools)

        await agent.process_query("Hello")

        assert fake_provider.calls[0]["tools"] == sentinel_tools
