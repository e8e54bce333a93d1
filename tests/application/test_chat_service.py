"""
Test suite for ChatService.

Tests one chat turn over a real ConversationStore (in-memory SQLite) with
the agent mocked: history handed to the agent, persistence of both sides
of the turn and blank-message handling.

System role: Verification of chat service orchestration layer
"""

from unittest.mock import AsyncMock

import pytest

from book_assistant.application.adapters.conversation_store import ConversationStore
from book_assistant.application.services.chat_service import ChatService
from book_assistant.application.services.user_service import UserService
from book_assistant.core.agentic_system.agent.book_agent import (
    FALLBACK_MESSAGE,
    GREETING_MESSAGE,
)
from book_assistant.core.agentic_system.agent.book_agent_schema import AssistantResult
from book_assistant.core.blocks import text_block


def _result(message: str, success: bool = True) -> AssistantResult:
    return AssistantResult(
        success=success,
        message=message,
        blocks=[text_block(message)] if success else None,
        tools_used=["search_books"] if success else [],
        timestamp_ms=1_700_000_000_000,
        error=None if success else "provider down",
    )


@pytest.fixture
def store(test_async_db) -> ConversationStore:
    return ConversationStore(test_async_db)


@pytest.fixture
def mock_agent() -> AsyncMock:
    """Provide mock book assistant agent."""
    agent = AsyncMock()
    agent.process_query.return_value = _result("Try Mistborn.")
    return agent


@pytest.fixture
def chat_service(store, mock_agent) -> ChatService:
    return ChatService(store=store, agent=mock_agent)


@pytest.fixture
async def chat_session(test_async_db, store):
    user = await UserService(test_async_db).find_or_create_by_identifier("alice")
    return await store.create_session(user)


class TestProcessMessage:
    async def test_stores_both_sides_of_turn(
        self, chat_service, store, chat_session, mock_agent
    ) -> None:
        result = await chat_service.process_message(chat_session, "Any fantasy?")

        assert result.message == "Try Mistborn."
        history = await store.format_for_completion(chat_session.id)
        assert history == [
            {"role": "user", "content": "Any fantasy?"},
            {"role": "assistant", "content": "Try Mistborn."},
        ]

    async def test_agent_gets_prior_history_only(
        self, chat_service, chat_session, mock_agent
    ) -> None:
        """The new message is passed separately, not duplicated in history."""
        await chat_service.process_message(chat_session, "First question")
        mock_agent.process_query.return_value = _result("Second answer")

        await chat_service.process_message(chat_session, "Second question")

        args, kwargs = mock_agent.process_query.call_args
        assert args[0] == "Second question"
        assert kwargs["history"] == [
            {"role": "user", "content": "First question"},
            {"role": "assistant", "content": "Try Mistborn."},
        ]
        assert kwargs["session_id"] == str(chat_session.id)

    async def test_blank_message_not_stored(
        self, chat_service, store, chat_session, mock_agent
    ) -> None:
        mock_agent.process_query.return_value = _result(GREETING_MESSAGE)

        await chat_service.process_message(chat_session, "   ")

        messages = await store.get_messages(chat_session.id)
        assert [(m.role, m.content) for m in messages] == [("assistant", GREETING_MESSAGE)]

    async def test_failed_turn_stores_apology(
        self, chat_service, store, chat_session, mock_agent
    ) -> None:
        mock_agent.process_query.return_value = _result("Sorry, try again.", success=False)

        result = await chat_service.process_message(chat_session, "Hello")

        assert result.success is False
        messages = await store.get_messages(chat_session.id)
        assert [m.content for m in messages] == ["Hello", "Sorry, try again."]

    async def test_blank_reply_stores_fallback(
        self, chat_service, store, chat_session, mock_agent
    ) -> None:
        mock_agent.process_query.return_value = _result("")

        await chat_service.process_message(chat_session, "Hello")

        messages = await store.get_messages(chat_session.id)
        assert messages[-1].content == FALLBACK_MESSAGE

    async def test_counters_updated(self, chat_service, store, chat_session, test_async_db) -> None:
        user = await UserService(test_async_db).find_or_create_by_identifier("alice")

        await chat_service.process_message(chat_session, "Hello")

        refreshed = await store.get_session(user, chat_session.id)
        assert refreshed.messages_count == 2
