"""
Chat service for book assistant conversations.

Orchestrates one chat turn: history retrieval, agent invocation and
message persistence.

Dependencies: book_assistant.core.agentic_system, book_assistant.application.adapters
System role: Chat service orchestration layer
"""

import logging

from book_assistant.application.adapters.conversation_store import ConversationStore
from book_assistant.boundary.db.models.chat_session_model import ChatSessionModel
from book_assistant.core.agentic_system.agent.book_agent import (
    FALLBACK_MESSAGE,
    BookAssistantAgent,
)
from book_assistant.core.agentic_system.agent.book_agent_schema import AssistantResult

logger = logging.getLogger(__name__)


class ChatService:
    """
    Chat service for book assistant conversations.

    Coordinates chat history retrieval, agent invocation and persistence of
    both sides of the turn.
    """

    def __init__(
        self,
        store: ConversationStore,
        agent: BookAssistantAgent,
    ) -> None:
        """
        Initialize chat service.

        Args:
            store: Conversation store for the request
            agent: Book assistant agent instance
        """
        self.store = store
        self.agent = agent

    async def process_message(
        self,
        chat_session: ChatSessionModel,
        message: str | None,
    ) -> AssistantResult:
        """
        Process a chat message through the full conversation flow.

        Flow:
        1. Fetch the session's prior history
        2. Store the user message (blank messages are not stored)
        3. Invoke the agent with the message and prior history
        4. Store the assistant reply
        5. Return the agent result

        Args:
            chat_session: Resolved session for the request
            message: User's message

        Returns:
            AssistantResult: Reply, blocks, tools used and status
        """
        session_id = chat_session.id
        history = await self.store.format_for_completion(session_id)

        if message and message.strip():
            await self.store.append_message(session_id, "user", message)

        result = await self.agent.process_query(
            message,
            history=history,
            session_id=str(session_id),
        )

        reply = result.message if result.message and result.message.strip() else FALLBACK_MESSAGE
        await self.store.append_message(session_id, "assistant", reply)

        logger.info(
            f"{__name__}:process_message - session_id={session_id} success={result.success} "
            f"history_len={len(history)}"
        )
        return result
