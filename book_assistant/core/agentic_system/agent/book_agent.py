"""
Book assistant agent.

Turns one user message into one assistant turn: bounds the history, runs
the completion provider with the catalog tools, interprets the completion
as a block document and records the outcome in the query log.

Dependencies: book_assistant.core.blocks, book_assistant.core.agentic_system.agent
System role: Book assistant orchestration
"""

import asyncio
import logging
import time
from typing import Protocol, Sequence

from langchain_core.tools import BaseTool

from book_assistant.core.agentic_system.agent.book_agent_prompt import build_system_prompt
from book_assistant.core.agentic_system.agent.book_agent_schema import AssistantResult
from book_assistant.core.agentic_system.agent.completion_provider import CompletionProvider
from book_assistant.core.blocks.block_builders import text_block
from book_assistant.core.blocks.block_schema import Block, parse
from book_assistant.core.blocks.response_extractor import (
    extract_embedded_json,
    extract_text,
    summarize,
)
from book_assistant.core.exceptions import (
    BlockSchemaError,
    CompletionTimeoutError,
    NotFoundError,
    ProviderError,
)
from book_assistant.observability.log_utils import log_exception_with_context, safe_log_value

logger = logging.getLogger(__name__)

MESSAGE_HISTORY_LIMIT = 20

GREETING_MESSAGE = "How can I help you find books today?"
FALLBACK_MESSAGE = "I've found some book recommendations for you."
PROVIDER_ERROR_MESSAGE = "I'm having trouble connecting to the AI service. Please try again later."
NOT_FOUND_MESSAGE = "I couldn't find the book you're looking for."
GENERIC_ERROR_MESSAGE = "I encountered an error while processing your request. Please try again."


class QueryLog(Protocol):
    """Sink for one telemetry record per assistant invocation."""

    async def record(
        self,
        query_text: str,
        response_text: str | None,
        success: bool,
        response_time_ms: int | None = None,
    ) -> None: ...


def bound_history(
    history: Sequence[dict[str, str]] | None,
    message: str,
    limit: int = MESSAGE_HISTORY_LIMIT,
) -> list[dict[str, str]]:
    """
    Append the user message and keep only the most recent entries.

    Args:
        history: Prior role/content turns, oldest first
        message: New user message
        limit: Maximum number of entries kept

    Returns:
        list[dict]: At most `limit` entries ending with the user message
    """
    working = [dict(entry) for entry in history or []]
    working.append({"role": "user", "content": message})
    return working[-limit:]


def apology_for(exc: BaseException) -> str:
    """User-facing message for a failed turn."""
    if isinstance(exc, ProviderError):
        return PROVIDER_ERROR_MESSAGE
    if isinstance(exc, NotFoundError):
        return NOT_FOUND_MESSAGE
    return GENERIC_ERROR_MESSAGE


def _now_ms() -> int:
    return int(time.time() * 1000)


def _elapsed_ms(started: float) -> int:
    return round((time.perf_counter() - started) * 1000)


class BookAssistantAgent:
    """
    Book recommendation agent.

    Holds no conversation state between calls: the caller supplies history
    and persists the returned turn.
    """

    def __init__(
        self,
        completion_provider: CompletionProvider,
        query_log: QueryLog,
        tools: Sequence[BaseTool],
        news_enabled: bool = False,
        history_limit: int = MESSAGE_HISTORY_LIMIT,
        timeout_seconds: float = 30.0,
        use_prompt_registry: bool = False,
        prompt_label: str | None = None,
    ) -> None:
        """
        Initialize the agent.

        Args:
            completion_provider: Runs the model with tools
            query_log: Records one entry per non-blank query
            tools: Tools offered to the model
            news_enabled: Whether the news lookup tool is among the tools
            history_limit: Most recent entries sent to the provider
            timeout_seconds: Upper bound for the provider call
            use_prompt_registry: Whether to fetch the prompt from Langfuse
            prompt_label: Optional label filter when using registry
        """
        self.completion_provider = completion_provider
        self.query_log = query_log
        self.tools = list(tools)
        self.news_enabled = news_enabled
        self.history_limit = history_limit
        self.timeout_seconds = timeout_seconds
        self._use_prompt_registry = use_prompt_registry
        self._prompt_label = prompt_label

    async def process_query(
        self,
        message: str | None,
        history: Sequence[dict[str, str]] | None = None,
        session_id: str | None = None,
    ) -> AssistantResult:
        """
        Answer one user message.

        Flow:
        1. Blank message -> canned greeting, no provider call, nothing logged
        2. Bound history (prior turns + message) to the most recent entries
        3. Run the provider with the system prompt and tools, with a timeout
        4. Parse the completion into blocks, recovering embedded JSON or
           degrading to a single text block
        5. Record the query log entry

        Args:
            message: User's message
            history: Prior role/content turns, oldest first
            session_id: Session identifier for logs

        Returns:
            AssistantResult: success is False only when the provider failed
        """
        if not message or not message.strip():
            return AssistantResult(
                success=True,
                message=GREETING_MESSAGE,
                blocks=[text_block(GREETING_MESSAGE)],
                tools_used=[],
                timestamp_ms=_now_ms(),
            )

        started = time.perf_counter()
        working_history = bound_history(history, message, self.history_limit)
        logger.info(
            f"{__name__}:process_query - START session_id={session_id} "
            f"message_len={len(message)} history_len={len(working_history)}"
        )

        try:
            system_prompt = build_system_prompt(
                news_enabled=self.news_enabled,
                use_registry=self._use_prompt_registry,
                label=self._prompt_label,
            )
            completion = await asyncio.wait_for(
                self.completion_provider.run(system_prompt, self.tools, working_history),
                timeout=self.timeout_seconds,
            )
            blocks, reply, parsed = self._interpret(completion.text)
        except asyncio.TimeoutError:
            return await self._failure(
                message,
                CompletionTimeoutError(self.timeout_seconds),
                started,
                session_id,
            )
        except Exception as e:
            return await self._failure(message, e, started, session_id)

        tools_used = list(dict.fromkeys(completion.tool_call_names))

        await self._record(
            message,
            reply if parsed else completion.text,
            parsed,
            _elapsed_ms(started),
        )
        logger.info(
            f"{__name__}:process_query - END session_id={session_id} parsed={parsed} "
            f"blocks={len(blocks)} tools_used={tools_used}"
        )
        return AssistantResult(
            success=True,
            message=reply,
            blocks=blocks,
            tools_used=tools_used,
            timestamp_ms=_now_ms(),
        )

    def _interpret(self, text: str) -> tuple[list[Block], str, bool]:
        """
        Turn a completion into blocks and a plain-text reply.

        Returns:
            tuple: (blocks, reply text, whether the completion parsed)
        """
        try:
            document = parse(text)
        except BlockSchemaError as e:
            document = None
            failure = e.message
            embedded = extract_embedded_json(text)
            if embedded is not None:
                try:
                    document = parse(embedded)
                    logger.info(f"{__name__}:_interpret - Recovered JSON embedded in prose")
                except BlockSchemaError as embedded_error:
                    failure = embedded_error.message
            if document is None:
                logger.warning(
                    f"{__name__}:_interpret - Completion is not a block document: {failure} "
                    f"text={safe_log_value(text, max_length=200)}"
                )
                reply = text if text and text.strip() else FALLBACK_MESSAGE
                return [text_block(reply)], reply, False

        reply = extract_text(document.blocks) or summarize(document.blocks) or FALLBACK_MESSAGE
        return list(document.blocks), reply, True

    async def _failure(
        self,
        message: str,
        exc: Exception,
        started: float,
        session_id: str | None,
    ) -> AssistantResult:
        log_exception_with_context(
            logger,
            f"{__name__}:process_query - Assistant turn failed",
            exc,
            session_id=session_id,
        )
        await self._record(message, str(exc), False, _elapsed_ms(started))
        return AssistantResult(
            success=False,
            message=apology_for(exc),
            blocks=None,
            tools_used=[],
            timestamp_ms=_now_ms(),
            error=str(exc),
        )

    async def _record(
        self,
        message: str,
        response_text: str | None,
        success: bool,
        response_time_ms: int,
    ) -> None:
        try:
            await self.query_log.record(
                query_text=message,
                response_text=response_text,
                success=success,
                response_time_ms=response_time_ms,
            )
        except Exception as e:
            log_exception_with_context(
                logger,
                f"{__name__}:_record - Query log write failed",
                e,
                success=success,
            )
