"""
Completion provider.

Runs one tool-calling conversation turn against the chat model with
LangChain v1 create_agent and reports the final text plus the tools the
model used.

Dependencies: langchain.agents, langchain_core, langchain_google_genai
System role: LLM adapter behind the book assistant agent
"""

import logging
from typing import Any, Protocol, Sequence

from langchain.agents import create_agent
from langchain_core.language_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from langchain_core.tools import BaseTool
from langchain_google_genai import ChatGoogleGenerativeAI

from book_assistant.core.agentic_system.agent.book_agent_schema import CompletionResult
from book_assistant.core.exceptions import ProviderError

logger = logging.getLogger(__name__)

_MESSAGE_TYPES: dict[str, type[BaseMessage]] = {
    "user": HumanMessage,
    "assistant": AIMessage,
    "system": SystemMessage,
}


class CompletionProvider(Protocol):
    """Runs the model with tools over a bounded history."""

    async def run(
        self,
        system_prompt: str,
        tools: Sequence[BaseTool],
        history: Sequence[dict[str, str]],
    ) -> CompletionResult: ...


def to_langchain_messages(history: Sequence[dict[str, str]]) -> list[BaseMessage]:
    """
    Convert role/content pairs to LangChain messages.

    Entries with an unknown role are skipped.
    """
    messages: list[BaseMessage] = []
    for entry in history:
        message_type = _MESSAGE_TYPES.get(str(entry.get("role", "")))
        if message_type is None:
            logger.debug(f"{__name__}:to_langchain_messages - Skipping role={entry.get('role')}")
            continue
        messages.append(message_type(content=entry.get("content", "")))
    return messages


def message_text(message: BaseMessage) -> str:
    """Text of a message whose content is a string or a list of content parts."""
    content: Any = message.content
    if isinstance(content, str):
        return content
    parts = []
    for part in content or []:
        if isinstance(part, str):
            parts.append(part)
        elif isinstance(part, dict) and part.get("type") == "text":
            parts.append(str(part.get("text", "")))
    return "".join(parts)


def tool_call_names(messages: Sequence[BaseMessage]) -> list[str]:
    """Names of tools called by AI messages, deduplicated in order of first use."""
    names: list[str] = []
    for message in messages:
        if not isinstance(message, AIMessage):
            continue
        for call in message.tool_calls or []:
            name = call.get("name")
            if name and name not in names:
                names.append(name)
    return names


class LangChainCompletionProvider:
    """
    Completion provider backed by a LangChain tool-calling agent.

    A fresh agent graph is built per call so the system prompt and tool set
    can differ between calls; the chat model client is shared.
    """

    def __init__(
        self,
        model: BaseChatModel | None = None,
        model_id: str = "gemini-2.5-flash",
        temperature: float = 0.7,
    ) -> None:
        """
        Initialize provider.

        Args:
            model: Chat model to use (built from model_id when None)
            model_id: Google Generative AI model identifier
            temperature: Sampling temperature
        """
        self._model = model or ChatGoogleGenerativeAI(
            model=model_id,
            temperature=temperature,
        )

    async def run(
        self,
        system_prompt: str,
        tools: Sequence[BaseTool],
        history: Sequence[dict[str, str]],
    ) -> CompletionResult:
        """
        Run the agent until it produces a final answer.

        Args:
            system_prompt: Rendered system prompt
            tools: Tools the model may call
            history: Bounded role/content history ending with the user message

        Returns:
            CompletionResult: Final text and tool names used

        Raises:
            ProviderError: If the model or agent call fails
        """
        agent = create_agent(
            model=self._model,
            tools=list(tools),
            system_prompt=system_prompt,
        )

        try:
            result = await agent.ainvoke({"messages": to_langchain_messages(history)})
        except Exception as e:
            logger.error(f"{__name__}:run - Agent call failed: {type(e).__name__}: {e}")
            raise ProviderError(str(e) or type(e).__name__) from e

        messages: list[BaseMessage] = result.get("messages", [])
        final = next(
            (m for m in reversed(messages) if isinstance(m, AIMessage)),
            None,
        )
        text = message_text(final) if final is not None else ""
        names = tool_call_names(messages)
        logger.info(f"{__name__}:run - END text_len={len(text)} tools_used={names}")
        return CompletionResult(text=text, tool_call_names=names)
