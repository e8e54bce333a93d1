"""
Book assistant agent module.

Provides the book recommendation agent, its completion provider and tools.
Supports Langfuse prompt registry integration.

Dependencies: langchain, langchain_google_genai, book_assistant.core.blocks
System role: Agent module exports
"""

from book_assistant.core.agentic_system.agent.book_agent import BookAssistantAgent
from book_assistant.core.agentic_system.agent.book_agent_prompt import (
    build_system_prompt,
    register_book_agent_prompt,
)
from book_assistant.core.agentic_system.agent.book_agent_schema import (
    AssistantResult,
    CompletionResult,
)
from book_assistant.core.agentic_system.agent.book_agent_tool import (
    BookCatalog,
    build_tools,
    create_catalog_tools,
    create_news_tool,
)
from book_assistant.core.agentic_system.agent.completion_provider import (
    CompletionProvider,
    LangChainCompletionProvider,
)

__all__ = [
    "BookAssistantAgent",
    "AssistantResult",
    "CompletionResult",
    "BookCatalog",
    "CompletionProvider",
    "LangChainCompletionProvider",
    "build_system_prompt",
    "build_tools",
    "create_catalog_tools",
    "create_news_tool",
    "register_book_agent_prompt",
]
