"""
Langfuse prompt registry module.

Versions LangChain chat templates in Langfuse with model configuration.

Dependencies: langfuse, langchain_core, pydantic
System role: Prompt version management and LangChain integration
"""

from book_assistant.observability.prompt_registry.models import ModelConfig
from book_assistant.observability.prompt_registry.registry import PromptRegistry

__all__ = ["PromptRegistry", "ModelConfig"]
