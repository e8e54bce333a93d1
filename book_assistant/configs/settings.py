"""
Unified application settings.

One Settings object holds every section; each section reads its own env
prefix (POSTGRES_, LLM_, BOOK_ASSISTANT_, LANGFUSE_) from the environment
and `.env`.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from pydantic import Field

from book_assistant.configs.assistant import AssistantSettings
from book_assistant.configs.base import BaseSettings
from book_assistant.configs.database import DatabaseSettings
from book_assistant.configs.llm import LLMSettings
from book_assistant.configs.observability import ObservabilitySettings


class Settings(BaseSettings):
    """Application settings: process knobs plus one field per section."""

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    llm: LLMSettings = Field(default_factory=LLMSettings)
    assistant: AssistantSettings = Field(default_factory=AssistantSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)


@lru_cache
def get_settings() -> Settings:
    """
    Process-wide settings, read once.

    Tests that change the environment call `get_settings.cache_clear()`.
    """
    return Settings()
