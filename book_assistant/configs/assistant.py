"""
Book assistant behaviour settings.

Conversation bounds, optional news tool, client cookie names and prompt
registry switches.

Dependencies: pydantic_settings
System role: Assistant feature configuration
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from book_assistant.configs.base import BaseSettings


class AssistantSettings(BaseSettings):
    """Book assistant configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="BOOK_ASSISTANT_",
        case_sensitive=False,
        extra="ignore",
    )

    news_api_key: str | None = Field(
        default=None,
        description="NewsAPI key; the news lookup tool is only offered when set",
    )
    message_history_limit: int = Field(
        default=20,
        gt=0,
        description="Most recent messages sent to the completion provider",
    )
    max_search_results: int = Field(
        default=10,
        gt=0,
        description="Maximum books returned by a title/author search",
    )

    user_cookie_name: str = Field(default="book_assistant_user")
    chat_cookie_name: str = Field(default="book_assistant_chat")
    cookie_secure: bool = Field(default=False, description="Send cookies over HTTPS only")

    use_prompt_registry: bool = Field(
        default=False,
        description="Fetch the system prompt from the Langfuse prompt registry",
    )
    prompt_label: str | None = Field(default=None, description="Prompt registry label")
