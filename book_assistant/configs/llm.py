"""
LLM configuration settings.

Model selection and call bounds for the completion provider.

Dependencies: pydantic_settings
System role: Completion provider configuration
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from book_assistant.configs.base import BaseSettings


class LLMSettings(BaseSettings):
    """Chat model configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="LLM_",
        case_sensitive=False,
        extra="ignore",
    )

    model_id: str = Field(
        default="gemini-2.5-flash",
        description="Google Generative AI chat model identifier",
    )
    temperature: float = Field(
        default=0.7,
        ge=0.0,
        le=2.0,
        description="Sampling temperature",
    )
    timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Upper bound for one completion round trip, tool calls included",
    )
