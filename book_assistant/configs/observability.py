"""
Observability configuration settings.

Langfuse credentials for the prompt registry, read from LANGFUSE_* variables.

Dependencies: pydantic_settings
System role: Observability configuration for prompt management
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ObservabilitySettings(BaseSettings):
    """Langfuse connection; the registry stays inactive until both keys are set."""

    model_config = SettingsConfigDict(
        env_prefix="LANGFUSE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    public_key: str | None = Field(default=None)
    secret_key: str | None = Field(default=None)
    host: str = Field(default="http://localhost:3000", description="Langfuse server URL")
    enable_tracing: bool = Field(default=True, description="Master switch for Langfuse")
