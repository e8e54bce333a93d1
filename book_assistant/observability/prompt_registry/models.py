"""
Pydantic models for prompt registry configuration.

Dependencies: pydantic
System role: Configuration validation for prompt-model pairs
"""

from typing import Any

from pydantic import BaseModel, Field


class ModelConfig(BaseModel):
    """
    Completion setup stored with a prompt version.

    Records what the prompt was tuned against: the chat model, its sampling
    settings, the call timeout and the tool names offered to the model.
    """

    model: str = Field(description="Chat model identifier, e.g. gemini-2.5-flash")
    temperature: float | None = Field(default=None, ge=0.0, le=2.0)
    max_tokens: int | None = Field(default=None, gt=0)
    timeout_seconds: float | None = Field(default=None, gt=0)
    tools: list[str] = Field(default_factory=list, description="Tool names offered to the model")
    extra: dict[str, Any] | None = Field(default=None, description="Model-specific parameters")

    def to_langfuse_config(self) -> dict[str, Any]:
        """Config dict for Langfuse prompt creation, unset fields omitted."""
        config = self.model_dump(exclude_none=True, exclude={"extra", "tools"})
        if self.tools:
            config["tools"] = list(self.tools)
        if self.extra:
            config.update(self.extra)
        return config
