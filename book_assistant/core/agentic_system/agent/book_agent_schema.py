"""
Book assistant response schemas.

Defines the provider result handed back to the orchestrator and the
caller-facing result of one assistant turn.

Dependencies: pydantic, book_assistant.core.blocks
System role: Agent response schema definitions
"""

from pydantic import BaseModel, Field

from book_assistant.core.blocks.block_schema import Block


class CompletionResult(BaseModel):
    """Final completion of one provider round trip."""

    text: str = Field(default="", description="Final assistant completion text")
    tool_call_names: list[str] = Field(
        default_factory=list,
        description="Tools the model invoked, deduplicated in order of first use",
    )


class AssistantResult(BaseModel):
    """Caller-facing outcome of one assistant turn."""

    success: bool = Field(description="False only when the provider call failed")
    message: str = Field(description="Plain-text reply shown to the user and stored in history")
    blocks: list[Block] | None = Field(
        default=None,
        description="Structured content of the reply",
    )
    tools_used: list[str] = Field(default_factory=list, description="Tool names invoked")
    timestamp_ms: int = Field(description="Completion time, milliseconds since the epoch")
    error: str | None = Field(default=None, description="Diagnostic detail for failed turns")
