"""
Chat domain models and schemas.

Request/response schemas for assistant queries.

Dependencies: pydantic, book_assistant.core.blocks
System role: Chat API contracts
"""

from uuid import UUID

from pydantic import BaseModel, Field

from book_assistant.core.blocks.block_schema import Block


class AssistantQueryRequest(BaseModel):
    """Request schema for an assistant query."""

    message: str = Field(default="", description="User message")
    session_id: str | None = Field(
        default=None,
        description="Session to post into (defaults to the current session)",
    )


class AssistantQueryResponse(BaseModel):
    """
    Response schema for an assistant query.

    Failed turns carry only the apology; error detail stays in the logs.
    """

    success: bool
    message: str = Field(description="Plain-text reply")
    blocks: list[Block] | None = Field(default=None, description="Structured reply content")
    tools_used: list[str] = Field(default_factory=list)
    timestamp_ms: int
    session_id: UUID
    session_number: int
