"""
Chat session models and schemas.

Dependencies: pydantic
System role: Chat session API contracts
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class ChatMessageResponse(BaseModel):
    """Single chat message in history."""

    model_config = ConfigDict(from_attributes=True)

    role: str = Field(description="Message role: 'user', 'assistant' or 'system'")
    content: str = Field(description="Message content")
    position: int = Field(description="1-based order within the session")
    created_at: datetime


class ChatSessionSummary(BaseModel):
    """Chat session without its messages."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    session_number: int
    display_name: str
    messages_count: int
    last_activity_at: datetime
    created_at: datetime


class ChatSessionDetail(ChatSessionSummary):
    """Chat session with its messages in order."""

    messages: list[ChatMessageResponse] = Field(default_factory=list)


class ChatSessionListResponse(BaseModel):
    """Sessions, most recently active first."""

    sessions: list[ChatSessionSummary]
    total: int
