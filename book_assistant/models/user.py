"""
User identity models and schemas.

Dependencies: pydantic
System role: Identity API contracts
"""

from uuid import UUID

from pydantic import BaseModel, Field

from book_assistant.models.session import ChatSessionDetail, ChatSessionSummary


class IdentifyRequest(BaseModel):
    """Request schema for claiming a handle."""

    identifier: str = Field(description="Alphanumeric handle, case-insensitive")


class IdentityResponse(BaseModel):
    """Identified user."""

    user_id: UUID
    identifier: str


class AssistantStateResponse(BaseModel):
    """Current caller state: who they are and the conversation in view."""

    identified: bool
    identifier: str | None = None
    current_session: ChatSessionDetail
    sessions: list[ChatSessionSummary] = Field(
        default_factory=list,
        description="All of an identified user's sessions; empty for anonymous callers",
    )
