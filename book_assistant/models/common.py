"""
Shared response models.

Dependencies: pydantic
System role: Common API response structures
"""

from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Liveness or dependency check result."""

    status: Literal["healthy"] = "healthy"
    message: str = Field(description="What was checked")


class StatusResponse(BaseModel):
    """Acknowledgement for actions without a payload."""

    success: bool = True
