"""
Exception hierarchy for the book assistant.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class BookAssistantException(Exception):
    """Base exception for all book assistant errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(BookAssistantException):
    """Raised when input validation fails (role, content, identifier, ...)."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class NotFoundError(BookAssistantException):
    """Raised when a requested resource does not exist for the caller."""


class SessionNotFoundError(NotFoundError):
    """
    Raised when a chat session cannot be found.

    Also raised when the session exists but belongs to another user, so the
    two cases cannot be told apart by the caller.
    """

    def __init__(self, session_id: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize session not found error.

        Args:
            session_id: ID of the missing session
            details: Additional context
        """
        details = details or {}
        details["session_id"] = session_id
        super().__init__(f"Session not found: {session_id}", details)


class BookNotFoundError(NotFoundError):
    """Raised when no book matches an ISBN."""

    def __init__(self, isbn: str) -> None:
        super().__init__("Book not found", {"isbn": isbn})


class BlockSchemaError(BookAssistantException):
    """Base exception for block documents that break the response contract."""


class MalformedJsonError(BlockSchemaError):
    """Raised when a completion is not a JSON block document."""

    def __init__(self, detail: str) -> None:
        super().__init__(f"Invalid JSON: {detail}")
        self.detail = detail


class InvalidBlockTypeError(BlockSchemaError):
    """Raised when a block carries a type outside the block vocabulary."""

    def __init__(self, block_type: Any) -> None:
        super().__init__(f"Invalid block type: {block_type}")
        self.block_type = block_type


class ProviderError(BookAssistantException):
    """Raised when the completion provider fails."""


class CompletionTimeoutError(ProviderError):
    """Raised when the completion provider does not answer in time."""

    def __init__(self, timeout_seconds: float) -> None:
        super().__init__(f"Completion provider timed out after {timeout_seconds:g}s")
        self.timeout_seconds = timeout_seconds
