"""
Correlation ID context.

One ID per request, carried in a contextvar so log records emitted from any
await point of the request can include it.

Dependencies: contextvars
System role: Request tracing across service boundaries
"""

import uuid
from contextvars import ContextVar

MAX_CORRELATION_ID_LENGTH = 128

correlation_id_ctx: ContextVar[str] = ContextVar("book_assistant_correlation_id", default="")


def set_correlation_id(correlation_id: str | None = None) -> str:
    """
    Bind a correlation ID to the current context.

    Client-supplied IDs are stripped and capped in length; a blank or
    missing ID is replaced by a fresh one.

    Args:
        correlation_id: Inbound ID, typically from the request header

    Returns:
        str: The ID now bound
    """
    value = (correlation_id or "").strip()[:MAX_CORRELATION_ID_LENGTH]
    if not value:
        value = uuid.uuid4().hex
    correlation_id_ctx.set(value)
    return value


def get_correlation_id() -> str:
    """Current correlation ID, "" outside a request."""
    return correlation_id_ctx.get()


def clear_correlation_id() -> None:
    correlation_id_ctx.set("")
