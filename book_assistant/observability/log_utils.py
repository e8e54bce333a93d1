"""
Logging utilities for safe structured logging.

Renders arbitrary values for log lines without raising, without dumping
whole collections or completions, and without leaking secrets such as
session access tokens or API keys.

Dependencies: logging (stdlib)
System role: Logging helper functions
"""

import logging
from typing import Any

REDACTED = "***"
SENSITIVE_KEY_PARTS = ("token", "key", "secret", "password")


def is_sensitive(key: str) -> bool:
    """True if a context key names a credential."""
    lowered = key.lower()
    return any(part in lowered for part in SENSITIVE_KEY_PARTS)


def safe_log_value(value: Any, max_length: int = 500) -> str:
    """
    Render a value for a log line.

    Collections are summarized by size; long strings are truncated.

    Args:
        value: Value to render
        max_length: Characters kept before truncating

    Returns:
        str: Printable representation, never raises
    """
    try:
        if value is None:
            return "None"
        if isinstance(value, (list, tuple)):
            rendered = f"{type(value).__name__}({len(value)} items)"
        elif isinstance(value, dict):
            rendered = f"dict({len(value)} keys)"
        else:
            rendered = value if isinstance(value, str) else str(value)
    except Exception as e:
        return f"<unable to log: {type(e).__name__}>"

    if len(rendered) > max_length:
        return rendered[:max_length] + f"... (truncated, {len(rendered)} total)"
    return rendered


def log_exception_with_context(
    logger: logging.Logger,
    message: str,
    exc: BaseException,
    **context,
) -> None:
    """
    Log an exception with its type, message and context at ERROR level.

    Call from inside the except block so the traceback is attached. Context
    values whose key names a credential are replaced by "***".

    Args:
        logger: Logger instance
        message: Log message
        exc: Exception instance
        **context: Extra key-value pairs, also attached to the record
    """
    fields = {
        key: REDACTED if is_sensitive(key) else safe_log_value(value)
        for key, value in context.items()
    }
    fields["error_type"] = type(exc).__name__
    fields["error_msg"] = safe_log_value(str(exc))
    details = " ".join(f"{key}={value}" for key, value in fields.items())
    logger.exception(f"{message} | {details}", extra=fields)
