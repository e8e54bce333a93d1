"""
FastAPI middleware for observability.

CorrelationMiddleware binds one correlation ID per request and echoes it in
the response; RequestLoggingMiddleware logs each request with its status and
duration. Health probes are logged at DEBUG so they do not drown the log.

Dependencies: fastapi, starlette, book_assistant.observability.correlation
System role: Request/response observability injection
"""

import logging
import time

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from book_assistant.observability.correlation import (
    clear_correlation_id,
    set_correlation_id,
)

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"
QUIET_PATH_SUFFIXES = ("/health", "/health/db")


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs method, path, status and duration of every request."""

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        method, path = request.method, request.url.path
        level = logging.DEBUG if path.endswith(QUIET_PATH_SUFFIXES) else logging.INFO
        fields = {"method": method, "path": path}

        try:
            response: Response = await call_next(request)
        except Exception as e:
            logger.exception(
                f"{method} {path} - unhandled {type(e).__name__}",
                extra={**fields, "process_time_ms": _elapsed_ms(started)},
            )
            raise

        logger.log(
            level,
            f"{method} {path} - {response.status_code} in {_elapsed_ms(started)}ms",
            extra={**fields, "status_code": response.status_code},
        )
        return response


class CorrelationMiddleware(BaseHTTPMiddleware):
    """Binds the inbound X-Correlation-ID (or a new one) for the request."""

    async def dispatch(self, request: Request, call_next):
        correlation_id = set_correlation_id(request.headers.get(CORRELATION_HEADER))
        try:
            response: Response = await call_next(request)
        finally:
            clear_correlation_id()
        response.headers[CORRELATION_HEADER] = correlation_id
        return response
