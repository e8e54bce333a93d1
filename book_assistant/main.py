"""
FastAPI application entry point.

Initializes FastAPI app, registers routers, adds middleware, and configures lifespan.

Dependencies: fastapi, book_assistant.api, book_assistant.observability, book_assistant.configs
System role: Application initialization and configuration
"""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI

from book_assistant.api import api_router
from book_assistant.api.deps import get_service_cache
from book_assistant.boundary.db import get_async_engine
from book_assistant.configs import get_settings
from book_assistant.observability.logger import configure_logging
from book_assistant.observability.middleware import (
    CorrelationMiddleware,
    RequestLoggingMiddleware,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Configures logging, optionally registers the system prompt with the
    prompt registry, and disposes the database pool on shutdown.
    """
    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info("Application startup: logging configured")

    if settings.assistant.use_prompt_registry:
        from book_assistant.core.agentic_system.agent.book_agent_prompt import (
            register_book_agent_prompt,
        )

        try:
            register_book_agent_prompt(
                model_id=settings.llm.model_id,
                temperature=settings.llm.temperature,
                timeout_seconds=settings.llm.timeout_seconds,
                tool_names=[t.name for t in get_service_cache().tools],
                labels=[settings.assistant.prompt_label] if settings.assistant.prompt_label else None,
            )
        except Exception as e:
            logger.exception(
                "Prompt registration failed, continuing with local template",
                extra={"error": str(e)},
            )

    logger.info(
        "Application startup complete: model=%s news_tool=%s",
        settings.llm.model_id,
        bool(settings.assistant.news_api_key),
    )

    yield

    # Shutdown
    get_service_cache().clear()
    await get_async_engine().dispose()
    logger.info("Application shutdown")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application.

    Returns:
        FastAPI: Configured application instance
    """
    app = FastAPI(
        title="Book Assistant API",
        description="Book recommendation chat assistant with per-user conversation history",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Add observability middleware (added first = last to execute)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)

    # Register API routes
    app.include_router(api_router, prefix="/api/v1")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "book_assistant.main:app",
        host="localhost",
        port=8082,
        reload=get_settings().debug,
    )
