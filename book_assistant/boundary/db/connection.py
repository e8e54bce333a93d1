"""
Database connection management.

Async engine, session factory and the FastAPI session dependency. One engine
(and pool) per process; one AsyncSession per request.

Dependencies: sqlalchemy, book_assistant.configs
System role: Database connection lifecycle management
"""

from functools import lru_cache
from typing import Any, AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker

from book_assistant.configs import get_settings
from book_assistant.configs.database import DatabaseSettings


def engine_options(db_config: DatabaseSettings) -> dict[str, Any]:
    """
    Keyword arguments for create_async_engine.

    Pool sizing applies to PostgreSQL only; SQLite URLs get SQLAlchemy's
    default pool for the dialect.
    """
    options: dict[str, Any] = {"echo": db_config.echo_sql}
    if not db_config.is_sqlite:
        options.update(
            pool_size=db_config.pool_size,
            max_overflow=db_config.max_overflow,
            pool_timeout=db_config.pool_timeout,
            pool_pre_ping=True,
        )
    return options


@lru_cache
def get_async_engine() -> AsyncEngine:
    """
    Create the process-wide async engine.

    Cached so every request shares one pool; disposed in the app lifespan.

    Returns:
        AsyncEngine: Configured async SQLAlchemy engine
    """
    db_config = get_settings().database
    return create_async_engine(db_config.async_database_url, **engine_options(db_config))


@lru_cache
def get_async_session_factory() -> async_sessionmaker[AsyncSession]:
    """
    Session factory bound to the shared engine.

    expire_on_commit=False keeps committed rows readable after commit;
    autoflush=False leaves flushing to the CRUD layer.

    Returns:
        async_sessionmaker: Async session factory
    """
    return async_sessionmaker(
        bind=get_async_engine(),
        autoflush=False,
        expire_on_commit=False,
    )


async def get_async_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency yielding a request-scoped session.

    Depends caching hands the same session to every provider in one request.

    Yields:
        AsyncSession: Closed when the request finishes
    """
    SessionFactory = get_async_session_factory()
    async with SessionFactory() as session:
        yield session
