"""
Shared test fixtures and configuration for entire test suite.

Provides: In-memory async database, session factory, fake agent collaborators
Dependencies: pytest, sqlalchemy, aiosqlite
System role: Test infrastructure and fixture management
"""

import uuid
from typing import Sequence

import pytest
from langchain_core.tools import BaseTool


@pytest.fixture
async def test_engine():
    """
    Create an in-memory SQLite async engine with all tables.

    Foreign keys are switched on per connection so ON DELETE CASCADE
    behaves as it does on PostgreSQL.

    Yields:
        AsyncEngine: Engine bound to a single shared connection
    """
    from sqlalchemy import event
    from sqlalchemy.ext.asyncio import create_async_engine
    from sqlalchemy.pool import StaticPool

    from book_assistant.boundary.db.base import Base
    import book_assistant.boundary.db.models  # noqa: F401

    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def test_session_factory(test_engine):
    """Session factory over the test engine, configured like the application's."""
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    return async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )


@pytest.fixture
async def test_async_db(test_session_factory):
    """
    Create an async session on the in-memory database.

    Yields:
        AsyncSession: Test database session with cleanup
    """
    async with test_session_factory() as session:
        yield session
        await session.rollback()


class FakeCompletionProvider:
    """Completion provider returning a canned result and recording its calls."""

    def __init__(self, text: str = "", tool_call_names: Sequence[str] = (), error: Exception | None = None):
        self.text = text
        self.tool_call_names = list(tool_call_names)
        self.error = error
        self.calls: list[dict] = []

    async def run(self, system_prompt: str, tools: Sequence[BaseTool], history):
        from book_assistant.core.agentic_system.agent.book_agent_schema import CompletionResult

        self.calls.append(
            {"system_prompt": system_prompt, "tools": list(tools), "history": list(history)}
        )
        if self.error is not None:
            raise self.error
        return CompletionResult(text=self.text, tool_call_names=self.tool_call_names)


class FakeQueryLog:
    """Query log keeping records in memory."""

    def __init__(self):
        self.records: list[dict] = []

    async def record(self, query_text, response_text, success, response_time_ms=None):
        self.records.append(
            {
                "query_text": query_text,
                "response_text": response_text,
                "success": success,
                "response_time_ms": response_time_ms,
            }
        )


@pytest.fixture
def fake_provider() -> FakeCompletionProvider:
    """Provider answering with an empty completion unless configured."""
    return FakeCompletionProvider()


@pytest.fixture
def fake_query_log() -> FakeQueryLog:
    """In-memory query log."""
    return FakeQueryLog()


@pytest.fixture
def session_id():
    """Generate a test session ID."""
    return uuid.uuid4()
