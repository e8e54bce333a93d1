"""
API test fixtures.

The in-memory database is created and used entirely on the TestClient's
event loop (through its blocking portal) so aiosqlite never crosses loops.
"""

import pytest
from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from book_assistant.api import api_router
from book_assistant.api.deps import get_chat_service, get_conversation_store
from book_assistant.application.adapters.conversation_store import ConversationStore
from book_assistant.application.adapters.query_log_adapter import QueryLogAdapter
from book_assistant.application.services.chat_service import ChatService
from book_assistant.boundary.db import get_async_db
from book_assistant.boundary.db.base import Base
from book_assistant.core.agentic_system.agent.book_agent import BookAssistantAgent
import book_assistant.boundary.db.models  # noqa: F401


@pytest.fixture
def api_engine():
    """Async SQLite engine; connections are opened lazily on the client's loop."""
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

    return engine


@pytest.fixture
def app(api_engine, fake_provider) -> FastAPI:
    """FastAPI app with the API router, test database and fake completion provider."""
    app = FastAPI()
    app.include_router(api_router, prefix="/api/v1")

    session_factory = async_sessionmaker(
        api_engine,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )

    async def override_get_async_db():
        async with session_factory() as session:
            yield session

    def override_get_chat_service(
        db: AsyncSession = Depends(get_async_db),
        store: ConversationStore = Depends(get_conversation_store),
    ) -> ChatService:
        agent = BookAssistantAgent(
            completion_provider=fake_provider,
            query_log=QueryLogAdapter(db),
            tools=[],
        )
        return ChatService(store=store, agent=agent)

    app.dependency_overrides[get_async_db] = override_get_async_db
    app.dependency_overrides[get_chat_service] = override_get_chat_service
    return app


@pytest.fixture
def client(app: FastAPI, api_engine) -> TestClient:
    """TestClient with tables created on its own event loop."""

    async def create_tables():
        async with api_engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    with TestClient(app) as test_client:
        test_client.portal.call(create_tables)
        yield test_client
        test_client.portal.call(api_engine.dispose)
