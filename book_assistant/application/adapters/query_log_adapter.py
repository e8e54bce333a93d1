"""
Query log adapter.

Records one row per assistant invocation and commits it.

Dependencies: book_assistant.boundary.db.CRUD.book_query_crud
System role: Query telemetry persistence for the assistant agent
"""

from sqlalchemy.ext.asyncio import AsyncSession

from book_assistant.boundary.db.CRUD.book_query_crud import book_query_crud


class QueryLogAdapter:
    """Persists assistant query outcomes through BookQueryCRUD."""

    def __init__(self, db: AsyncSession) -> None:
        """
        Initialize query log adapter.

        Args:
            db: AsyncSession for database operations
        """
        self.db = db

    async def record(
        self,
        query_text: str,
        response_text: str | None,
        success: bool,
        response_time_ms: int | None = None,
    ) -> None:
        """
        Store and commit one query log entry.

        Args:
            query_text: The user's message
            response_text: Extracted text, raw completion or error message
            success: Whether the invocation succeeded
            response_time_ms: Elapsed wall-clock milliseconds
        """
        try:
            await book_query_crud.log_query(
                self.db,
                query_text=query_text,
                response_text=response_text,
                success=success,
                response_time_ms=response_time_ms,
            )
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
