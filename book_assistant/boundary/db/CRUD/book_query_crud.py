"""
Book query CRUD operations.

Dependencies: sqlalchemy, book_assistant.boundary.db.models
System role: Query log persistence operations
"""

from sqlalchemy.ext.asyncio import AsyncSession

from book_assistant.boundary.db.models.book_query_model import BookQueryModel
from book_assistant.boundary.db.CRUD.base_crud import BaseCRUD

ERROR_MESSAGE_MAX_LENGTH = 1024


class BookQueryCRUD(BaseCRUD[BookQueryModel]):
    """CRUD operations for BookQueryModel."""

    def __init__(self) -> None:
        """Initialize BookQueryCRUD with BookQueryModel."""
        super().__init__(BookQueryModel)

    async def log_query(
        self,
        session: AsyncSession,
        query_text: str,
        response_text: str | None,
        success: bool,
        response_time_ms: int | None = None,
    ) -> BookQueryModel:
        """
        Record one assistant invocation.

        For failed queries the response text doubles as the error message.

        Args:
            session: Async database session
            query_text: The user's message
            response_text: Extracted text, raw completion or error message
            success: Whether the invocation succeeded
            response_time_ms: Elapsed wall-clock milliseconds

        Returns:
            Created BookQueryModel
        """
        error_message = None
        if not success and response_text is not None:
            error_message = response_text[:ERROR_MESSAGE_MAX_LENGTH]

        return await self.create(
            session,
            query_text=query_text,
            response_text=response_text,
            success=success,
            error_message=error_message,
            response_time_ms=response_time_ms,
        )


book_query_crud = BookQueryCRUD()
