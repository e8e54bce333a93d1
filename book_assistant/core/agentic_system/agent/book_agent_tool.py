"""
Book assistant tools.

Defines the closed set of catalog tools the agent may call, each returning
a uniform {"success", <data-key>, "error"?} envelope, plus the optional
news lookup tool offered only when a NewsAPI key is configured.

Dependencies: langchain_core.tools, httpx
System role: Tool layer between the agent and the book catalog
"""

import logging
from typing import Any, Awaitable, Callable, Protocol

import httpx
from langchain_core.tools import BaseTool, tool

from book_assistant.core.exceptions import NotFoundError
from book_assistant.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)

NEWS_API_URL = "https://newsapi.org/v2/everything"

BookDict = dict[str, Any]


class BookCatalog(Protocol):
    """Read-only book catalog queried by the agent's tools."""

    async def search_by_title(self, query: str, limit: int = 10) -> list[BookDict]: ...

    async def search_by_author(self, query: str, limit: int = 10) -> list[BookDict]: ...

    async def search_by_isbn(self, isbn: str, limit: int = 10) -> list[BookDict]: ...

    async def get_details(self, isbn: str) -> BookDict: ...

    async def get_similar(self, isbn: str, limit: int = 5) -> list[BookDict]: ...

    async def get_trending(self, limit: int = 10) -> list[BookDict]: ...

    async def get_by_genre(self, genre: str, limit: int = 10) -> list[BookDict]: ...

    async def get_highly_rated(self, limit: int = 10, min_rating: float = 4.0) -> list[BookDict]: ...

    async def get_recent(self, limit: int = 10, months_ago: int = 12) -> list[BookDict]: ...


async def _envelope(
    tool_name: str,
    data_key: str,
    call: Callable[[], Awaitable[Any]],
) -> dict[str, Any]:
    """
    Run a catalog call and wrap its outcome.

    Args:
        tool_name: Tool name for logs
        data_key: Key holding the data on success ("books" or "book")
        call: Coroutine factory performing the catalog query

    Returns:
        dict: {"success": True, data_key: ...} or {"success": False, "error": ...}
    """
    try:
        data = await call()
    except NotFoundError as e:
        logger.info(f"{__name__}:{tool_name} - {e.message}")
        return {"success": False, "error": e.message}
    except Exception as e:
        log_exception_with_context(logger, f"{__name__}:{tool_name} - Catalog query failed", e)
        return {"success": False, "error": f"Catalog query failed: {type(e).__name__}"}

    if isinstance(data, list):
        logger.info(f"{__name__}:{tool_name} - {len(data)} results")
    return {"success": True, data_key: data}


def create_catalog_tools(catalog: BookCatalog, max_results: int = 10) -> list[BaseTool]:
    """
    Create the catalog tools bound to a catalog instance.

    Args:
        catalog: Book catalog implementation
        max_results: Result cap for title/author/ISBN searches

    Returns:
        list[BaseTool]: Tools in a fixed order
    """

    @tool
    async def search_books(
        query: str,
        search_type: str = "title",
    ) -> dict:
        """Search for books by title, author, or ISBN.

        Args:
            query: The search query
            search_type: Type of search: "title", "author" or "isbn"
        """
        searches = {
            "title": catalog.search_by_title,
            "author": catalog.search_by_author,
            "isbn": catalog.search_by_isbn,
        }
        search = searches.get(search_type)
        if search is None:
            return {"success": False, "error": f"Invalid search type: {search_type}"}
        return await _envelope(
            "search_books",
            "books",
            lambda: search(query, limit=max_results),
        )

    @tool
    async def get_book_details(isbn: str) -> dict:
        """Get detailed information about a specific book, including reviews.

        Args:
            isbn: The ISBN of the book
        """
        return await _envelope("get_book_details", "book", lambda: catalog.get_details(isbn))

    @tool
    async def get_similar_books(isbn: str, limit: int = 5) -> dict:
        """Find books similar to a given book.

        Args:
            isbn: The ISBN of the book
            limit: Maximum number of similar books to return
        """
        return await _envelope(
            "get_similar_books",
            "books",
            lambda: catalog.get_similar(isbn, limit=limit),
        )

    @tool
    async def get_trending_books(limit: int = 10) -> dict:
        """Get currently trending or popular books.

        Args:
            limit: Maximum number of books to return
        """
        return await _envelope(
            "get_trending_books",
            "books",
            lambda: catalog.get_trending(limit=limit),
        )

    @tool
    async def get_books_by_genre(genre: str, limit: int = 10) -> dict:
        """Get books by specific genre.

        Args:
            genre: The genre to search for
            limit: Maximum number of books to return
        """
        return await _envelope(
            "get_books_by_genre",
            "books",
            lambda: catalog.get_by_genre(genre, limit=limit),
        )

    @tool
    async def get_highly_rated_books(limit: int = 10, min_rating: float = 4.0) -> dict:
        """Get books with high ratings (4.0 or above by default).

        Args:
            limit: Maximum number of books to return
            min_rating: Minimum rating threshold
        """
        return await _envelope(
            "get_highly_rated_books",
            "books",
            lambda: catalog.get_highly_rated(limit=limit, min_rating=min_rating),
        )

    @tool
    async def get_recent_books(limit: int = 10, months_ago: int = 12) -> dict:
        """Get recently published books.

        Args:
            limit: Maximum number of books to return
            months_ago: How many months back to search
        """
        return await _envelope(
            "get_recent_books",
            "books",
            lambda: catalog.get_recent(limit=limit, months_ago=months_ago),
        )

    return [
        search_books,
        get_book_details,
        get_similar_books,
        get_trending_books,
        get_books_by_genre,
        get_highly_rated_books,
        get_recent_books,
    ]


def create_news_tool(
    api_key: str,
    timeout_seconds: float = 10.0,
    page_size: int = 5,
    transport: httpx.AsyncBaseTransport | None = None,
) -> BaseTool:
    """
    Create the NewsAPI lookup tool.

    Args:
        api_key: NewsAPI key
        timeout_seconds: HTTP timeout per request
        page_size: Articles per lookup
        transport: Optional httpx transport (tests)

    Returns:
        BaseTool: search_book_news tool
    """

    @tool
    async def search_book_news(query: str) -> dict:
        """Search recent news about books, authors, literary awards and bestseller lists.

        Args:
            query: News search query, e.g. "new book releases fantasy"
        """
        logger.info(f"{__name__}:search_book_news - START query_len={len(query)}")
        try:
            async with httpx.AsyncClient(timeout=timeout_seconds, transport=transport) as client:
                response = await client.get(
                    NEWS_API_URL,
                    params={
                        "q": query,
                        "pageSize": page_size,
                        "sortBy": "publishedAt",
                        "language": "en",
                    },
                    headers={"X-Api-Key": api_key},
                )
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"{__name__}:search_book_news - NewsAPI returned {e.response.status_code}")
            return {"success": False, "error": f"News lookup failed with status {e.response.status_code}"}
        except httpx.RequestError as e:
            logger.error(f"{__name__}:search_book_news - NewsAPI connection error: {type(e).__name__}")
            return {"success": False, "error": "News lookup failed: connection error"}

        articles = [
            {
                "title": article.get("title"),
                "source": (article.get("source") or {}).get("name"),
                "url": article.get("url"),
                "published_at": article.get("publishedAt"),
                "description": article.get("description"),
            }
            for article in payload.get("articles") or []
        ]
        logger.info(f"{__name__}:search_book_news - END articles={len(articles)}")
        return {"success": True, "articles": articles}

    return search_book_news


def build_tools(
    catalog: BookCatalog,
    news_api_key: str | None = None,
    max_results: int = 10,
) -> list[BaseTool]:
    """Catalog tools, plus the news tool when a NewsAPI key is configured."""
    tools = create_catalog_tools(catalog, max_results=max_results)
    if news_api_key:
        tools.append(create_news_tool(news_api_key))
    return tools
