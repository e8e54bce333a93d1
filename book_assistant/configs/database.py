"""
Database configuration settings.

PostgreSQL connection parameters for the async SQLAlchemy engine that backs
users, chat sessions, chat messages, query logs and the book catalog.
`POSTGRES_URL` overrides the assembled URL (e.g. a local
`sqlite+aiosqlite:///./books.db`, which needs the `sqlite` extra).

Dependencies: pydantic, pydantic_settings
System role: Database connection configuration for ORM
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from book_assistant.configs.base import BaseSettings


class DatabaseSettings(BaseSettings):
    """Connection settings read from POSTGRES_* variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="POSTGRES_",
        case_sensitive=False,
        extra="ignore",
    )

    url: str | None = Field(default=None, description="Full async URL, overrides the parts below")
    host: str = Field(default="localhost")
    port: int = Field(default=5432)
    user: str = Field(default="postgres")
    password: str = Field(default="postgres")
    db: str = Field(default="book_assistant", description="Database name")

    pool_size: int = Field(default=10, gt=0)
    max_overflow: int = Field(default=20, ge=0)
    pool_timeout: int = Field(default=30, gt=0, description="Seconds to wait for a pooled connection")
    echo_sql: bool = Field(default=False, description="Echo SQL statements to logs")

    sslmode: Literal["disable", "require"] = Field(default="disable")

    @property
    def async_database_url(self) -> str:
        """
        SQLAlchemy async URL: the override, or an asyncpg URL from the parts.

        asyncpg takes `ssl=require` rather than libpq's `sslmode`.
        """
        if self.url:
            return self.url
        ssl_param = "?ssl=require" if self.sslmode == "require" else ""
        return (
            f"postgresql+asyncpg://{self.user}:{self.password}"
            f"@{self.host}:{self.port}/{self.db}{ssl_param}"
        )

    @property
    def is_sqlite(self) -> bool:
        return self.async_database_url.startswith("sqlite")
