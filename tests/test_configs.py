"""Tests for settings loading and engine options."""

import tomllib
from pathlib import Path

import pytest
from pydantic import ValidationError

from book_assistant.boundary.db.connection import engine_options
from book_assistant.configs import Settings
from book_assistant.configs.assistant import AssistantSettings
from book_assistant.configs.database import DatabaseSettings
from book_assistant.configs.llm import LLMSettings


class TestBaseSettings:
    def test_log_level_normalized(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_LEVEL", " debug ")

        assert Settings(_env_file=None).log_level == "DEBUG"

    def test_unknown_log_level_rejected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_LEVEL", "chatty")

        with pytest.raises(ValidationError):
            Settings(_env_file=None)


class TestDatabaseSettings:
    def test_asyncpg_url_from_parts(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("POSTGRES_HOST", "db")
        monkeypatch.setenv("POSTGRES_PASSWORD", "secret")
        monkeypatch.setenv("POSTGRES_SSLMODE", "require")

        settings = DatabaseSettings(_env_file=None)

        assert settings.async_database_url == (
            "postgresql+asyncpg://postgres:secret@db:5432/book_assistant?ssl=require"
        )
        assert not settings.is_sqlite

    def test_url_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("POSTGRES_URL", "sqlite+aiosqlite:///./books.db")

        settings = DatabaseSettings(_env_file=None)

        assert settings.async_database_url == "sqlite+aiosqlite:///./books.db"
        assert settings.is_sqlite

    def test_sqlite_driver_installable_as_extra(self) -> None:
        pyproject = Path(__file__).resolve().parents[1] / "pyproject.toml"
        extras = tomllib.loads(pyproject.read_text(encoding="utf-8"))["project"][
            "optional-dependencies"
        ]

        assert any(dep.startswith("aiosqlite") for dep in extras["sqlite"])

    def test_engine_options_pool_only_for_postgres(self) -> None:
        postgres = engine_options(DatabaseSettings(_env_file=None))
        sqlite = engine_options(DatabaseSettings(_env_file=None, url="sqlite+aiosqlite://"))

        assert postgres["pool_size"] == 10
        assert postgres["pool_pre_ping"] is True
        assert sqlite == {"echo": False}


class TestSectionDefaults:
    def test_llm_defaults(self) -> None:
        llm = LLMSettings(_env_file=None)

        assert llm.temperature == 0.7
        assert llm.timeout_seconds == 30

    def test_assistant_prefix(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("BOOK_ASSISTANT_NEWS_API_KEY", "news-key")

        assistant = AssistantSettings(_env_file=None)

        assert assistant.news_api_key == "news-key"
        assert assistant.message_history_limit == 20
        assert assistant.user_cookie_name == "book_assistant_user"
        assert assistant.chat_cookie_name == "book_assistant_chat"
