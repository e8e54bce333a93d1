"""
Application adapters.

Exports:
  - ConversationStore: Chat session and message persistence
  - QueryLogAdapter: Assistant query telemetry
  - SqlBookCatalog: Database-backed book catalog for the agent's tools
"""

from book_assistant.application.adapters.book_catalog import SqlBookCatalog
from book_assistant.application.adapters.conversation_store import ConversationStore
from book_assistant.application.adapters.query_log_adapter import QueryLogAdapter

__all__ = ["ConversationStore", "QueryLogAdapter", "SqlBookCatalog"]
