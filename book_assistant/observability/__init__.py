"""
Observability module.

Provides logging configuration, correlation ID tracking, request logging
middleware and prompt version management.
"""
