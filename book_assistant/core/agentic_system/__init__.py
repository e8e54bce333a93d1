"""Agentic system: the book recommendation agent."""
