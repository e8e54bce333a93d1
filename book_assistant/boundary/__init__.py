"""Boundary adapters: relational persistence."""
