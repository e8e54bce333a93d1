"""Application layer: persistence adapters and use-case services."""
