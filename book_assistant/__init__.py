"""Book recommendation assistant backend."""
