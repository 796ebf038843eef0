"""Index dependency documentation and search it by semantic similarity."""

__version__ = "1.2.0"
