from . import indexing, search

__all__ = ["indexing", "search"]
