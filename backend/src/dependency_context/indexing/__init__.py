"""Indexing functionality for dependency-context."""

from .base import Indexer
from .indexer import DefaultIndexer, index_documentation

__all__ = [
    "Indexer",
    "DefaultIndexer",
    "index_documentation",
]
