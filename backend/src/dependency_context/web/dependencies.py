"""Shared state handed to route handlers."""

from ..core import EmbedderCache

# One loaded model per model name for the whole server process
embedder_cache = EmbedderCache()


def get_embedder_cache() -> EmbedderCache:
    return embedder_cache
