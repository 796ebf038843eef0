"""Core functionality for dependency-context."""

from .models import (
    Dependency,
    Document,
    IndexReport,
    Record,
    RecordMetadata,
    Repository,
    SearchResult,
)
from .errors import (
    DependencyContextError,
    EmbeddingFailure,
    InvalidInput,
    NotIndexed,
    StorageReadFailure,
    StorageWriteFailure,
)
from .chunking import Chunker, MarkdownChunker, split_into_chunks, make_chunker, count_tokens
from .embeddings import (
    DEFAULT_EMBEDDING_MODEL,
    Embedder,
    EmbedderCache,
    SentenceTransformersEmbedder,
    make_embedder,
)

__all__ = [
    "Dependency",
    "Document",
    "IndexReport",
    "Record",
    "RecordMetadata",
    "Repository",
    "SearchResult",
    "DependencyContextError",
    "EmbeddingFailure",
    "InvalidInput",
    "NotIndexed",
    "StorageReadFailure",
    "StorageWriteFailure",
    "Chunker",
    "MarkdownChunker",
    "split_into_chunks",
    "make_chunker",
    "count_tokens",
    "DEFAULT_EMBEDDING_MODEL",
    "Embedder",
    "EmbedderCache",
    "SentenceTransformersEmbedder",
    "make_embedder",
]
