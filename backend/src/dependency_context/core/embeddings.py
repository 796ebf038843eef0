"""Embedding models for semantic search."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Dict, List, Optional

from .errors import EmbeddingFailure

logger = logging.getLogger(__name__)

DEFAULT_EMBEDDING_MODEL = "sentence-transformers/all-MiniLM-L6-v2"


class Embedder:
    """Abstract base class for embedding models."""

    model_name: str = ""

    def embed(self, texts: List[str]) -> List[List[float]]:
        """Embed multiple texts into vectors."""
        raise NotImplementedError

    def embed_one(self, text: str) -> List[float]:
        """Embed a single text into a vector."""
        return self.embed([text])[0]


class SentenceTransformersEmbedder(Embedder):
    """Embedder using SentenceTransformers library.

    The model is loaded lazily on first use and exactly once per instance,
    even when several threads embed concurrently. Vectors are mean-pooled
    by the model and L2-normalized here, so dot product equals cosine
    similarity.
    """

    def __init__(self, model_name: str = DEFAULT_EMBEDDING_MODEL) -> None:
        self.model_name = model_name
        self._model = None
        self._lock = threading.Lock()

    @property
    def loaded(self) -> bool:
        return self._model is not None

    def _get_model(self):
        if self._model is not None:
            return self._model
        with self._lock:
            if self._model is None:
                logger.info(f"Loading embedding model {self.model_name}")
                try:
                    from sentence_transformers import SentenceTransformer  # type: ignore
                    self._model = SentenceTransformer(self.model_name)
                except Exception as e:
                    raise EmbeddingFailure(
                        f"Could not load embedding model {self.model_name!r}: {e}"
                    ) from e
                logger.info(f"Loaded embedding model {self.model_name}")
        return self._model

    def embed(self, texts: List[str]) -> List[List[float]]:
        """Embed texts using SentenceTransformers model."""
        model = self._get_model()
        try:
            arr = model.encode(texts, normalize_embeddings=True, show_progress_bar=False)
        except Exception as e:
            raise EmbeddingFailure(f"Embedding failed with model {self.model_name!r}: {e}") from e
        return [row.tolist() for row in arr]


class EmbedderCache:
    """Hands out one shared embedder per model name.

    Callers that serve many requests (the web app) own one of these, so a
    model is loaded once and a change of model name never returns a stale
    instance.
    """

    def __init__(self, factory: Optional[Callable[[str], Embedder]] = None):
        self._factory = factory or SentenceTransformersEmbedder
        self._embedders: Dict[str, Embedder] = {}
        self._lock = threading.Lock()

    def get(self, model_name: str) -> Embedder:
        with self._lock:
            embedder = self._embedders.get(model_name)
            if embedder is None:
                embedder = self._factory(model_name)
                self._embedders[model_name] = embedder
            return embedder


def make_embedder(cfg: Dict, cache: Optional[EmbedderCache] = None) -> Embedder:
    """Create embedder from config.

    Args:
        cfg: Configuration dictionary
        cache: Optional shared cache to take the embedder from

    Returns:
        Embedder instance (model not loaded until first use)
    """
    model_name = str(cfg.get("embedding_model") or DEFAULT_EMBEDDING_MODEL)
    if cache is not None:
        return cache.get(model_name)
    return SentenceTransformersEmbedder(model_name)
