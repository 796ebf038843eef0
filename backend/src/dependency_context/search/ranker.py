"""Exhaustive cosine-similarity ranking over in-memory records."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

import numpy as np

from ..core.models import Record, SearchResult

DEFAULT_TOP_K = 5


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Dot product of two vectors divided by the product of their norms.

    Zero vectors have no direction; their similarity to anything is 0.0.
    """
    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)
    if va.shape != vb.shape:
        raise ValueError(f"Vector length mismatch: {va.shape[0]} vs {vb.shape[0]}")
    denom = float(np.linalg.norm(va)) * float(np.linalg.norm(vb))
    if denom == 0.0:
        return 0.0
    return float(np.clip(np.dot(va, vb) / denom, -1.0, 1.0))


def matches_repository(record: Record, repository_filter: Optional[str]) -> bool:
    if not repository_filter:
        return True
    meta = record.metadata
    return repository_filter in meta.repository_url or repository_filter in meta.file_path


class Ranker(ABC):
    """Scores records against a query vector and returns the best ones."""

    @abstractmethod
    def rank(
        self,
        query_embedding: Sequence[float],
        records: Sequence[Record],
        repository_filter: Optional[str] = None,
        top_k: int = DEFAULT_TOP_K,
    ) -> List[SearchResult]:
        pass


class CosineRanker(Ranker):
    """Scores every record (no approximate index).

    Results are sorted by descending similarity; equal scores keep the
    store's insertion order.
    """

    def rank(
        self,
        query_embedding: Sequence[float],
        records: Sequence[Record],
        repository_filter: Optional[str] = None,
        top_k: int = DEFAULT_TOP_K,
    ) -> List[SearchResult]:
        if top_k <= 0:
            return []

        candidates = [r for r in records if matches_repository(r, repository_filter)]
        if not candidates:
            return []

        query = np.asarray(query_embedding, dtype=np.float64)
        for r in candidates:
            if len(r.embedding) != query.shape[0]:
                raise ValueError(
                    f"Embedding dimension mismatch for {r.metadata.file_path}: "
                    f"{len(r.embedding)} vs query {query.shape[0]}"
                )

        matrix = np.asarray([r.embedding for r in candidates], dtype=np.float64)
        denom = np.linalg.norm(matrix, axis=1) * np.linalg.norm(query)
        dots = matrix @ query
        scores = np.divide(dots, denom, out=np.zeros_like(dots), where=denom != 0)
        scores = np.clip(scores, -1.0, 1.0)

        results = [
            SearchResult(
                text_chunk=r.text,
                source_repository=r.metadata.repository_url,
                source_file=r.metadata.file_path,
                similarity_score=float(score),
            )
            for r, score in zip(candidates, scores)
        ]
        # sorted() is stable, also with reverse=True
        results = sorted(results, key=lambda x: x.similarity_score, reverse=True)
        return results[:top_k]


def rank(
    query_embedding: Sequence[float],
    records: Sequence[Record],
    repository_filter: Optional[str] = None,
    top_k: int = DEFAULT_TOP_K,
) -> List[SearchResult]:
    return CosineRanker().rank(query_embedding, records, repository_filter, top_k)
