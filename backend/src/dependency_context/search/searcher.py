"""Semantic search over a project's indexed documentation."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional, Union

from ..core import Embedder, InvalidInput, NotIndexed, SearchResult, make_embedder
from ..storage import RecordStore, make_record_store
from .base import Searcher
from .ranker import DEFAULT_TOP_K, CosineRanker, Ranker

logger = logging.getLogger(__name__)


class DefaultSearcher(Searcher):

    def __init__(
        self,
        embedder: Optional[Embedder] = None,
        store: Optional[RecordStore] = None,
        ranker: Optional[Ranker] = None,
    ):
        self.embedder = embedder
        self.store = store
        self.ranker = ranker or CosineRanker()

    @staticmethod
    def _require_index(store: RecordStore, project_path: Union[str, Path]) -> None:
        if not store.exists(project_path):
            raise NotIndexed(str(project_path))

    def search(
        self,
        project_path: Union[str, Path],
        query: str,
        cfg: Dict,
        repository_context: Optional[str] = None,
    ) -> List[SearchResult]:
        if not query or not query.strip():
            raise InvalidInput("Search query must not be empty")

        store = self.store or make_record_store(cfg)
        try:
            self._require_index(store, project_path)
        except NotIndexed as e:
            logger.warning(str(e))
            return []

        embedder = self.embedder or make_embedder(cfg)
        query_embedding = embedder.embed_one(query)
        records = store.load(project_path)

        top_k = int(cfg.get("chunks_returned", DEFAULT_TOP_K))
        results = self.ranker.rank(
            query_embedding,
            records,
            repository_filter=repository_context or None,
            top_k=top_k,
        )
        logger.debug(
            f"Ranked {len(records)} records for query {query!r} "
            f"(filter={repository_context!r}), returning {len(results)}"
        )
        return results


def search(
    project_path: Union[str, Path],
    query: str,
    cfg: Dict,
    repository_context: Optional[str] = None,
    embedder: Optional[Embedder] = None,
) -> List[SearchResult]:
    searcher = DefaultSearcher(embedder=embedder)
    return searcher.search(project_path, query, cfg, repository_context=repository_context)


def format_hit(result: SearchResult, max_chars: int = 1200) -> str:
    snippet = result.text_chunk
    if len(snippet) > max_chars:
        snippet = snippet[:max_chars] + "\n…(truncated)…\n"
    header = f"{result.similarity_score:0.4f}  {result.source_repository} {result.source_file}"
    return header + "\n" + snippet.rstrip() + "\n"
