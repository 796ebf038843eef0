"""Searcher Interface."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Union

from ..core import SearchResult


class Searcher:
    """Abstract base class for semantic search."""

    def search(
        self,
        project_path: Union[str, Path],
        query: str,
        cfg: Dict,
        repository_context: Optional[str] = None,
    ) -> List[SearchResult]:
        """Search indexed documentation for chunks similar to query.

        Args:
            project_path: Project whose store is searched
            query: Search query text
            cfg: Configuration dictionary
            repository_context: Optional substring narrowing results to one repository

        Returns:
            List of SearchResult sorted by relevance
        """
        raise NotImplementedError
