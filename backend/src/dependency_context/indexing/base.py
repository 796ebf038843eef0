"""Indexer Interface."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Sequence, Union

from ..core import Dependency, Document, IndexReport, Repository


class Indexer:
    """Abstract base class for documentation indexing."""

    def index(
        self,
        project_path: Union[str, Path],
        dependency: Dependency,
        repository: Repository,
        documents: Sequence[Document],
        cfg: Dict,
    ) -> IndexReport:
        raise NotImplementedError
