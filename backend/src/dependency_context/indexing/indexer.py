"""Documentation indexing logic."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from ..config import cfg_fingerprint
from ..core import (
    Chunker,
    Dependency,
    Document,
    Embedder,
    EmbeddingFailure,
    IndexReport,
    InvalidInput,
    Record,
    RecordMetadata,
    Repository,
    make_chunker,
    make_embedder,
)
from ..storage import RecordStore, make_record_store
from .base import Indexer

logger = logging.getLogger(__name__)


class DefaultIndexer(Indexer):
    """Chunks, embeds and stores the documents of one dependency.

    A document whose embedding fails is abandoned and reported; the other
    documents are still indexed. All new records of the dependency are
    written in a single store append.
    """

    def __init__(
        self,
        embedder: Optional[Embedder] = None,
        store: Optional[RecordStore] = None,
        chunker: Optional[Chunker] = None,
    ):
        self.embedder = embedder
        self.store = store
        self.chunker = chunker

    def index(
        self,
        project_path: Union[str, Path],
        dependency: Dependency,
        repository: Repository,
        documents: Sequence[Document],
        cfg: Dict,
    ) -> IndexReport:
        if not documents:
            raise InvalidInput(f"No documents to index for {dependency.name}")

        embedder = self.embedder or make_embedder(cfg)
        store = self.store or make_record_store(cfg)
        chunker = self.chunker or make_chunker(cfg)

        logger.info(
            f"Indexing documentation for {dependency.name} "
            f"({len(documents)} documents, cfg {cfg_fingerprint(cfg)[:12]})"
        )

        report = IndexReport(dependency_name=dependency.name)
        records: List[Record] = []

        for document in documents:
            chunks = [c for c in chunker.split(document) if c.strip()]
            metadata = RecordMetadata(
                repository_url=repository.url,
                file_path=document.path,
                dependency_name=dependency.name,
            )
            try:
                for chunk in chunks:
                    records.append(
                        Record(text=chunk, embedding=embedder.embed_one(chunk), metadata=metadata)
                    )
            except EmbeddingFailure as e:
                logger.warning(f"Skipping rest of {document.path} for {dependency.name}: {e}")
                report.errors.append(f"{document.path}: {e}")
            finally:
                report.documents_processed += 1

        if not records:
            if report.errors:
                raise EmbeddingFailure(
                    f"No chunks of {dependency.name} could be embedded: {'; '.join(report.errors)}"
                )
            logger.warning(f"No chunks produced for {dependency.name}")
            return report

        if cfg.get("replace_on_reindex"):
            store.replace_dependency(project_path, dependency.name, records)
        else:
            store.append(project_path, records)
        report.chunks_indexed = len(records)

        logger.info(
            f"Indexed {report.documents_processed} documents with {report.chunks_indexed} "
            f"chunks for {dependency.name}"
        )
        return report


def index_documentation(
    project_path: Union[str, Path],
    dependency: Dependency,
    repository: Repository,
    documents: Sequence[Document],
    cfg: Dict,
    embedder: Optional[Embedder] = None,
) -> IndexReport:
    """Index one dependency's documentation (Wrapper)."""
    indexer = DefaultIndexer(embedder=embedder)
    return indexer.index(project_path, dependency, repository, documents, cfg)
