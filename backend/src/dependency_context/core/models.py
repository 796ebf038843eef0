"""Data models for dependency-context."""

from __future__ import annotations

import dataclasses
from typing import Dict, List


@dataclasses.dataclass(frozen=True)
class Document:
    """A raw documentation file handed over for indexing."""

    content: str
    path: str
    filename: str


@dataclasses.dataclass(frozen=True)
class Dependency:
    name: str
    version: str = "latest"
    ecosystem: str = "npm"


@dataclasses.dataclass(frozen=True)
class Repository:
    name: str
    owner: str
    url: str
    ref: str = ""  # empty means the default branch


@dataclasses.dataclass(frozen=True)
class RecordMetadata:
    repository_url: str
    file_path: str
    dependency_name: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "repository": self.repository_url,
            "file": self.file_path,
            "dependency": self.dependency_name,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "RecordMetadata":
        if not isinstance(data, dict):
            raise ValueError(f"metadata must be an object, got {type(data).__name__}")
        return cls(
            repository_url=str(data.get("repository", "")),
            file_path=str(data.get("file", "")),
            dependency_name=str(data.get("dependency", "")),
        )


@dataclasses.dataclass(frozen=True)
class Record:
    """A persisted chunk together with its embedding and source metadata."""

    text: str
    embedding: List[float]
    metadata: RecordMetadata

    def to_dict(self) -> Dict:
        return {
            "chunk": self.text,
            "embedding": list(self.embedding),
            "metadata": self.metadata.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "Record":
        return cls(
            text=data["chunk"],
            embedding=[float(v) for v in data["embedding"]],
            metadata=RecordMetadata.from_dict(data.get("metadata") or {}),
        )


@dataclasses.dataclass(frozen=True)
class SearchResult:
    text_chunk: str
    source_repository: str
    source_file: str
    similarity_score: float

    def to_dict(self) -> Dict:
        return dataclasses.asdict(self)


@dataclasses.dataclass
class IndexReport:
    """Outcome of indexing one dependency."""

    dependency_name: str
    documents_processed: int = 0
    chunks_indexed: int = 0
    errors: List[str] = dataclasses.field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.chunks_indexed > 0
