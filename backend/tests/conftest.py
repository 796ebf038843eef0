"""Shared fixtures: deterministic embedders and a clean configuration environment."""

import math
from typing import List, Optional, Sequence

import pytest

from dependency_context.config.manager import ENV_KEYS
from dependency_context.core import (
    Embedder,
    EmbeddingFailure,
    Record,
    RecordMetadata,
)


class FakeEmbedder(Embedder):
    """Bag-of-words embedder: stable across runs, no model download."""

    def __init__(self, dim: int = 16, fail_on: Optional[str] = None, fail_all: bool = False):
        self.model_name = "fake-model"
        self.dim = dim
        self.fail_on = fail_on
        self.fail_all = fail_all
        self.calls: List[str] = []

    def embed(self, texts: List[str]) -> List[List[float]]:
        out = []
        for text in texts:
            self.calls.append(text)
            if self.fail_all or (self.fail_on and self.fail_on in text):
                raise EmbeddingFailure(f"cannot embed {text[:20]!r}")
            vec = [0.0] * self.dim
            for word in text.lower().split():
                vec[sum(ord(c) for c in word) % self.dim] += 1.0
            norm = math.sqrt(sum(v * v for v in vec)) or 1.0
            out.append([v / norm for v in vec])
        return out


class StaticEmbedder(Embedder):
    """Returns the same vector for every text."""

    def __init__(self, vector: Sequence[float]):
        self.model_name = "static"
        self.vector = list(vector)
        self.calls: List[str] = []

    def embed(self, texts: List[str]) -> List[List[float]]:
        self.calls.extend(texts)
        return [list(self.vector) for _ in texts]


def make_record(
    text: str,
    embedding: Sequence[float],
    repository: str = "https://github.com/test/repo",
    file: str = "/README.md",
    dependency: str = "test-package",
) -> Record:
    return Record(
        text=text,
        embedding=list(embedding),
        metadata=RecordMetadata(repository_url=repository, file_path=file, dependency_name=dependency),
    )


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove config env vars; anything a test sets is undone afterwards."""
    for name in ENV_KEYS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


@pytest.fixture
def fake_embedder():
    return FakeEmbedder()


@pytest.fixture
def project_dir(tmp_path):
    project = tmp_path / "project"
    project.mkdir()
    return project
