"""Tests for the project-level index and search operations."""

import json
from unittest.mock import patch

import pytest

from dependency_context.capabilities import analyze_and_index, search_dependency_docs
from dependency_context.core import Document, EmbedderCache, Repository
from dependency_context.storage import JsonFileStore

from conftest import FakeEmbedder

MODULE = "dependency_context.capabilities"

DOCS = [
    Document(
        content="# Express\n\nFast, unopinionated, minimalist web framework for node.",
        path="/README.md",
        filename="README.md",
    ),
    Document(
        content="# Routing\n\nRouting refers to how an application responds to a client request.",
        path="/docs/routing.md",
        filename="routing.md",
    ),
]


def repo_for(dependency, cfg):
    return Repository(
        name=dependency.name,
        owner="owner",
        url=f"https://github.com/owner/{dependency.name}",
    )


@pytest.fixture
def cache():
    return EmbedderCache(factory=lambda name: FakeEmbedder())


@pytest.fixture
def npm_project(project_dir):
    (project_dir / "package.json").write_text(
        json.dumps({"dependencies": {"express": "^4.18.2", "left-pad": "1.3.0"}}), encoding="utf-8"
    )
    (project_dir / ".env").write_text("MIN_CHUNK_SIZE=0\nMAX_CHUNK_SIZE=1000\n", encoding="utf-8")
    return project_dir


class TestAnalyzeAndIndex:

    def test_invalid_project_path(self, tmp_path, cache):
        result = analyze_and_index(tmp_path / "missing", embedder_cache=cache)

        assert result["status"] == "failure"
        assert "Invalid project path" in result["message"]

    def test_no_dependencies(self, project_dir, cache):
        result = analyze_and_index(project_dir, embedder_cache=cache)

        assert result == {"status": "failure", "message": "No dependencies found in project"}

    def test_indexes_every_dependency(self, npm_project, cache):
        with patch(f"{MODULE}.find_repository", side_effect=repo_for), \
                patch(f"{MODULE}.fetch_docs", return_value=DOCS):
            result = analyze_and_index(npm_project, embedder_cache=cache)

        assert result["status"] == "success"
        assert result["message"] == "Processed 2 dependencies. Successfully indexed: 2. Errors: 0"
        store = JsonFileStore()
        assert store.count(npm_project, "express") == 2
        assert store.count(npm_project, "left-pad") == 2

    def test_one_failing_dependency_does_not_stop_the_rest(self, npm_project, cache):
        def only_express(dependency, cfg):
            return repo_for(dependency, cfg) if dependency.name == "express" else None

        with patch(f"{MODULE}.find_repository", side_effect=only_express), \
                patch(f"{MODULE}.fetch_docs", return_value=DOCS):
            result = analyze_and_index(npm_project, embedder_cache=cache)

        assert result["status"] == "success"
        assert "Successfully indexed: 1. Errors: 1" in result["message"]
        assert "Could not find GitHub repository for left-pad@1.3.0" in result["message"]

    def test_all_failing_is_failure(self, npm_project, cache):
        with patch(f"{MODULE}.find_repository", side_effect=repo_for), \
                patch(f"{MODULE}.fetch_docs", return_value=[]):
            result = analyze_and_index(npm_project, embedder_cache=cache)

        assert result["status"] == "failure"
        assert "No markdown documentation found for express" in result["message"]
        assert not JsonFileStore().exists(npm_project)

    def test_embedding_failure_is_isolated(self, npm_project):
        cache = EmbedderCache(factory=lambda name: FakeEmbedder(fail_on="minimalist"))
        docs = DOCS[:1]

        with patch(f"{MODULE}.find_repository", side_effect=repo_for), \
                patch(f"{MODULE}.fetch_docs", return_value=docs):
            result = analyze_and_index(npm_project, embedder_cache=cache)

        assert result["status"] == "failure"
        assert "Error processing express" in result["message"]
        assert "Error processing left-pad" in result["message"]

    def test_unexpected_error_is_isolated(self, npm_project, cache):
        attempted = []

        def flaky(dependency, cfg):
            attempted.append(dependency.name)
            if dependency.name == "express":
                raise KeyError("owner")
            return repo_for(dependency, cfg)

        with patch(f"{MODULE}.find_repository", side_effect=flaky), \
                patch(f"{MODULE}.fetch_docs", return_value=DOCS):
            result = analyze_and_index(npm_project, embedder_cache=cache)

        assert attempted == ["express", "left-pad"]
        assert result["status"] == "success"
        assert "Successfully indexed: 1. Errors: 1" in result["message"]
        assert "Error processing express: KeyError('owner')" in result["message"]
        assert JsonFileStore().count(npm_project, "left-pad") == 2

    def test_progress_is_reported(self, npm_project, cache):
        seen = []

        with patch(f"{MODULE}.find_repository", side_effect=repo_for), \
                patch(f"{MODULE}.fetch_docs", return_value=DOCS):
            analyze_and_index(npm_project, progress=lambda p, step: seen.append(p), embedder_cache=cache)

        assert seen[0] == 0
        assert seen[-1] == 100
        assert seen == sorted(seen)

    def test_env_vars_are_applied(self, npm_project, cache):
        seen = {}

        def capture(dependency, cfg):
            seen["token"] = cfg["github_token"]
            return None

        with patch(f"{MODULE}.find_repository", side_effect=capture):
            analyze_and_index(npm_project, env_vars={"GITHUB_TOKEN": "ghp_test"}, embedder_cache=cache)

        assert seen["token"] == "ghp_test"


class TestSearchDependencyDocs:

    def test_search_after_indexing(self, npm_project, cache):
        with patch(f"{MODULE}.find_repository", side_effect=repo_for), \
                patch(f"{MODULE}.fetch_docs", return_value=DOCS):
            analyze_and_index(npm_project, embedder_cache=cache)

        response = search_dependency_docs(
            npm_project,
            "Routing refers to how an application responds to a client request.",
            repository_context="express",
            embedder_cache=cache,
        )

        results = response["results"]
        assert "error" not in response
        assert len(results) == 2
        assert results[0]["source_file"] == "/docs/routing.md"
        assert results[0]["source_repository"] == "https://github.com/owner/express"
        assert results[0]["similarity_score"] == pytest.approx(1.0)
        assert set(results[0]) == {"text_chunk", "source_repository", "source_file", "similarity_score"}

    def test_unindexed_project_returns_no_results(self, project_dir, cache):
        assert search_dependency_docs(project_dir, "anything", embedder_cache=cache) == {"results": []}

    def test_empty_query_is_reported(self, project_dir, cache):
        response = search_dependency_docs(project_dir, "  ", embedder_cache=cache)

        assert response["results"] == []
        assert "empty" in response["error"]

    def test_corrupt_store_is_reported(self, project_dir, cache):
        store_file = JsonFileStore().store_path(project_dir)
        store_file.parent.mkdir(parents=True)
        store_file.write_text("garbage", encoding="utf-8")

        response = search_dependency_docs(project_dir, "routing", embedder_cache=cache)

        assert response["results"] == []
        assert "Could not read store" in response["error"]

    def test_non_object_metadata_is_reported(self, project_dir, cache):
        store_file = JsonFileStore().store_path(project_dir)
        store_file.parent.mkdir(parents=True)
        store_file.write_text(
            json.dumps({"entries": [{"chunk": "x", "embedding": [1.0], "metadata": "oops"}]}),
            encoding="utf-8",
        )

        response = search_dependency_docs(project_dir, "routing", embedder_cache=cache)

        assert response["results"] == []
        assert "Malformed entry" in response["error"]
