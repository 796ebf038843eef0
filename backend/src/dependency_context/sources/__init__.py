"""Inputs for indexing: dependencies, their repositories and documentation."""

from .documents import collect_documents, fetch_docs
from .parsers import parse_dependencies
from .repositories import RepositoryFinder, find_repository, parse_github_url, pick_best_tag

__all__ = [
    "collect_documents",
    "fetch_docs",
    "parse_dependencies",
    "RepositoryFinder",
    "find_repository",
    "parse_github_url",
    "pick_best_tag",
]
