"""Search functionality for dependency-context."""

from .base import Searcher
from .ranker import CosineRanker, Ranker, cosine_similarity, rank
from .searcher import DefaultSearcher, format_hit, search

__all__ = [
    "Searcher",
    "DefaultSearcher",
    "Ranker",
    "CosineRanker",
    "cosine_similarity",
    "rank",
    "search",
    "format_hit",
]
