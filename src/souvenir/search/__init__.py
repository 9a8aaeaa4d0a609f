"""Candidate retrieval and ranking."""

from .models import SearchResult
from .ranking import DEFAULT_WEIGHTS, RankingWeights, apply_hard_filters, rank_results
from .similarity import (
    SearchStrategy,
    SimilaritySearch,
    TextSearchStrategy,
    VectorSearchStrategy,
    highlight_content,
    parse_embedding,
)

__all__ = [
    "DEFAULT_WEIGHTS",
    "RankingWeights",
    "SearchResult",
    "SearchStrategy",
    "SimilaritySearch",
    "TextSearchStrategy",
    "VectorSearchStrategy",
    "apply_hard_filters",
    "highlight_content",
    "parse_embedding",
    "rank_results",
]
