"""Data models for search results."""

from dataclasses import dataclass, replace
from typing import Any

from ..memory.models import MemoryRecord


@dataclass(frozen=True)
class SearchResult:
    """A memory record paired with how well it matches a query.

    Attributes:
        record: The matching record.
        relevance_score: Similarity or ranking score. Only the ranker
            guarantees it lies in [0, 1].
        match_reason: Human-readable reason for the match.
        highlighted_content: Content with query words wrapped in ``**``.
        invalid_embedding: The record's stored vector could not be compared
            with the query vector. Such results keep a zero score.
    """

    record: MemoryRecord
    relevance_score: float
    match_reason: str
    highlighted_content: str | None = None
    invalid_embedding: bool = False

    def with_score(self, score: float, match_reason: str | None = None) -> "SearchResult":
        return replace(
            self,
            relevance_score=score,
            match_reason=match_reason if match_reason is not None else self.match_reason,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "record": self.record.to_dict(),
            "relevance_score": self.relevance_score,
            "match_reason": self.match_reason,
            "highlighted_content": self.highlighted_content,
        }
