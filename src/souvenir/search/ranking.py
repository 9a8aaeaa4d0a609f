"""Hard filtering and rule-based re-ranking of search results."""

from dataclasses import dataclass

from ..query.filters import (
    matches_date,
    matches_keywords,
    matches_location,
    satisfies_filters,
)
from ..query.models import ParsedQuery, QueryFilters
from .models import SearchResult


@dataclass(frozen=True)
class RankingWeights:
    """Additive bonuses for records matching a filter category.

    The values are tunable. Location is kept above the others.
    """

    date: float = 0.10
    location: float = 0.15
    activity: float = 0.10
    emotion: float = 0.10

    def __post_init__(self) -> None:
        for name in ("date", "location", "activity", "emotion"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} bonus must not be negative")


DEFAULT_WEIGHTS = RankingWeights()


def apply_hard_filters(
    results: list[SearchResult], filters: QueryFilters
) -> list[SearchResult]:
    """Drop results whose record fails any present filter category."""
    if filters.is_empty:
        return list(results)
    return [result for result in results if satisfies_filters(result.record, filters)]


def rank_results(
    results: list[SearchResult],
    parsed_query: ParsedQuery,
    filters: QueryFilters,
    weights: RankingWeights = DEFAULT_WEIGHTS,
) -> list[SearchResult]:
    """Re-score results and sort them, best first.

    Each score gets the bonuses of the categories its record matches, is
    multiplied by the parse confidence, then clamped to [0, 1]. Ties keep
    their incoming order. Results with an invalid embedding get no bonus
    and stay at zero.
    """
    ranked: list[SearchResult] = []
    for result in results:
        if result.invalid_embedding:
            ranked.append(result.with_score(0.0))
            continue
        record = result.record
        score = result.relevance_score
        matched: list[str] = []

        if filters.date_range is not None and matches_date(record, filters.date_range):
            score += weights.date
            matched.append("date")
        if filters.locations and matches_location(record, filters.locations):
            score += weights.location
            matched.append("lieu")
        if filters.activities and matches_keywords(record, filters.activities):
            score += weights.activity
            matched.append("activité")
        if filters.emotions and matches_keywords(record, filters.emotions):
            score += weights.emotion
            matched.append("émotion")

        score *= parsed_query.confidence
        score = min(max(score, 0.0), 1.0)

        reason = result.match_reason
        if matched:
            reason = f"{reason} ({', '.join(matched)})"
        ranked.append(result.with_score(score, reason))

    return sorted(ranked, key=lambda r: r.relevance_score, reverse=True)
