"""Turn a free-text question into filters, a vector query and a confidence.

The parser is a pure function of its input. It recognises, in order:
a year, seasons, locations (vague regions and place-like words),
activities and emotions. Recognised keywords are removed from the text
that gets embedded, so the vector search focuses on what is left.
"""

import calendar
import re
from datetime import date
from types import MappingProxyType

from ..vocabulary import (
    ACTIVITY_KEYWORDS,
    AUXILIARY_ADVERBS,
    AUXILIARY_FORMS,
    EMOTION_KEYWORDS,
    FUZZY_LOCATIONS,
    LOCATION_PREPOSITIONS,
    LOCATION_STOPWORDS,
    PARTICIPLE_SEASON_WORDS,
    SEASON_KEYWORDS,
    SEASON_MONTH_RANGES,
)
from .classifier import classify_query_type
from .models import DateRange, ParsedQuery, QueryFilters, QueryType

BASE_CONFIDENCE = 0.5
DEGRADED_CONFIDENCE = 0.8

CONFIDENCE_BONUSES = MappingProxyType({
    "date_range": 0.15,
    "locations": 0.15,
    "seasons": 0.05,
    "activities": 0.10,
    "emotions": 0.05,
    "query_type": 0.10,
})

YEAR_PATTERN = re.compile(r"(?<!\d)((?:19|20)\d{2})(?!\d)")

PREPOSITION_PATTERN = re.compile(
    r"(?<!\w)(?:" + "|".join(LOCATION_PREPOSITIONS) + r")\s+([^\W\d_][\w'-]*)"
)

WORD_PATTERN = re.compile(r"[\w'’-]+")

CAPITALIZED_PATTERN = re.compile(r"(?<![\w'-])([A-ZÀ-ÖØ-Þ][\w'-]+)")

SENTENCE_START_PATTERN = re.compile(r"(?:^|[.!?]\s+)\W*(\w)")

# Vocabulary words that never name a place on their own.
KEYWORD_WORDS = frozenset((*SEASON_KEYWORDS, *ACTIVITY_KEYWORDS, *EMOTION_KEYWORDS))


def parse_query(query: str) -> ParsedQuery:
    """Parse a free-text query.

    Args:
        query: The raw question. Callers reject empty queries beforehand.

    Returns:
        ParsedQuery keeping ``query`` verbatim as ``original_query``.
    """
    text = query.strip()
    lowered = text.lower()
    vector_text = lowered

    date_range: DateRange | None = None
    year = _extract_year(lowered)
    if year is not None:
        date_range = DateRange.for_year(year)
        vector_text = YEAR_PATTERN.sub(" ", vector_text)

    seasons: list[str] = []
    for keyword, season in SEASON_KEYWORDS.items():
        pattern = _word_pattern(keyword)
        if _season_mentioned(pattern, keyword, lowered):
            if season not in seasons:
                seasons.append(season)
            vector_text = pattern.sub(" ", vector_text)
    if seasons and year is not None:
        date_range = _season_range(seasons[0], year) or date_range

    locations: list[str] = []
    matched_regions: list[str] = []
    for region, expansions in FUZZY_LOCATIONS.items():
        if region in lowered:
            matched_regions.append(region)
            locations.extend(expansions)
            vector_text = vector_text.replace(region, " ")
    for candidate in _place_words(text, lowered):
        if any(candidate in region for region in matched_regions):
            continue
        locations.append(candidate)

    activities = [kw for kw in ACTIVITY_KEYWORDS if kw in lowered]
    emotions = [kw for kw in EMOTION_KEYWORDS if kw in lowered]
    for keyword in activities + emotions:
        vector_text = vector_text.replace(keyword, " ")

    filters = QueryFilters(
        date_range=date_range,
        locations=tuple(locations),
        seasons=tuple(seasons),
        activities=tuple(activities),
        emotions=tuple(emotions),
    )

    confidence = _confidence(filters, classify_query_type(text))
    vector_query = re.sub(r"\s+", " ", vector_text).strip()
    if not vector_query:
        vector_query = lowered
        confidence = min(confidence, DEGRADED_CONFIDENCE)

    return ParsedQuery(
        original_query=query,
        filters=filters,
        vector_query=vector_query,
        confidence=confidence,
    )


def parse_query_simple(query: str) -> ParsedQuery:
    """Fallback parse: no filters, the query itself as vector text."""
    return ParsedQuery(
        original_query=query,
        filters=QueryFilters(),
        vector_query=query.strip(),
        confidence=BASE_CONFIDENCE,
    )


def validate_filters(filters: QueryFilters) -> bool:
    """Check that extracted filters are usable: the date range must be ordered."""
    if filters.date_range is not None and not filters.date_range.is_ordered:
        return False
    return True


def _extract_year(lowered: str) -> int | None:
    match = YEAR_PATTERN.search(lowered)
    if match is None:
        return None
    return int(match.group(1))


def _season_range(season: str, year: int) -> DateRange | None:
    months = SEASON_MONTH_RANGES.get(season)
    if months is None:
        return None
    first, last = months
    last_day = calendar.monthrange(year, last)[1]
    return DateRange(date(year, first, 1), date(year, last, last_day))


def _word_pattern(keyword: str) -> re.Pattern[str]:
    return re.compile(r"(?<!\w)" + re.escape(keyword) + r"(?!\w)")


def _season_mentioned(pattern: re.Pattern[str], keyword: str, lowered: str) -> bool:
    """True if ``keyword`` occurs as a season, not as a verb participle."""
    for match in pattern.finditer(lowered):
        if keyword not in PARTICIPLE_SEASON_WORDS:
            return True
        if not _follows_auxiliary(lowered[: match.start()]):
            return True
    return False


def _follows_auxiliary(before: str) -> bool:
    """Whether the text ends with a form of "avoir", adverbs aside.

    Handles elision ("j'ai", "n'ai") and inversion ("ai-je", "a-t-il").
    """
    for token in reversed(WORD_PATTERN.findall(before)):
        word = token.replace("’", "'").rsplit("'", 1)[-1].split("-", 1)[0]
        if word in AUXILIARY_ADVERBS:
            continue
        return word in AUXILIARY_FORMS
    return False


def _place_words(text: str, lowered: str) -> list[str]:
    """Words that look like place names.

    Covers words right after "à", "dans" or "sur", and capitalized words
    that do not open a sentence.
    """
    found: list[str] = []

    for match in PREPOSITION_PATTERN.finditer(lowered):
        found.append(match.group(1))

    sentence_starts = {m.start(1) for m in SENTENCE_START_PATTERN.finditer(text)}
    for match in CAPITALIZED_PATTERN.finditer(text):
        if match.start(1) in sentence_starts:
            continue
        found.append(match.group(1).lower())

    words = [word.strip("'-") for word in found]
    return [
        word
        for word in words
        if len(word) > 2
        and word not in LOCATION_STOPWORDS
        and word not in KEYWORD_WORDS
    ]


def _confidence(filters: QueryFilters, query_type: QueryType) -> float:
    confidence = BASE_CONFIDENCE
    if filters.date_range is not None:
        confidence += CONFIDENCE_BONUSES["date_range"]
    for name in ("locations", "seasons", "activities", "emotions"):
        if getattr(filters, name):
            confidence += CONFIDENCE_BONUSES[name]
    if query_type is not QueryType.LIST:
        confidence += CONFIDENCE_BONUSES["query_type"]
    return round(min(confidence, 1.0), 4)
