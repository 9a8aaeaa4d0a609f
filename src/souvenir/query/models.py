"""Data models for parsed queries and filters."""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Iterable, Mapping


class QueryType(Enum):
    """Rhetorical shape of the expected answer."""

    COUNT = "count"
    NARRATIVE = "narrative"
    SUMMARY = "summary"
    LIST = "list"


@dataclass(frozen=True)
class DateRange:
    """Inclusive range of calendar days.

    An inverted range (start after end) is allowed: it contains no day.
    """

    start: date
    end: date

    @classmethod
    def for_year(cls, year: int) -> "DateRange":
        return cls(date(year, 1, 1), date(year, 12, 31))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DateRange":
        """Build from ``{"start": "YYYY-MM-DD", "end": "YYYY-MM-DD"}``.

        Raises:
            ValueError: If a bound is missing or not a valid date.
        """
        return cls(_to_date(data["start"]), _to_date(data["end"]))

    @property
    def is_ordered(self) -> bool:
        return self.start <= self.end

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    def intersect(self, other: "DateRange") -> "DateRange":
        """Latest start and earliest end of both ranges."""
        return DateRange(max(self.start, other.start), min(self.end, other.end))

    def to_dict(self) -> dict[str, str]:
        return {"start": self.start.isoformat(), "end": self.end.isoformat()}


@dataclass(frozen=True)
class QueryFilters:
    """Structured constraints extracted from a query or supplied by a caller.

    Every field is optional: None or an empty tuple means "no constraint".
    List-valued fields hold lower-case strings without duplicates.
    """

    date_range: DateRange | None = None
    locations: tuple[str, ...] = ()
    seasons: tuple[str, ...] = ()
    activities: tuple[str, ...] = ()
    emotions: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()

    LIST_FIELDS = ("locations", "seasons", "activities", "emotions", "tags")

    def __post_init__(self) -> None:
        for name in self.LIST_FIELDS:
            object.__setattr__(self, name, unique_lower(getattr(self, name)))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "QueryFilters":
        """Build filters from a plain mapping, as an API layer would pass them.

        A single string is taken as a one-element list.

        Raises:
            ValueError: If the date range is malformed or a list field is
                not a string or a list of strings.
        """
        if not data:
            return cls()
        raw_range = data.get("date_range") or data.get("dateRange")
        return cls(
            date_range=DateRange.from_dict(raw_range) if raw_range else None,
            **{name: _string_values(name, data.get(name)) for name in cls.LIST_FIELDS},
        )

    @property
    def is_empty(self) -> bool:
        return self.date_range is None and not any(
            getattr(self, name) for name in self.LIST_FIELDS
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize, omitting absent fields."""
        data: dict[str, Any] = {}
        if self.date_range is not None:
            data["date_range"] = self.date_range.to_dict()
        for name in self.LIST_FIELDS:
            values = getattr(self, name)
            if values:
                data[name] = list(values)
        return data


@dataclass(frozen=True)
class ParsedQuery:
    """Result of reading a free-text query.

    Attributes:
        original_query: The query exactly as received.
        filters: Constraints found in the query.
        vector_query: Query text with filter keywords removed, used for embedding.
        confidence: How much structure was extracted, from 0.0 to 1.0.
    """

    original_query: str
    filters: QueryFilters = field(default_factory=QueryFilters)
    vector_query: str = ""
    confidence: float = 0.5

    def to_dict(self) -> dict[str, Any]:
        return {
            "original_query": self.original_query,
            "filters": self.filters.to_dict(),
            "vector_query": self.vector_query,
            "confidence": self.confidence,
        }


def unique_lower(values: Iterable[str]) -> tuple[str, ...]:
    """Lower-case, strip and de-duplicate, keeping first occurrences."""
    seen: dict[str, None] = {}
    for value in values:
        key = str(value).strip().lower()
        if key:
            seen.setdefault(key, None)
    return tuple(seen)


def _to_date(value: Any) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def _string_values(name: str, value: Any) -> tuple[str, ...]:
    if not value:
        return ()
    if isinstance(value, str):
        return (value,)
    if not isinstance(value, (list, tuple)) or not all(isinstance(v, str) for v in value):
        raise ValueError(f"{name} must be a string or a list of strings")
    return tuple(value)
