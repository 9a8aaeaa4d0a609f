"""Filter merging and record matching.

merge_filters combines parser filters with caller-supplied ones. The
``matches_*`` helpers answer whether one record satisfies one filter
category; both the hard filter and the ranking bonuses are built on them.
"""

from ..memory.models import MemoryRecord
from ..vocabulary import SEASON_MONTHS
from .models import DateRange, QueryFilters


def merge_filters(parsed: QueryFilters, extra: QueryFilters | None) -> QueryFilters:
    """Merge parser filters with caller filters.

    Date ranges intersect (latest start, earliest end). The result may be
    inverted, which matches nothing. List fields are unioned without
    duplicates, parser values first.
    """
    if extra is None or extra.is_empty:
        return parsed

    date_range: DateRange | None
    if parsed.date_range is not None and extra.date_range is not None:
        date_range = parsed.date_range.intersect(extra.date_range)
    else:
        date_range = parsed.date_range or extra.date_range

    return QueryFilters(
        date_range=date_range,
        **{
            name: getattr(parsed, name) + getattr(extra, name)
            for name in QueryFilters.LIST_FIELDS
        },
    )


def matches_date(record: MemoryRecord, date_range: DateRange) -> bool:
    return date_range.contains(record.date)


def matches_location(record: MemoryRecord, locations: tuple[str, ...]) -> bool:
    if not record.location:
        return False
    location = record.location.lower()
    return any(loc in location for loc in locations)


def matches_season(record: MemoryRecord, seasons: tuple[str, ...]) -> bool:
    month = record.date.month
    return any(month in SEASON_MONTHS.get(season, ()) for season in seasons)


def matches_keywords(record: MemoryRecord, keywords: tuple[str, ...]) -> bool:
    """True if any keyword appears in the content, case-insensitively."""
    content = record.content.lower()
    return any(keyword in content for keyword in keywords)


def satisfies_filters(record: MemoryRecord, filters: QueryFilters) -> bool:
    """True if the record meets every filter category that is present."""
    if filters.date_range is not None and not matches_date(record, filters.date_range):
        return False
    if filters.locations and not matches_location(record, filters.locations):
        return False
    if filters.seasons and not matches_season(record, filters.seasons):
        return False
    if filters.activities and not matches_keywords(record, filters.activities):
        return False
    if filters.emotions and not matches_keywords(record, filters.emotions):
        return False
    return True
