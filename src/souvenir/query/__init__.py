"""Query understanding: parsing, classification and filters."""

from .classifier import classify_query_type
from .filters import merge_filters, satisfies_filters
from .models import DateRange, ParsedQuery, QueryFilters, QueryType
from .parser import parse_query, parse_query_simple, validate_filters

__all__ = [
    "DateRange",
    "ParsedQuery",
    "QueryFilters",
    "QueryType",
    "classify_query_type",
    "merge_filters",
    "parse_query",
    "parse_query_simple",
    "satisfies_filters",
    "validate_filters",
]
