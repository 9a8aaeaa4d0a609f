"""Keyword-based query type classification."""

from ..vocabulary import QUERY_TYPE_CUES
from .models import QueryType


def classify_query_type(query: str) -> QueryType:
    """Pick the answer shape from French cues in the raw query.

    "combien"/"fois"/"nombre" ask for a count, "raconte"/"histoire"/"moment"
    for a narrative, "résume"/"synthèse" for a summary. Anything else gets a list.
    """
    query_lower = query.lower()
    for type_name, cues in QUERY_TYPE_CUES:
        if any(cue in query_lower for cue in cues):
            return QueryType(type_name)
    return QueryType.LIST
