"""Deterministic answers built from fixed templates.

These never call out and always produce text, so they back every LLM
failure. Output depends only on the inputs.
"""

from collections import Counter

from ..memory.models import MemoryRecord
from ..query.models import QueryFilters, QueryType
from ..vocabulary import COUNT_SUBJECTS, THEME_KEYWORDS
from .formatting import excerpt, format_date_fr, year_span

NO_RESULTS_MESSAGES = {
    QueryType.COUNT: (
        "Je n'ai trouvé aucun souvenir correspondant à ta demande. Tu n'as "
        "peut-être pas encore enregistré de souvenirs sur ce sujet."
    ),
    QueryType.NARRATIVE: (
        "Je n'ai pas trouvé de souvenirs à raconter pour cette demande. Essaie "
        "peut-être avec une période ou un lieu différent."
    ),
    QueryType.SUMMARY: (
        "Je n'ai pas trouvé de souvenirs à résumer pour cette demande."
    ),
    QueryType.LIST: (
        "Je n'ai trouvé aucun souvenir correspondant à ta recherche. Essaie "
        "peut-être avec des mots-clés différents ou une période plus large."
    ),
}

NARRATIVE_EXCERPT = 100
LIST_EXCERPT = 80
LIST_SIZE = 5
MAX_VIGNETTES = 3
MAX_THEMES = 3


def no_results_answer(query_type: QueryType) -> str:
    return NO_RESULTS_MESSAGES[query_type]


def template_answer(
    query: str,
    records: list[MemoryRecord],
    query_type: QueryType,
    filters: QueryFilters | None = None,
) -> str:
    """Dispatch to the template for ``query_type``.

    Args:
        query: The original question.
        records: Ranked records, best first.
        query_type: Shape of the answer.
        filters: Filters used for the search, for the count period.
    """
    if not records:
        return no_results_answer(query_type)
    if query_type is QueryType.COUNT:
        return count_answer(query, records, filters)
    if query_type is QueryType.NARRATIVE:
        return narrative_answer(records)
    if query_type is QueryType.SUMMARY:
        return summary_answer(records)
    return list_answer(records)


def count_answer(
    query: str, records: list[MemoryRecord], filters: QueryFilters | None = None
) -> str:
    count = len(records)
    subject = count_subject(query)

    period = ""
    if filters is not None and filters.date_range is not None:
        start, end = filters.date_range.start.year, filters.date_range.end.year
        period = f" en {start}" if start == end else f" entre {start} et {end}"

    if count == 0:
        return f"Tu n'as pas encore enregistré de {subject}{period}."
    return f"Tu as enregistré {count} {subject}{period}."


def count_subject(query: str) -> str:
    """Subject phrase for a count answer, from keywords in the query."""
    query_lower = query.lower()
    for keyword, subject in COUNT_SUBJECTS:
        if keyword in query_lower:
            return subject
    return "souvenirs"


def narrative_answer(records: list[MemoryRecord]) -> str:
    ordered = sorted(records, key=lambda r: r.date)

    locations: list[str] = []
    for record in ordered:
        if record.location and record.location not in locations:
            locations.append(record.location)
    span = year_span(r.date for r in ordered)

    if len(locations) == 1:
        narrative = f"Tu as passé du temps à {locations[0]}"
    elif locations:
        narrative = f"Tu as passé du temps dans plusieurs endroits : {', '.join(locations)}"
    else:
        narrative = "Tes souvenirs se déroulent"
    narrative += f" {span}. " if span else ". "

    vignettes = []
    for record in ordered[-MAX_VIGNETTES:]:
        place = f" à {record.location}" if record.location else ""
        vignettes.append(
            f"le {format_date_fr(record.date)}{place} : "
            f"{excerpt(record.content, NARRATIVE_EXCERPT)}"
        )
    narrative += f"Voici quelques moments marquants : {' ; '.join(vignettes)}."
    return narrative


def extract_themes(records: list[MemoryRecord]) -> list[str]:
    """Up to three most frequent themes, ties in table order."""
    counts: Counter[str] = Counter()
    for record in records:
        content = record.content.lower()
        for theme, keywords in THEME_KEYWORDS.items():
            if any(keyword in content for keyword in keywords):
                counts[theme] += 1
    ordered = sorted(
        (theme for theme in THEME_KEYWORDS if counts[theme]),
        key=lambda theme: counts[theme],
        reverse=True,
    )
    return ordered[:MAX_THEMES]


def summary_answer(records: list[MemoryRecord]) -> str:
    themes = extract_themes(records)
    span = year_span(r.date for r in records)
    count = len(records)

    summary = "Résumé de tes souvenirs"
    if span:
        summary += f" {span}"
    summary += " : "
    if themes:
        summary += f"tu as principalement vécu des moments liés à {', '.join(themes)}. "
    plural = "s" if count > 1 else ""
    summary += f"Tu as enregistré {count} souvenir{plural} sur cette période."
    return summary


def list_answer(records: list[MemoryRecord]) -> str:
    count = len(records)
    plural = "s" if count > 1 else ""
    answer = f"J'ai trouvé {count} souvenir{plural} correspondant à ta recherche. "

    items = []
    for index, record in enumerate(records[:LIST_SIZE], 1):
        place = f" à {record.location}" if record.location else ""
        items.append(
            f"{index}. Le {format_date_fr(record.date)}{place} : "
            f"{excerpt(record.content, LIST_EXCERPT)}"
        )
    answer += "Voici les plus pertinents : " + " ".join(items)
    return answer
