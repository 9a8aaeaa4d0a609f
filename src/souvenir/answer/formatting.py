"""Small text helpers shared by prompts and templates."""

from datetime import date
from typing import Iterable

from ..vocabulary import FRENCH_MONTHS


def format_date_fr(day: date) -> str:
    """Format a date the French way, e.g. "1 mars 2023"."""
    return f"{day.day} {FRENCH_MONTHS[day.month - 1]} {day.year}"


def excerpt(text: str, length: int) -> str:
    """First ``length`` characters, with "..." when the text was cut."""
    if len(text) <= length:
        return text
    return text[:length] + "..."


def year_span(days: Iterable[date]) -> str | None:
    """Return "en 2023" or "entre 2021 et 2023", None when there is no date."""
    years = [d.year for d in days]
    if not years:
        return None
    first, last = min(years), max(years)
    if first == last:
        return f"en {first}"
    return f"entre {first} et {last}"
