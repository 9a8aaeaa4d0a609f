"""Tests for template answers."""

from datetime import date

import pytest

from souvenir.answer import NO_RESULTS_MESSAGES, no_results_answer, template_answer
from souvenir.answer.templates import count_subject, extract_themes
from souvenir.memory import MemoryRecord
from souvenir.query import DateRange, QueryFilters, QueryType


def make_record(
    record_id: str, content: str, day: date, location: str | None = None
) -> MemoryRecord:
    return MemoryRecord(
        id=record_id, owner_id="user-1", content=content, date=day, location=location
    )


class TestNoResults:
    """Tests for the fixed no-results messages."""

    @pytest.mark.parametrize("query_type", list(QueryType))
    def test_every_type_has_message(self, query_type: QueryType) -> None:
        """Each query type has a non-empty message."""
        assert no_results_answer(query_type) == NO_RESULTS_MESSAGES[query_type]
        assert no_results_answer(query_type)

    def test_template_answer_without_records(self) -> None:
        """Templates fall back to the fixed message when given nothing."""
        assert template_answer("q", [], QueryType.SUMMARY) == NO_RESULTS_MESSAGES[QueryType.SUMMARY]


class TestCountAnswer:
    """Tests for count answers."""

    def test_with_year_period(self) -> None:
        """Count, subject and single-year period."""
        records = [
            make_record(str(i), "Dîner au restaurant", date(2023, i, 1)) for i in range(1, 4)
        ]
        filters = QueryFilters(date_range=DateRange.for_year(2023))
        answer = template_answer(
            "Combien de fois suis-je allé au restaurant en 2023 ?",
            records,
            QueryType.COUNT,
            filters,
        )
        assert answer == "Tu as enregistré 3 fois où tu es allé au restaurant en 2023."

    def test_multi_year_period(self) -> None:
        """A range over several years names both years."""
        records = [make_record("1", "Concert de jazz", date(2022, 5, 1))]
        filters = QueryFilters(date_range=DateRange(date(2022, 1, 1), date(2023, 12, 31)))
        answer = template_answer("Combien de concerts ?", records, QueryType.COUNT, filters)
        assert answer == "Tu as enregistré 1 concerts entre 2022 et 2023."

    def test_generic_subject(self) -> None:
        """Without a known keyword the subject is generic."""
        records = [make_record("1", "Une balade", date(2022, 5, 1))]
        answer = template_answer("Combien de balades ?", records, QueryType.COUNT)
        assert answer == "Tu as enregistré 1 souvenirs."

    def test_subject_order(self) -> None:
        """The first keyword of the table wins."""
        assert count_subject("restaurant puis cinéma") == "fois où tu es allé au restaurant"
        assert count_subject("Combien de MUSÉE") == "visites de musées"


class TestNarrativeAnswer:
    """Tests for narrative answers."""

    def test_single_location(self) -> None:
        """One place, one year, chronological vignettes."""
        records = [
            make_record("2", "Concert sur les quais", date(2022, 7, 1), "Lyon"),
            make_record("1", "Pique-nique", date(2022, 6, 10), "Lyon"),
        ]
        answer = template_answer("Raconte mon été", records, QueryType.NARRATIVE)
        assert answer == (
            "Tu as passé du temps à Lyon en 2022. Voici quelques moments marquants : "
            "le 10 juin 2022 à Lyon : Pique-nique ; "
            "le 1 juillet 2022 à Lyon : Concert sur les quais."
        )

    def test_several_locations_and_years(self) -> None:
        """Distinct places are listed in order and the span covers both years."""
        records = [
            make_record("1", "Arrivée", date(2021, 6, 1), "Lyon"),
            make_record("2", "Plage", date(2022, 7, 1), "Nice"),
            make_record("3", "Retour", date(2022, 8, 1), "Lyon"),
        ]
        answer = template_answer("Raconte", records, QueryType.NARRATIVE)
        assert answer.startswith(
            "Tu as passé du temps dans plusieurs endroits : Lyon, Nice entre 2021 et 2022."
        )

    def test_at_most_three_recent_vignettes(self) -> None:
        """Only the three most recent records are told."""
        records = [make_record(str(m), f"Jour {m}", date(2022, m, 1)) for m in range(1, 6)]
        answer = template_answer("Raconte", records, QueryType.NARRATIVE)
        assert "Jour 1" not in answer
        assert "Jour 2" not in answer
        assert "Jour 3" in answer and "Jour 5" in answer

    def test_long_content_truncated(self) -> None:
        """Vignettes keep the first hundred characters."""
        records = [make_record("1", "x" * 150, date(2022, 1, 1))]
        answer = template_answer("Raconte", records, QueryType.NARRATIVE)
        assert "x" * 100 + "..." in answer
        assert "x" * 101 not in answer


class TestSummaryAnswer:
    """Tests for summary answers."""

    def test_themes_span_and_count(self) -> None:
        """Themes by frequency, then span and count."""
        records = [
            make_record("1", "Voyage à Rome", date(2023, 4, 1)),
            make_record("2", "Dîner au restaurant", date(2023, 5, 1)),
            make_record("3", "Restaurant italien", date(2023, 6, 1)),
        ]
        answer = template_answer("Résume mon année", records, QueryType.SUMMARY)
        assert answer == (
            "Résumé de tes souvenirs en 2023 : tu as principalement vécu des moments "
            "liés à gastronomie, voyage. Tu as enregistré 3 souvenirs sur cette période."
        )

    def test_single_record_without_theme(self) -> None:
        """No theme and a singular count."""
        records = [make_record("1", "Rien de spécial", date(2023, 4, 1))]
        answer = template_answer("Résume", records, QueryType.SUMMARY)
        assert answer == (
            "Résumé de tes souvenirs en 2023 : Tu as enregistré 1 souvenir sur cette période."
        )

    def test_at_most_three_themes(self) -> None:
        """Only the three most frequent themes are kept."""
        records = [
            make_record("1", "Voyage et restaurant", date(2023, 1, 1)),
            make_record("2", "Musée puis sport", date(2023, 1, 2)),
            make_record("3", "Réunion de travail", date(2023, 1, 3)),
        ]
        assert extract_themes(records) == ["voyage", "gastronomie", "culture"]


class TestListAnswer:
    """Tests for list answers."""

    def test_format(self) -> None:
        """Count prefix, then numbered items with date and place."""
        records = [
            make_record("1", "Exposition Monet", date(2023, 3, 1), "Paris"),
            make_record("2", "Marché du dimanche", date(2023, 3, 5)),
        ]
        answer = template_answer("Mes sorties", records, QueryType.LIST)
        assert answer == (
            "J'ai trouvé 2 souvenirs correspondant à ta recherche. Voici les plus "
            "pertinents : 1. Le 1 mars 2023 à Paris : Exposition Monet "
            "2. Le 5 mars 2023 : Marché du dimanche"
        )

    def test_top_five_only(self) -> None:
        """At most five items are listed, the count covers all."""
        records = [make_record(str(i), f"Sortie {i}", date(2023, 1, i)) for i in range(1, 8)]
        answer = template_answer("Mes sorties", records, QueryType.LIST)
        assert answer.startswith("J'ai trouvé 7 souvenirs")
        assert "5. Le" in answer
        assert "6. Le" not in answer

    def test_deterministic(self) -> None:
        """The same input gives the same answer."""
        records = [make_record("1", "Exposition Monet", date(2023, 3, 1), "Paris")]
        assert template_answer("q", records, QueryType.LIST) == template_answer(
            "q", records, QueryType.LIST
        )
