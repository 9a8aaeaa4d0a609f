"""Tests for query data models."""

from datetime import date

import pytest

from souvenir.query import DateRange, ParsedQuery, QueryFilters


class TestDateRange:
    """Tests for DateRange."""

    def test_contains_inclusive(self) -> None:
        """Both bounds are included."""
        dr = DateRange(date(2023, 1, 1), date(2023, 1, 31))
        assert dr.contains(date(2023, 1, 1))
        assert dr.contains(date(2023, 1, 31))
        assert not dr.contains(date(2023, 2, 1))

    def test_from_dict(self) -> None:
        """ISO strings are parsed, time parts ignored."""
        dr = DateRange.from_dict({"start": "2023-03-01", "end": "2023-03-31T23:59:59"})
        assert dr == DateRange(date(2023, 3, 1), date(2023, 3, 31))

    def test_from_dict_invalid(self) -> None:
        """An invalid date raises ValueError."""
        with pytest.raises(ValueError):
            DateRange.from_dict({"start": "2023-02-30", "end": "2023-03-01"})


class TestQueryFilters:
    """Tests for QueryFilters."""

    def test_lists_normalized(self) -> None:
        """List fields are lower-cased and de-duplicated in order."""
        filters = QueryFilters(locations=["Lyon", "paris", "LYON", " "])
        assert filters.locations == ("lyon", "paris")

    def test_is_empty(self) -> None:
        """Empty filters carry no constraint."""
        assert QueryFilters().is_empty
        assert not QueryFilters(tags=("famille",)).is_empty
        assert not QueryFilters(date_range=DateRange.for_year(2020)).is_empty

    def test_from_dict_accepts_camel_case_range(self) -> None:
        """API layers may send dateRange."""
        filters = QueryFilters.from_dict(
            {"dateRange": {"start": "2022-01-01", "end": "2022-12-31"}, "tags": ["Amis"]}
        )
        assert filters.date_range == DateRange.for_year(2022)
        assert filters.tags == ("amis",)

    def test_from_dict_none(self) -> None:
        """None gives empty filters."""
        assert QueryFilters.from_dict(None) == QueryFilters()

    def test_from_dict_single_string(self) -> None:
        """A bare string is one value, not a list of characters."""
        filters = QueryFilters.from_dict({"locations": "Paris", "tags": ["Amis"]})
        assert filters.locations == ("paris",)
        assert filters.tags == ("amis",)

    @pytest.mark.parametrize("value", [42, {"ville": "Paris"}, ["Paris", 3]])
    def test_from_dict_invalid_list_field(self, value) -> None:
        """Anything but a string or a list of strings is rejected."""
        with pytest.raises(ValueError, match="locations"):
            QueryFilters.from_dict({"locations": value})

    def test_to_dict_omits_absent_fields(self) -> None:
        """Only present fields are serialized."""
        filters = QueryFilters(date_range=DateRange.for_year(2023), activities=("ski",))
        assert filters.to_dict() == {
            "date_range": {"start": "2023-01-01", "end": "2023-12-31"},
            "activities": ["ski"],
        }


class TestParsedQuery:
    """Tests for ParsedQuery."""

    def test_to_dict(self) -> None:
        """Serialization includes every field."""
        parsed = ParsedQuery("Mes vacances", QueryFilters(), "mes vacances", 0.6)
        assert parsed.to_dict() == {
            "original_query": "Mes vacances",
            "filters": {},
            "vector_query": "mes vacances",
            "confidence": 0.6,
        }
