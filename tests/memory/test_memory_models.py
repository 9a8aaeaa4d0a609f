"""Tests for MemoryRecord."""

from datetime import date

import pytest

from souvenir.memory import MemoryRecord


class TestMemoryRecord:
    """Tests for MemoryRecord dataclass."""

    def test_create_minimal(self):
        """Create a record with required fields only."""
        record = MemoryRecord(id="m1", owner_id="u", content="Café", date=date(2023, 1, 2))
        assert record.location is None
        assert record.embedding is None
        assert not record.has_embedding

    def test_empty_content_rejected(self):
        """Empty or blank content is invalid."""
        with pytest.raises(ValueError, match="content"):
            MemoryRecord(id="m1", owner_id="u", content="  ", date=date(2023, 1, 2))

    def test_iso_date_string(self):
        """ISO strings from storage are converted to dates."""
        record = MemoryRecord(id="m1", owner_id="u", content="Café", date="2023-01-02T10:00:00")
        assert record.date == date(2023, 1, 2)

    def test_invalid_date_string(self):
        """A malformed date string is rejected."""
        with pytest.raises(ValueError):
            MemoryRecord(id="m1", owner_id="u", content="Café", date="2023-13-45")

    def test_without_embedding(self):
        """The copy drops the embedding and keeps everything else."""
        record = MemoryRecord(
            id="m1", owner_id="u", content="Café", date=date(2023, 1, 2), embedding=[0.1]
        )
        stripped = record.without_embedding()
        assert stripped.embedding is None
        assert stripped.content == record.content
        assert record.embedding == [0.1]

    def test_to_dict_excludes_embedding(self):
        """Serialization never carries the embedding."""
        record = MemoryRecord(
            id="m1", owner_id="u", content="Café", date=date(2023, 1, 2), embedding=[0.1]
        )
        data = record.to_dict()
        assert "embedding" not in data
        assert data["date"] == "2023-01-02"
