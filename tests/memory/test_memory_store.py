"""Tests for MemoryStore."""

import json
from datetime import date
from pathlib import Path

import pytest

from souvenir.memory import MemoryRecord, MemoryStore


@pytest.fixture
def store(tmp_path: Path) -> MemoryStore:
    """Create a MemoryStore with a temporary database."""
    store = MemoryStore(tmp_path / "souvenirs.db")
    store.init_db()
    yield store
    store.close()


def make_record(record_id: str = "", owner_id: str = "user-1", **kwargs) -> MemoryRecord:
    defaults = {"content": "Balade au bord du lac", "date": date(2023, 6, 1)}
    defaults.update(kwargs)
    return MemoryRecord(id=record_id, owner_id=owner_id, **defaults)


class TestMemoryStoreInit:
    """Tests for MemoryStore initialization."""

    def test_creates_db_directory(self, tmp_path: Path):
        """Store creates parent directories if they don't exist."""
        nested_path = tmp_path / "nested" / "dir" / "souvenirs.db"
        store = MemoryStore(nested_path)
        store.init_db()
        assert nested_path.exists()
        store.close()

    def test_creates_memories_table(self, store: MemoryStore):
        """init_db creates the memories table and its index."""
        conn = store._get_connection()
        table = conn.execute(
            "SELECT name FROM sqlite_master WHERE type='table' AND name='memories'"
        ).fetchone()
        index = conn.execute(
            "SELECT name FROM sqlite_master WHERE type='index' AND name='idx_memories_user'"
        ).fetchone()
        assert table is not None
        assert index is not None

    def test_init_db_idempotent(self, store: MemoryStore):
        """init_db can be called multiple times."""
        store.init_db()
        store.init_db()


class TestMemoryStoreAdd:
    """Tests for adding records."""

    def test_add_generates_id(self, store: MemoryStore):
        """An empty id is replaced by a generated one."""
        saved = store.add(make_record())
        assert saved.id
        assert saved.created_at is not None
        assert saved.updated_at is not None

    def test_add_keeps_fields(self, store: MemoryStore):
        """All fields survive a round trip through the database."""
        store.add(make_record("m1", location="Annecy", image_url="img/1.jpg"))
        loaded = store.get("m1")
        assert loaded is not None
        assert loaded.content == "Balade au bord du lac"
        assert loaded.date == date(2023, 6, 1)
        assert loaded.location == "Annecy"
        assert loaded.image_url == "img/1.jpg"
        assert loaded.embedding is None

    def test_add_with_embedding(self, store: MemoryStore):
        """Embeddings are stored as JSON text and returned raw."""
        store.add(make_record("m1", embedding=[0.5, 0.25]))
        loaded = store.get("m1")
        assert json.loads(loaded.embedding) == [0.5, 0.25]

    def test_get_missing(self, store: MemoryStore):
        """Unknown ids give None."""
        assert store.get("nope") is None


class TestMemoryStoreList:
    """Tests for listing records."""

    def test_list_for_owner_newest_first(self, store: MemoryStore):
        """Records are listed by date, newest first, for one owner only."""
        store.add(make_record("old", date=date(2021, 1, 1)))
        store.add(make_record("new", date=date(2023, 1, 1)))
        store.add(make_record("other", owner_id="user-2"))

        records = store.list_for_owner("user-1")
        assert [r.id for r in records] == ["new", "old"]

    def test_filter_by_embedding(self, store: MemoryStore):
        """has_embedding selects indexed or unindexed records."""
        store.add(make_record("indexed", embedding=[1.0]))
        store.add(make_record("pending"))

        assert [r.id for r in store.list_for_owner("user-1", has_embedding=True)] == ["indexed"]
        assert [r.id for r in store.list_for_owner("user-1", has_embedding=False)] == ["pending"]
        assert [r.id for r in store.records_without_embedding("user-1")] == ["pending"]

    def test_limit(self, store: MemoryStore):
        """limit bounds the number of records."""
        for i in range(5):
            store.add(make_record(f"m{i}", date=date(2023, 1, i + 1)))
        assert len(store.list_for_owner("user-1", limit=3)) == 3

    def test_count(self, store: MemoryStore):
        """count gives the number of records per owner."""
        store.add(make_record("a"))
        store.add(make_record("b"))
        assert store.count("user-1") == 2
        assert store.count("user-2") == 0


class TestMemoryStoreEmbedding:
    """Tests for set_embedding."""

    def test_set_embedding(self, store: MemoryStore):
        """set_embedding attaches a vector to an existing record."""
        store.add(make_record("m1"))
        assert store.set_embedding("m1", [0.1, 0.2]) is True
        assert json.loads(store.get("m1").embedding) == [0.1, 0.2]

    def test_set_embedding_missing_record(self, store: MemoryStore):
        """set_embedding reports unknown ids."""
        assert store.set_embedding("nope", [0.1]) is False
