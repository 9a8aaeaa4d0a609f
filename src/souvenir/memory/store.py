"""SQLite storage for journal memories."""

import json
import sqlite3
import uuid
from pathlib import Path
from typing import Sequence

from .models import MemoryRecord


class MemoryStore:
    """Persistent storage for memory records using SQLite.

    Embeddings are kept as JSON text and handed back untouched, so that
    readers decide how to treat a malformed vector.
    """

    def __init__(self, db_path: Path) -> None:
        """Initialize the store with a database path.

        Args:
            db_path: Path to the SQLite database file.
        """
        self.db_path = db_path
        self._conn: sqlite3.Connection | None = None

    def _get_connection(self) -> sqlite3.Connection:
        """Get or create the database connection."""
        if self._conn is None:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(self.db_path)
            self._conn.row_factory = sqlite3.Row
        return self._conn

    def init_db(self) -> None:
        """Create the memories table if it doesn't exist."""
        conn = self._get_connection()
        conn.execute("""
            CREATE TABLE IF NOT EXISTS memories (
                id          TEXT PRIMARY KEY,
                user_id     TEXT NOT NULL,
                content     TEXT NOT NULL,
                date        TEXT NOT NULL,
                location    TEXT,
                image_url   TEXT,
                embedding   TEXT,
                created_at  TEXT NOT NULL DEFAULT (datetime('now')),
                updated_at  TEXT NOT NULL DEFAULT (datetime('now'))
            )
        """)
        conn.execute(
            "CREATE INDEX IF NOT EXISTS idx_memories_user ON memories(user_id, date)"
        )
        conn.commit()

    def add(self, record: MemoryRecord) -> MemoryRecord:
        """Insert a record and return it with its timestamps.

        An empty id is replaced by a generated UUID.
        """
        conn = self._get_connection()
        record_id = record.id or str(uuid.uuid4())
        cursor = conn.execute(
            """
            INSERT INTO memories (id, user_id, content, date, location, image_url, embedding)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            RETURNING created_at, updated_at
            """,
            (
                record_id,
                record.owner_id,
                record.content,
                record.date.isoformat(),
                record.location,
                record.image_url,
                self._encode_embedding(record.embedding),
            ),
        )
        row = cursor.fetchone()
        conn.commit()
        return MemoryRecord(
            id=record_id,
            owner_id=record.owner_id,
            content=record.content,
            date=record.date,
            location=record.location,
            image_url=record.image_url,
            created_at=row["created_at"],
            updated_at=row["updated_at"],
            embedding=self._encode_embedding(record.embedding),
        )

    def get(self, record_id: str) -> MemoryRecord | None:
        """Get a record by id, or None if absent."""
        conn = self._get_connection()
        cursor = conn.execute("SELECT * FROM memories WHERE id = ?", (record_id,))
        row = cursor.fetchone()
        return self._row_to_record(row) if row is not None else None

    def list_for_owner(
        self,
        owner_id: str,
        has_embedding: bool | None = None,
        limit: int | None = None,
    ) -> list[MemoryRecord]:
        """List an owner's records, newest first.

        Args:
            owner_id: Owner to filter by.
            has_embedding: True for indexed records only, False for
                unindexed only, None for both.
            limit: Maximum number of records, None for no bound.

        Returns:
            Matching records.
        """
        query = "SELECT * FROM memories WHERE user_id = ?"
        params: list[object] = [owner_id]
        if has_embedding is True:
            query += " AND embedding IS NOT NULL"
        elif has_embedding is False:
            query += " AND embedding IS NULL"
        query += " ORDER BY date DESC, id"
        if limit is not None:
            query += " LIMIT ?"
            params.append(limit)

        conn = self._get_connection()
        cursor = conn.execute(query, params)
        return [self._row_to_record(row) for row in cursor.fetchall()]

    def records_without_embedding(
        self, owner_id: str, limit: int | None = None
    ) -> list[MemoryRecord]:
        """List an owner's records that still need an embedding."""
        return self.list_for_owner(owner_id, has_embedding=False, limit=limit)

    def set_embedding(self, record_id: str, embedding: Sequence[float]) -> bool:
        """Attach an embedding to a record.

        Returns:
            True if a record was updated, False otherwise.
        """
        conn = self._get_connection()
        cursor = conn.execute(
            """
            UPDATE memories
            SET embedding = ?, updated_at = datetime('now')
            WHERE id = ?
            """,
            (json.dumps(list(embedding)), record_id),
        )
        conn.commit()
        return cursor.rowcount > 0

    def count(self, owner_id: str) -> int:
        """Number of records stored for an owner."""
        conn = self._get_connection()
        cursor = conn.execute(
            "SELECT COUNT(*) AS n FROM memories WHERE user_id = ?", (owner_id,)
        )
        return int(cursor.fetchone()["n"])

    def close(self) -> None:
        """Close the database connection."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    @staticmethod
    def _encode_embedding(embedding: object) -> str | None:
        if embedding is None or isinstance(embedding, str):
            return embedding
        return json.dumps(list(embedding))

    def _row_to_record(self, row: sqlite3.Row) -> MemoryRecord:
        """Convert a database row to a MemoryRecord."""
        return MemoryRecord(
            id=row["id"],
            owner_id=row["user_id"],
            content=row["content"],
            date=row["date"],
            location=row["location"],
            image_url=row["image_url"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
            embedding=row["embedding"],
        )
