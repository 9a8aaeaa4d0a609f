"""Data models for journal memories."""

from dataclasses import dataclass, replace
from datetime import date
from typing import Any


@dataclass(frozen=True)
class MemoryRecord:
    """A single dated journal entry.

    Attributes:
        id: Opaque, stable identifier.
        owner_id: Identifier of the user who wrote the entry.
        content: Free text of the entry, never empty.
        date: Calendar day the entry refers to.
        location: Optional free-text place label.
        image_url: Optional reference to an attached image.
        created_at: ISO timestamp when created.
        updated_at: ISO timestamp when last updated.
        embedding: Stored embedding as-is: a list of floats, its JSON text,
            or None when the record was never indexed.
    """

    id: str
    owner_id: str
    content: str
    date: date
    location: str | None = None
    image_url: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    embedding: Any = None

    def __post_init__(self) -> None:
        if not self.content or not self.content.strip():
            raise ValueError("content must not be empty")
        if isinstance(self.date, str):
            # Accept ISO strings from storage layers.
            object.__setattr__(self, "date", date.fromisoformat(self.date[:10]))

    @property
    def has_embedding(self) -> bool:
        """True if an embedding value is stored, valid or not."""
        return self.embedding is not None

    def without_embedding(self) -> "MemoryRecord":
        """Return a copy without the embedding payload."""
        if self.embedding is None:
            return self
        return replace(self, embedding=None)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for logs and API layers, excluding the embedding."""
        return {
            "id": self.id,
            "owner_id": self.owner_id,
            "content": self.content,
            "date": self.date.isoformat(),
            "location": self.location,
            "image_url": self.image_url,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
