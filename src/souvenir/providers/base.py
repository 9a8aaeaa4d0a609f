"""Interfaces for the collaborators the pipeline depends on.

- RecordStore: read access to an owner's memory records
- EmbeddingProvider: text to fixed-length vector
- TextProvider: system instruction + user message to free text
"""

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..memory.models import MemoryRecord


class RecordStore(Protocol):
    """Protocol for read access to memory records."""

    def list_for_owner(
        self,
        owner_id: str,
        has_embedding: bool | None = None,
        limit: int | None = None,
    ) -> list["MemoryRecord"]:
        """List an owner's records, optionally only indexed ones."""
        ...

    def get(self, record_id: str) -> "MemoryRecord | None":
        """Get a single record by id."""
        ...


class EmbeddingProvider(Protocol):
    """Protocol for text embedding.

    The vector length is fixed per provider configuration.
    """

    async def embed(self, text: str) -> list[float]:
        """Embed a single text."""
        ...


class TextProvider(Protocol):
    """Protocol for text generation.

    Not having one configured is a normal state: answers then come from
    templates.
    """

    async def complete(self, prompt: str, system: str | None = None) -> str:
        """Complete a prompt and return the text response."""
        ...
