"""Memory records, their SQLite store and the indexing workflow."""

from .indexer import IndexReport, MemoryIndexer
from .models import MemoryRecord
from .store import MemoryStore

__all__ = ["IndexReport", "MemoryIndexer", "MemoryRecord", "MemoryStore"]
