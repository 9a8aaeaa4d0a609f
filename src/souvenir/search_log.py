"""JSONL audit log of answered queries."""

import json
import logging
import uuid
from collections import Counter
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterator

logger = logging.getLogger(__name__)

DEFAULT_FILENAME = "searches.jsonl"
MOST_COMMON_LIMIT = 5


@dataclass
class SearchLogEntry:
    """One answered query."""

    owner_id: str
    query: str
    success: bool
    results_count: int = 0
    processing_time_ms: float = 0.0
    query_type: str | None = None
    generated_by_text_provider: bool = False
    parsed_query: dict[str, Any] = field(default_factory=dict)
    error: str | None = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict, excluding empty values."""
        data = asdict(self)
        return {k: v for k, v in data.items() if v is not None and v != {} and v != []}


@dataclass
class SearchStats:
    """Aggregates over an owner's logged searches."""

    total_searches: int = 0
    average_processing_time_ms: float = 0.0
    most_common_queries: list[tuple[str, int]] = field(default_factory=list)


class SearchLogger:
    """Append search entries to a JSONL file, rotating it by size."""

    def __init__(
        self,
        log_dir: str | Path | None = None,
        filename: str = DEFAULT_FILENAME,
        max_size_mb: float = 10.0,
    ) -> None:
        if log_dir is None:
            log_dir = Path.home() / ".souvenir" / "logs"
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.filename = filename
        self.max_size_bytes = int(max_size_mb * 1024 * 1024)

    @property
    def log_path(self) -> Path:
        """Current log file path."""
        return self.log_dir / self.filename

    def _rotate_if_needed(self) -> None:
        if not self.log_path.exists():
            return

        if self.log_path.stat().st_size >= self.max_size_bytes:
            timestamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S_%f")
            rotated_name = f"{self.log_path.stem}_{timestamp}.jsonl"
            self.log_path.rename(self.log_dir / rotated_name)

    def log(self, entry: SearchLogEntry) -> None:
        """Append an entry to the current file."""
        self._rotate_if_needed()

        with open(self.log_path, "a", encoding="utf-8") as f:
            f.write(json.dumps(entry.to_dict(), ensure_ascii=False) + "\n")

    def entries(self, owner_id: str | None = None) -> Iterator[dict[str, Any]]:
        """Iterate over entries of the current file, optionally for one owner.

        Lines that are not valid JSON are skipped.
        """
        if not self.log_path.exists():
            return

        with open(self.log_path, encoding="utf-8") as f:
            for line_number, line in enumerate(f, 1):
                line = line.strip()
                if not line:
                    continue
                try:
                    entry = json.loads(line)
                except json.JSONDecodeError:
                    logger.warning(f"Skipping malformed search log line {line_number}")
                    continue
                if owner_id is None or entry.get("owner_id") == owner_id:
                    yield entry

    def stats(self, owner_id: str) -> SearchStats:
        """Summarize an owner's searches in the current file."""
        entries = list(self.entries(owner_id))
        if not entries:
            return SearchStats()

        total_time = sum(float(e.get("processing_time_ms", 0.0)) for e in entries)
        queries = Counter(e["query"].strip().lower() for e in entries if e.get("query"))
        return SearchStats(
            total_searches=len(entries),
            average_processing_time_ms=total_time / len(entries),
            most_common_queries=queries.most_common(MOST_COMMON_LIMIT),
        )


# Global instance
_search_logger: SearchLogger | None = None


def get_search_logger() -> SearchLogger | None:
    """Get the global search logger, None when not configured."""
    return _search_logger


def configure_search_logger(
    log_dir: str | Path | None = None, max_size_mb: float = 10.0
) -> SearchLogger:
    """Create the global search logger."""
    global _search_logger
    _search_logger = SearchLogger(log_dir=log_dir, max_size_mb=max_size_mb)
    return _search_logger


def reset_search_logger() -> None:
    """Reset the global search logger (for testing)."""
    global _search_logger
    _search_logger = None
