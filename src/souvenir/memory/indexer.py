"""Attach embeddings to memories that do not have one yet."""

import logging
from dataclasses import dataclass, field

from ..errors import EmbeddingError
from ..providers.embedding import HttpEmbeddingClient, normalize, parse_embedding
from .models import MemoryRecord
from .store import MemoryStore

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 16


@dataclass
class IndexReport:
    """Outcome of an indexing run."""

    owner_id: str
    indexed: int = 0
    failed: int = 0
    failed_ids: list[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.indexed + self.failed


class MemoryIndexer:
    """Embed an owner's unindexed memories and store the vectors."""

    def __init__(
        self,
        store: MemoryStore,
        embedder: HttpEmbeddingClient,
        normalize_vectors: bool = False,
    ) -> None:
        self.store = store
        self.embedder = embedder
        self.normalize_vectors = normalize_vectors

    async def index_owner(
        self, owner_id: str, batch_size: int = DEFAULT_BATCH_SIZE
    ) -> IndexReport:
        """Index every record of ``owner_id`` lacking an embedding.

        Records are embedded in batches. When a whole batch fails, its
        records are retried one by one so a single bad record does not
        block the others. Records that still fail are skipped and counted.

        Args:
            owner_id: Owner whose records to index.
            batch_size: Number of texts per embedding request.

        Returns:
            Counts of indexed and failed records.
        """
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")

        report = IndexReport(owner_id=owner_id)
        pending = self.store.records_without_embedding(owner_id)
        if not pending:
            logger.debug(f"Nothing to index for owner {owner_id}")
            return report

        for start in range(0, len(pending), batch_size):
            batch = pending[start:start + batch_size]
            vectors = await self._embed_batch(batch)
            for record, vector in zip(batch, vectors):
                self._store_vector(record, vector, report)

        logger.info(
            f"Indexed {report.indexed} memories for owner {owner_id} "
            f"({report.failed} failed)"
        )
        return report

    async def _embed_batch(self, batch: list[MemoryRecord]) -> list[list[float] | None]:
        try:
            return list(await self.embedder.embed_many([r.content for r in batch]))
        except EmbeddingError as e:
            logger.warning(f"Batch embedding failed, retrying one by one: {e}")

        vectors: list[list[float] | None] = []
        for record in batch:
            try:
                vectors.append(await self.embedder.embed(record.content))
            except EmbeddingError as e:
                logger.warning(f"Embedding failed for memory {record.id}: {e}")
                vectors.append(None)
        return vectors

    def _store_vector(
        self, record: MemoryRecord, vector: list[float] | None, report: IndexReport
    ) -> None:
        parsed = parse_embedding(vector) if vector is not None else None
        if parsed is None:
            report.failed += 1
            report.failed_ids.append(record.id)
            return

        if self.normalize_vectors:
            parsed = normalize(parsed)
        if self.store.set_embedding(record.id, parsed):
            report.indexed += 1
        else:
            report.failed += 1
            report.failed_ids.append(record.id)
