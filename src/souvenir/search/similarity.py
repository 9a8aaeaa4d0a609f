"""Similarity search over an owner's indexed memories.

Candidates are scored by the first strategy able to handle the query:
vector similarity when an embedding can be obtained, plain substring
matching otherwise.
"""

import asyncio
import logging
import re
from typing import Protocol, Sequence

from ..memory.models import MemoryRecord
from ..providers.base import EmbeddingProvider, RecordStore
from ..providers.embedding import cosine_similarity, parse_embedding
from .models import SearchResult

logger = logging.getLogger(__name__)

DEFAULT_CANDIDATE_LIMIT = 50
TEXT_MATCH_SCORE = 0.5

SEMANTIC_REASON = "Similarité sémantique"
TEXT_REASON = "Recherche textuelle"

class SearchStrategy(Protocol):
    """One way of scoring candidates.

    ``search`` returns None when the strategy cannot handle the query, so
    the next strategy gets a chance.
    """

    name: str

    async def search(
        self, query: str, candidates: list[MemoryRecord], limit: int
    ) -> list[SearchResult] | None: ...

class VectorSearchStrategy:
    """Rank candidates by cosine similarity to the query embedding."""

    name = "vector"

    def __init__(self, embedder: EmbeddingProvider, timeout: float | None = None) -> None:
        self.embedder = embedder
        self.timeout = timeout

    async def search(
        self, query: str, candidates: list[MemoryRecord], limit: int
    ) -> list[SearchResult] | None:
        query_vector = await self._embed_query(query)
        if query_vector is None:
            return None

        scored: list[tuple[MemoryRecord, float, bool]] = []
        for record in candidates:
            vector = parse_embedding(record.embedding, len(query_vector))
            if vector is None:
                logger.warning(f"Memory {record.id} has an invalid embedding, scoring 0")
                scored.append((record, 0.0, True))
                continue
            scored.append((record, cosine_similarity(query_vector, vector), False))

        scored.sort(key=lambda item: item[1], reverse=True)
        return [
            SearchResult(
                record=record,
                relevance_score=similarity,
                match_reason=SEMANTIC_REASON,
                highlighted_content=highlight_content(record.content, query),
                invalid_embedding=invalid,
            )
            for record, similarity, invalid in scored[:limit]
        ]

    async def _embed_query(self, query: str) -> list[float] | None:
        try:
            if self.timeout is not None:
                vector = await asyncio.wait_for(self.embedder.embed(query), self.timeout)
            else:
                vector = await self.embedder.embed(query)
        except asyncio.TimeoutError:
            logger.warning("Query embedding timed out, falling back to text search")
            return None
        except Exception as e:
            logger.warning(f"Query embedding failed, falling back to text search: {e}")
            return None

        parsed = parse_embedding(vector)
        if parsed is None:
            logger.warning("Query embedding is empty or invalid, falling back to text search")
        return parsed

class TextSearchStrategy:
    """Case-insensitive substring match on content and location."""

    name = "text"

    async def search(
        self, query: str, candidates: list[MemoryRecord], limit: int
    ) -> list[SearchResult] | None:
        needle = query.strip().lower()
        if not needle:
            return []

        results: list[SearchResult] = []
        for record in candidates:
            location = (record.location or "").lower()
            if needle in record.content.lower() or needle in location:
                results.append(
                    SearchResult(
                        record=record,
                        relevance_score=TEXT_MATCH_SCORE,
                        match_reason=TEXT_REASON,
                        highlighted_content=highlight_content(record.content, query),
                    )
                )
                if len(results) >= limit:
                    break
        logger.debug(f"Text search found {len(results)} results")
        return results

class SimilaritySearch:
    """Fetch an owner's indexed memories and score them against a query."""

    def __init__(
        self,
        store: RecordStore,
        embedder: EmbeddingProvider | None = None,
        candidate_limit: int = DEFAULT_CANDIDATE_LIMIT,
        embedding_timeout: float | None = None,
        strategies: Sequence[SearchStrategy] | None = None,
    ) -> None:
        """Initialize the search.

        Args:
            store: Record store to read candidates from.
            embedder: Embedding provider. Without one, only text search runs.
            candidate_limit: Maximum number of candidates fetched per query.
            embedding_timeout: Seconds allowed for the query embedding.
            strategies: Explicit strategy chain, overriding the default.
        """
        self.store = store
        self.candidate_limit = candidate_limit
        if strategies is None:
            chain: list[SearchStrategy] = []
            if embedder is not None:
                chain.append(VectorSearchStrategy(embedder, timeout=embedding_timeout))
            chain.append(TextSearchStrategy())
            strategies = chain
        self.strategies = list(strategies)

    async def search(self, query: str, owner_id: str, limit: int) -> list[SearchResult]:
        """Return at most ``limit`` results for the owner, best first."""
        candidates = self.store.list_for_owner(
            owner_id, has_embedding=True, limit=self.candidate_limit
        )
        if not candidates:
            logger.debug(f"No indexed memories for owner {owner_id}")
            return []

        for strategy in self.strategies:
            results = await strategy.search(query, candidates, limit)
            if results is not None:
                logger.debug(f"Strategy {strategy.name} returned {len(results)} results")
                return results
        return []

def highlight_content(content: str, query: str) -> str:
    """Wrap every query word longer than two characters in ``**``."""
    if not content or not query:
        return content
    words = sorted({w for w in query.lower().split() if len(w) > 2}, key=len, reverse=True)
    if not words:
        return content
    pattern = re.compile("(" + "|".join(re.escape(w) for w in words) + ")", re.IGNORECASE)
    return pattern.sub(r"**\1**", content)
