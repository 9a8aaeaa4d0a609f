"""Question answering over an owner's memories.

MemoryPipeline ties the stages together:

1. parse the question into filters and a cleaned search text
2. merge caller filters
3. retrieve candidates by similarity
4. drop candidates failing the filters, re-rank the rest
5. answer from the surviving records

Only invalid input raises. Every other failure ends in a well-formed
response.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Mapping

from groq import AsyncGroq

from .answer.generator import AnswerGenerator
from .config import PipelineConfig
from .errors import QueryValidationError
from .memory.models import MemoryRecord
from .providers.base import EmbeddingProvider, RecordStore, TextProvider
from .providers.embedding import HttpEmbeddingClient
from .providers.llm_client import GroqTextProvider
from .query.classifier import classify_query_type
from .query.filters import merge_filters
from .query.models import ParsedQuery, QueryFilters, QueryType
from .query.parser import parse_query, parse_query_simple, validate_filters
from .search.models import SearchResult
from .search.ranking import apply_hard_filters, rank_results
from .search.similarity import SimilaritySearch
from .search_log import SearchLogEntry, SearchLogger

logger = logging.getLogger(__name__)

FAILURE_MESSAGE = (
    "Désolé, je n'ai pas pu traiter ta demande. Une erreur s'est produite."
)


@dataclass
class PipelineResponse:
    """The answer to a question and how it was obtained.

    Attributes:
        answer: Natural-language answer.
        sources: Records the answer is grounded on, best first, without
            their embeddings.
        query_type: Shape of the answer.
        confidence: Parse confidence, 0 for a failed request.
        processing_time_ms: Wall-clock time spent answering.
        generated_by_text_provider: True when the LLM wrote the answer.
        parsed_query: Parser output, for diagnostics.
        filters: Filters actually applied, after merging.
        results: Scored results behind ``sources``.
        model: Text model used, when the LLM wrote the answer.
    """

    answer: str
    sources: list[MemoryRecord]
    query_type: QueryType
    confidence: float
    processing_time_ms: float
    generated_by_text_provider: bool = False
    parsed_query: ParsedQuery | None = None
    filters: QueryFilters = field(default_factory=QueryFilters)
    results: list[SearchResult] = field(default_factory=list)
    model: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "answer": self.answer,
            "sources": [record.to_dict() for record in self.sources],
            "query_type": self.query_type.value,
            "confidence": self.confidence,
            "processing_time_ms": self.processing_time_ms,
            "generated_by_text_provider": self.generated_by_text_provider,
            "parsed_query": self.parsed_query.to_dict() if self.parsed_query else None,
            "filters": self.filters.to_dict(),
            "results": [result.to_dict() for result in self.results],
            "model": self.model,
        }


class MemoryPipeline:
    """Answer free-text questions about an owner's memories.

    Example:
        pipeline = MemoryPipeline.from_config(MemoryStore(db_path), config_from_env())
        response = await pipeline.answer_query("Raconte-moi mon été 2022", "user-1")
    """

    def __init__(
        self,
        store: RecordStore,
        embedder: EmbeddingProvider | None = None,
        text_provider: TextProvider | None = None,
        config: PipelineConfig | None = None,
        search_logger: SearchLogger | None = None,
    ) -> None:
        """Initialize the pipeline.

        Args:
            store: Source of memory records.
            embedder: Embedding provider. Without one, search is textual.
            text_provider: LLM for answers. Without one, templates answer.
            config: Pipeline settings. Defaults apply if None.
            search_logger: Optional JSONL audit log of answered queries.
        """
        self.config = config or PipelineConfig()
        self.search = SimilaritySearch(
            store,
            embedder=embedder,
            candidate_limit=self.config.candidate_limit,
            embedding_timeout=self.config.embedding_timeout,
        )
        self.generator = AnswerGenerator(
            text_provider=text_provider,
            generation_timeout=self.config.generation_timeout,
        )
        self.search_logger = search_logger

    @classmethod
    def from_config(
        cls, store: RecordStore, config: PipelineConfig | None = None
    ) -> "MemoryPipeline":
        """Build a pipeline with the providers the config has keys for."""
        config = config or PipelineConfig()

        embedder = None
        if config.embedding_api_key:
            embedder = HttpEmbeddingClient(
                api_key=config.embedding_api_key,
                model=config.embedding_model,
                base_url=config.embedding_base_url,
                timeout=config.embedding_timeout,
            )
        else:
            logger.info("No embedding key configured, search will be textual")

        text_provider = None
        if config.has_text_provider:
            text_provider = GroqTextProvider(
                AsyncGroq(api_key=config.groq_api_key),
                model=config.groq_model,
                temperature=config.temperature,
                max_tokens=config.max_tokens,
            )
        else:
            logger.info("No Groq key configured, answers will use templates")

        search_logger = None
        if config.search_log_dir is not None:
            search_logger = SearchLogger(log_dir=config.search_log_dir)

        return cls(
            store,
            embedder=embedder,
            text_provider=text_provider,
            config=config,
            search_logger=search_logger,
        )

    def validate_query(self, query: str) -> str:
        """Return the trimmed query.

        Raises:
            QueryValidationError: If the query is empty, too short or too long.
        """
        if not isinstance(query, str) or not query.strip():
            raise QueryValidationError("La requête ne peut pas être vide")
        cleaned = query.strip()
        if len(cleaned) < self.config.min_query_length:
            raise QueryValidationError(
                f"La requête doit contenir au moins {self.config.min_query_length} caractères"
            )
        if len(cleaned) > self.config.max_query_length:
            raise QueryValidationError(
                f"La requête est trop longue (max {self.config.max_query_length} caractères)"
            )
        return cleaned

    async def answer_query(
        self,
        query: str,
        owner_id: str,
        limit: int | None = None,
        extra_filters: QueryFilters | Mapping[str, Any] | None = None,
    ) -> PipelineResponse:
        """Answer a question from the owner's memories.

        Args:
            query: Free-text question.
            owner_id: Owner whose memories are searched.
            limit: Maximum number of sources. Config default if None.
            extra_filters: Caller filters, merged with the parsed ones.

        Returns:
            The response. Unexpected failures give a generic answer with no
            sources and zero confidence.

        Raises:
            QueryValidationError: If the query, limit or filters are invalid.
        """
        cleaned = self.validate_query(query)
        if limit is None:
            limit = self.config.result_limit
        if limit < 1:
            raise QueryValidationError("limit must be at least 1")
        if extra_filters is not None and not isinstance(extra_filters, QueryFilters):
            try:
                extra_filters = QueryFilters.from_dict(extra_filters)
            except (KeyError, TypeError, ValueError) as e:
                raise QueryValidationError(f"Invalid filters: {e}") from e

        start = time.perf_counter()
        try:
            response = await self._run(cleaned, owner_id, limit, extra_filters, start)
        except Exception as e:
            logger.error(f"Failed to answer query for owner {owner_id}: {e}", exc_info=True)
            response = PipelineResponse(
                answer=FAILURE_MESSAGE,
                sources=[],
                query_type=QueryType.LIST,
                confidence=0.0,
                processing_time_ms=_elapsed_ms(start),
            )
            self._log_search(owner_id, cleaned, response, error=str(e))
            return response

        self._log_search(owner_id, cleaned, response)
        return response

    async def _run(
        self,
        query: str,
        owner_id: str,
        limit: int,
        extra_filters: QueryFilters | None,
        start: float,
    ) -> PipelineResponse:
        parsed = self._parse(query)
        filters = merge_filters(parsed.filters, extra_filters)

        results = await self.search.search(parsed.vector_query, owner_id, limit * 2)
        results = apply_hard_filters(results, filters)
        results = rank_results(results, parsed, filters, self.config.ranking_weights)
        results = results[:limit]

        query_type = classify_query_type(query)
        records = [result.record for result in results]
        generated = await self.generator.generate(query, records, query_type, filters)

        return PipelineResponse(
            answer=generated.answer,
            sources=[record.without_embedding() for record in records],
            query_type=query_type,
            confidence=parsed.confidence,
            processing_time_ms=_elapsed_ms(start),
            generated_by_text_provider=generated.generated_by_text_provider,
            parsed_query=parsed,
            filters=filters,
            results=results,
            model=generated.model,
        )

    def _parse(self, query: str) -> ParsedQuery:
        try:
            parsed = parse_query(query)
        except Exception as e:
            logger.warning(f"Query parsing failed, using simple parse: {e}")
            return parse_query_simple(query)

        if not validate_filters(parsed.filters):
            logger.warning("Parsed filters are invalid, using simple parse")
            return parse_query_simple(query)
        return parsed

    def _log_search(
        self,
        owner_id: str,
        query: str,
        response: PipelineResponse,
        error: str | None = None,
    ) -> None:
        if self.search_logger is None:
            return
        entry = SearchLogEntry(
            owner_id=owner_id,
            query=query,
            success=error is None,
            results_count=len(response.sources),
            processing_time_ms=response.processing_time_ms,
            query_type=response.query_type.value,
            generated_by_text_provider=response.generated_by_text_provider,
            parsed_query=response.parsed_query.to_dict() if response.parsed_query else {},
            error=error,
        )
        try:
            self.search_logger.log(entry)
        except OSError as e:
            logger.warning(f"Failed to write search log: {e}")


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000
