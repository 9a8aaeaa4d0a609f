"""Souvenir - question answering over a personal memory journal."""

from .config import PipelineConfig, config_from_env, load_config, save_config
from .errors import EmbeddingError, GenerationError, QueryValidationError, SouvenirError
from .memory import IndexReport, MemoryIndexer, MemoryRecord, MemoryStore
from .pipeline import MemoryPipeline, PipelineResponse
from .query import DateRange, ParsedQuery, QueryFilters, QueryType
from .search import RankingWeights, SearchResult

__version__ = "0.1.0"

__all__ = [
    "DateRange",
    "EmbeddingError",
    "GenerationError",
    "IndexReport",
    "MemoryIndexer",
    "MemoryPipeline",
    "MemoryRecord",
    "MemoryStore",
    "ParsedQuery",
    "PipelineConfig",
    "PipelineResponse",
    "QueryFilters",
    "QueryType",
    "QueryValidationError",
    "RankingWeights",
    "SearchResult",
    "SouvenirError",
    "config_from_env",
    "load_config",
    "save_config",
]
