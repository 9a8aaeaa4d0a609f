"""Pipeline configuration.

Loads settings from environment variables or from ~/.souvenir/config.json.
API keys are only read from the environment and never written back to disk.
"""

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .providers.embedding import DEFAULT_BASE_URL, DEFAULT_MODEL
from .providers.llm_client import DEFAULT_MODEL as DEFAULT_GROQ_MODEL
from .search.ranking import RankingWeights

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".souvenir" / "config.json"


@dataclass
class PipelineConfig:
    """Configuration for the question-answering pipeline.

    Attributes:
        result_limit: Default number of sources returned per query.
        candidate_limit: Maximum records fetched from the store per query.
        min_query_length: Shortest accepted query, after trimming.
        max_query_length: Longest accepted query, after trimming.
        embedding_timeout: Seconds allowed for the query embedding.
        generation_timeout: Seconds allowed for answer generation.
        embedding_model: Model name sent to the embeddings endpoint.
        embedding_base_url: Base URL of an OpenAI-compatible API.
        embedding_api_key: Key for the embeddings endpoint.
        groq_model: Groq chat model used for answers.
        groq_api_key: Groq key. Without one, answers come from templates.
        temperature: Sampling temperature for answer generation.
        max_tokens: Token budget for a generated answer.
        search_log_dir: Directory of the JSONL search log, None to disable.
        ranking_weights: Bonuses applied by the ranker.
    """

    result_limit: int = 10
    candidate_limit: int = 50
    min_query_length: int = 3
    max_query_length: int = 500
    embedding_timeout: float = 10.0
    generation_timeout: float = 30.0
    embedding_model: str = DEFAULT_MODEL
    embedding_base_url: str = DEFAULT_BASE_URL
    embedding_api_key: str | None = None
    groq_model: str = DEFAULT_GROQ_MODEL
    groq_api_key: str | None = None
    temperature: float = 0.7
    max_tokens: int = 500
    search_log_dir: Path | None = None
    ranking_weights: RankingWeights = field(default_factory=RankingWeights)

    def __post_init__(self) -> None:
        """Validate config."""
        if self.result_limit < 1:
            raise ValueError("result_limit must be at least 1")
        if self.candidate_limit < 1:
            raise ValueError("candidate_limit must be at least 1")
        if self.min_query_length < 1:
            raise ValueError("min_query_length must be at least 1")
        if self.max_query_length < self.min_query_length:
            raise ValueError("max_query_length must not be below min_query_length")
        if self.embedding_timeout <= 0 or self.generation_timeout <= 0:
            raise ValueError("timeouts must be positive")
        if self.search_log_dir is not None:
            self.search_log_dir = Path(self.search_log_dir).expanduser()

    @property
    def has_text_provider(self) -> bool:
        return bool(self.groq_api_key)


def config_from_env() -> PipelineConfig:
    """Load configuration from environment variables."""
    log_dir = os.getenv("SOUVENIR_SEARCH_LOG_DIR")
    return PipelineConfig(
        result_limit=int(os.getenv("SOUVENIR_RESULT_LIMIT", "10")),
        candidate_limit=int(os.getenv("SOUVENIR_CANDIDATE_LIMIT", "50")),
        embedding_timeout=float(os.getenv("SOUVENIR_EMBEDDING_TIMEOUT", "10")),
        generation_timeout=float(os.getenv("SOUVENIR_GENERATION_TIMEOUT", "30")),
        embedding_model=os.getenv("SOUVENIR_EMBEDDING_MODEL", DEFAULT_MODEL),
        embedding_base_url=os.getenv("SOUVENIR_EMBEDDING_BASE_URL", DEFAULT_BASE_URL),
        embedding_api_key=os.getenv("OPENAI_API_KEY"),
        groq_model=os.getenv("GROQ_MODEL", DEFAULT_GROQ_MODEL),
        groq_api_key=os.getenv("GROQ_API_KEY"),
        search_log_dir=Path(log_dir) if log_dir else None,
    )


def load_config(config_path: Path | None = None) -> PipelineConfig:
    """Load PipelineConfig from a JSON file.

    The config file should have this structure:
    ```json
    {
      "search": {"result_limit": 10, "candidate_limit": 50},
      "timeouts": {"embedding": 10, "generation": 30},
      "embedding": {"model": "text-embedding-3-small"},
      "generation": {"model": "llama-3.1-70b-versatile", "temperature": 0.7},
      "ranking": {"date": 0.1, "location": 0.15},
      "search_log_dir": "~/.souvenir/logs"
    }
    ```

    API keys always come from the environment.

    Args:
        config_path: Path to config file. Uses DEFAULT_CONFIG_PATH if None.

    Returns:
        PipelineConfig instance with loaded values.
    """
    path = config_path or DEFAULT_CONFIG_PATH

    if not path.exists():
        logger.debug("No config file at %s, using defaults", path)
        return _with_env_keys(PipelineConfig())

    try:
        with open(path, "r") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        logger.warning("Invalid JSON in %s: %s. Using defaults.", path, e)
        return _with_env_keys(PipelineConfig())
    except OSError as e:
        logger.warning("Cannot read %s: %s. Using defaults.", path, e)
        return _with_env_keys(PipelineConfig())

    if not isinstance(data, dict):
        logger.warning("Config in %s is not an object. Using defaults.", path)
        return _with_env_keys(PipelineConfig())

    return _with_env_keys(_parse_config(data))


def _with_env_keys(config: PipelineConfig) -> PipelineConfig:
    config.embedding_api_key = config.embedding_api_key or os.getenv("OPENAI_API_KEY")
    config.groq_api_key = config.groq_api_key or os.getenv("GROQ_API_KEY")
    return config


def _positive(value: Any, default: float) -> Any:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        return default
    return value


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    section = data.get(name, {})
    return section if isinstance(section, dict) else {}


def _parse_config(data: dict[str, Any]) -> PipelineConfig:
    """Parse config dictionary into PipelineConfig.

    Invalid values are replaced by their defaults.
    """
    defaults = PipelineConfig()
    search = _section(data, "search")
    timeouts = _section(data, "timeouts")
    embedding = _section(data, "embedding")
    generation = _section(data, "generation")
    ranking = _section(data, "ranking")

    result_limit = search.get("result_limit", defaults.result_limit)
    if not isinstance(result_limit, int) or result_limit < 1:
        result_limit = defaults.result_limit

    candidate_limit = search.get("candidate_limit", defaults.candidate_limit)
    if not isinstance(candidate_limit, int) or candidate_limit < 1:
        candidate_limit = defaults.candidate_limit

    weights = defaults.ranking_weights
    weight_values = {
        name: ranking[name]
        for name in ("date", "location", "activity", "emotion")
        if isinstance(ranking.get(name), (int, float)) and ranking[name] >= 0
    }
    if weight_values:
        weights = RankingWeights(**weight_values)

    temperature = generation.get("temperature", defaults.temperature)
    if not isinstance(temperature, (int, float)) or temperature < 0:
        temperature = defaults.temperature

    log_dir = data.get("search_log_dir")

    return PipelineConfig(
        result_limit=result_limit,
        candidate_limit=candidate_limit,
        embedding_timeout=_positive(timeouts.get("embedding"), defaults.embedding_timeout),
        generation_timeout=_positive(timeouts.get("generation"), defaults.generation_timeout),
        embedding_model=str(embedding.get("model", defaults.embedding_model)),
        embedding_base_url=str(embedding.get("base_url", defaults.embedding_base_url)),
        groq_model=str(generation.get("model", defaults.groq_model)),
        temperature=float(temperature),
        max_tokens=int(_positive(generation.get("max_tokens"), defaults.max_tokens)),
        search_log_dir=Path(log_dir) if isinstance(log_dir, str) and log_dir else None,
        ranking_weights=weights,
    )


def save_config(config: PipelineConfig, config_path: Path | None = None) -> None:
    """Save PipelineConfig to a JSON file, without API keys.

    Args:
        config: The config to save.
        config_path: Path to write to. Uses DEFAULT_CONFIG_PATH if None.
    """
    path = config_path or DEFAULT_CONFIG_PATH

    path.parent.mkdir(parents=True, exist_ok=True)

    weights = config.ranking_weights
    data: dict[str, Any] = {
        "search": {
            "result_limit": config.result_limit,
            "candidate_limit": config.candidate_limit,
        },
        "timeouts": {
            "embedding": config.embedding_timeout,
            "generation": config.generation_timeout,
        },
        "embedding": {
            "model": config.embedding_model,
            "base_url": config.embedding_base_url,
        },
        "generation": {
            "model": config.groq_model,
            "temperature": config.temperature,
            "max_tokens": config.max_tokens,
        },
        "ranking": {
            "date": weights.date,
            "location": weights.location,
            "activity": weights.activity,
            "emotion": weights.emotion,
        },
    }
    if config.search_log_dir is not None:
        data["search_log_dir"] = str(config.search_log_dir)

    try:
        with open(path, "w") as f:
            json.dump(data, f, indent=2)
    except OSError as e:
        logger.error("Failed to save config to %s: %s", path, e)
        raise
