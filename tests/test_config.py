"""Tests for pipeline configuration loading."""

import json
from pathlib import Path

import pytest

from souvenir import PipelineConfig, RankingWeights, config_from_env, load_config, save_config


class TestPipelineConfig:
    """Tests for PipelineConfig dataclass."""

    def test_default_values(self) -> None:
        """Should have sensible defaults."""
        config = PipelineConfig()

        assert config.result_limit == 10
        assert config.candidate_limit == 50
        assert config.min_query_length == 3
        assert config.max_query_length == 500
        assert config.groq_model == "llama-3.1-70b-versatile"
        assert config.embedding_model == "text-embedding-3-small"
        assert config.ranking_weights == RankingWeights()
        assert config.search_log_dir is None
        assert not config.has_text_provider

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"result_limit": 0},
            {"candidate_limit": 0},
            {"min_query_length": 0},
            {"min_query_length": 10, "max_query_length": 5},
            {"embedding_timeout": 0},
            {"generation_timeout": -1},
        ],
    )
    def test_invalid_values(self, kwargs: dict) -> None:
        """Should reject out-of-range values."""
        with pytest.raises(ValueError):
            PipelineConfig(**kwargs)

    def test_search_log_dir_expanded(self) -> None:
        """A user-relative log dir is expanded."""
        config = PipelineConfig(search_log_dir="~/souvenir-logs")
        assert config.search_log_dir == Path.home() / "souvenir-logs"


class TestConfigFromEnv:
    """Tests for config_from_env."""

    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        """Environment variables override defaults."""
        monkeypatch.setenv("SOUVENIR_RESULT_LIMIT", "5")
        monkeypatch.setenv("SOUVENIR_CANDIDATE_LIMIT", "25")
        monkeypatch.setenv("SOUVENIR_GENERATION_TIMEOUT", "12.5")
        monkeypatch.setenv("SOUVENIR_SEARCH_LOG_DIR", str(tmp_path))
        monkeypatch.setenv("GROQ_API_KEY", "gsk-test")
        monkeypatch.setenv("GROQ_MODEL", "llama-test")
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")

        config = config_from_env()

        assert config.result_limit == 5
        assert config.candidate_limit == 25
        assert config.generation_timeout == 12.5
        assert config.search_log_dir == tmp_path
        assert config.groq_api_key == "gsk-test"
        assert config.groq_model == "llama-test"
        assert config.embedding_api_key == "sk-test"
        assert config.has_text_provider

    def test_defaults_without_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Missing variables fall back to defaults."""
        for name in ("GROQ_API_KEY", "OPENAI_API_KEY", "SOUVENIR_SEARCH_LOG_DIR"):
            monkeypatch.delenv(name, raising=False)

        config = config_from_env()

        assert config.groq_api_key is None
        assert config.search_log_dir is None


class TestLoadConfig:
    """Tests for load_config."""

    @pytest.fixture(autouse=True)
    def clear_keys(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("GROQ_API_KEY", raising=False)
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)

    def test_missing_file(self, tmp_path: Path) -> None:
        """Should return defaults when the file doesn't exist."""
        assert load_config(tmp_path / "missing.json") == PipelineConfig()

    def test_invalid_json(self, tmp_path: Path) -> None:
        """Should return defaults on invalid JSON."""
        path = tmp_path / "config.json"
        path.write_text("{ not json")
        assert load_config(path) == PipelineConfig()

    def test_non_object(self, tmp_path: Path) -> None:
        """Should return defaults when the JSON is not an object."""
        path = tmp_path / "config.json"
        path.write_text("[1, 2]")
        assert load_config(path) == PipelineConfig()

    def test_loads_sections(self, tmp_path: Path) -> None:
        """Should read every section."""
        path = tmp_path / "config.json"
        path.write_text(
            json.dumps(
                {
                    "search": {"result_limit": 7, "candidate_limit": 30},
                    "timeouts": {"embedding": 5, "generation": 20},
                    "embedding": {"model": "embed-small", "base_url": "http://localhost:8080/v1"},
                    "generation": {"model": "llama-test", "temperature": 0.3, "max_tokens": 300},
                    "ranking": {"location": 0.2},
                    "search_log_dir": str(tmp_path / "logs"),
                }
            )
        )

        config = load_config(path)

        assert config.result_limit == 7
        assert config.candidate_limit == 30
        assert config.embedding_timeout == 5
        assert config.generation_timeout == 20
        assert config.embedding_model == "embed-small"
        assert config.embedding_base_url == "http://localhost:8080/v1"
        assert config.groq_model == "llama-test"
        assert config.temperature == 0.3
        assert config.max_tokens == 300
        assert config.ranking_weights == RankingWeights(location=0.2)
        assert config.search_log_dir == tmp_path / "logs"

    def test_invalid_values_use_defaults(self, tmp_path: Path) -> None:
        """Should replace invalid values with defaults."""
        path = tmp_path / "config.json"
        path.write_text(
            json.dumps(
                {
                    "search": {"result_limit": -3, "candidate_limit": "many"},
                    "timeouts": {"embedding": 0},
                    "ranking": {"date": -1},
                    "generation": "not a section",
                }
            )
        )

        assert load_config(path) == PipelineConfig()

    def test_keys_come_from_environment(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """API keys are read from the environment, not the file."""
        monkeypatch.setenv("GROQ_API_KEY", "gsk-env")
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"groq_api_key": "gsk-file"}))

        assert load_config(path).groq_api_key == "gsk-env"


class TestSaveConfig:
    """Tests for save_config."""

    @pytest.fixture(autouse=True)
    def clear_keys(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("GROQ_API_KEY", raising=False)
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)

    def test_round_trip(self, tmp_path: Path) -> None:
        """A saved config loads back identically."""
        path = tmp_path / "nested" / "config.json"
        config = PipelineConfig(
            result_limit=4,
            generation_timeout=15.0,
            ranking_weights=RankingWeights(emotion=0.05),
            search_log_dir=tmp_path / "logs",
        )

        save_config(config, path)

        assert load_config(path) == config

    def test_keys_not_written(self, tmp_path: Path) -> None:
        """API keys never reach the file."""
        path = tmp_path / "config.json"
        save_config(PipelineConfig(groq_api_key="gsk-secret"), path)
        assert "gsk-secret" not in path.read_text()
