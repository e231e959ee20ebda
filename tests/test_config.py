"""
Unit tests for config module
"""
import os
from pathlib import Path

import pytest

from config import (
    DatabaseConfig,
    ModelConfig,
    OllamaConfig,
    PathConfig,
    QueryConfig,
    Config
)
from environment_config_loader import EnvironmentConfigLoader


class TestQueryConfig:
    """Tests for QueryConfig"""

    def test_default_values(self):
        """Retrieval limits used by the query engine"""
        config = QueryConfig()
        assert config.top_k == 30
        assert config.good_similarity == 0.4
        assert config.min_results == 3
        assert config.max_results == 20
        assert config.merge_threshold == 10
        assert config.context_lines == 5
        assert config.token_budget == 32000


class TestPathConfig:
    """Tests for PathConfig"""

    def test_db_path_under_state_dir(self):
        config = PathConfig(repository=Path("/work/project"))
        assert config.db_path == Path("/work/project/.code-kb/index.db")

    def test_no_extra_context_by_default(self):
        assert PathConfig().extra_context is None
        assert PathConfig().extra_files == []


class TestModelConfig:
    """Tests for ModelConfig"""

    def test_default_model(self):
        config = ModelConfig()
        assert config.name == "sentence-transformers/all-MiniLM-L6-v2"
        assert config.show_progress is False


class TestDefaults:
    def test_database_defaults(self):
        config = DatabaseConfig()
        assert config.check_same_thread is False
        assert config.busy_timeout_ms == 5000

    def test_ollama_defaults(self):
        config = OllamaConfig()
        assert config.url == "http://localhost:11434"
        assert config.temperature == 0.1


class TestEnvironmentConfigLoader:
    """Loading Config from environment variables"""

    @pytest.fixture(autouse=True)
    def clean_env(self, monkeypatch):
        for key in ["CODE_KB_REPO_PATH", "CODE_KB_EXTRA_PATH", "CODE_KB_EXTRA_FILES", "CODE_KB_STATE_DIR", "MODEL_NAME",
                    "OLLAMA_URL", "SUMMARY_MODEL", "ANSWER_MODEL", "QUERY_TOP_K",
                    "QUERY_GOOD_SIMILARITY", "QUERY_TOKEN_BUDGET", "CODE_KB_IGNORE_FILE",
                    "CODE_KB_SKIP_BINARY"]:
            monkeypatch.delenv(key, raising=False)

    def test_defaults_without_environment(self):
        config = EnvironmentConfigLoader().load()

        assert isinstance(config, Config)
        assert config.paths.repository == Path(".")
        assert config.paths.extra_context is None
        assert config.database.path == str(Path(".") / ".code-kb" / "index.db")
        assert config.index.ignore_file == ".codekbignore"
        assert config.index.skip_binary is True

    def test_paths_from_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("CODE_KB_REPO_PATH", str(tmp_path / "repo"))
        monkeypatch.setenv("CODE_KB_EXTRA_PATH", str(tmp_path / "docs"))
        monkeypatch.setenv("CODE_KB_STATE_DIR", ".state")

        config = Config.from_env()

        assert config.paths.extra_context == tmp_path / "docs"
        assert config.database.path == str(tmp_path / "repo" / ".state" / "index.db")

    def test_empty_extra_path_means_none(self, monkeypatch):
        monkeypatch.setenv("CODE_KB_EXTRA_PATH", "")
        assert EnvironmentConfigLoader().load().paths.extra_context is None

    def test_extra_files_split_on_path_separator(self, monkeypatch, tmp_path):
        files = [tmp_path / "notes.md", tmp_path / "conf" / "app.yaml"]
        monkeypatch.setenv("CODE_KB_EXTRA_FILES", os.pathsep.join(str(f) for f in files) + os.pathsep)

        assert EnvironmentConfigLoader().load().paths.extra_files == files

    def test_models_and_limits(self, monkeypatch):
        monkeypatch.setenv("MODEL_NAME", "BAAI/bge-base-en-v1.5")
        monkeypatch.setenv("SUMMARY_MODEL", "llama3")
        monkeypatch.setenv("ANSWER_MODEL", "mistral")
        monkeypatch.setenv("OLLAMA_URL", "http://ollama:11434")
        monkeypatch.setenv("QUERY_TOP_K", "10")
        monkeypatch.setenv("QUERY_GOOD_SIMILARITY", "0.55")
        monkeypatch.setenv("CODE_KB_SKIP_BINARY", "false")

        config = EnvironmentConfigLoader().load()

        assert config.model.name == "BAAI/bge-base-en-v1.5"
        assert config.ollama.summary_model == "llama3"
        assert config.ollama.answer_model == "mistral"
        assert config.ollama.url == "http://ollama:11434"
        assert config.query.top_k == 10
        assert config.query.good_similarity == 0.55
        assert config.index.skip_binary is False

    def test_invalid_integer_raises(self, monkeypatch):
        monkeypatch.setenv("QUERY_TOP_K", "many")
        with pytest.raises(ValueError):
            EnvironmentConfigLoader().load()
