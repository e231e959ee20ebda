"""
Environment configuration loader.

Logic for reading environment variables lives with the data source
(environment) rather than in the Config dataclasses.
"""
import os
from pathlib import Path
from typing import List, Optional

from config import (
    Config, PathConfig, DatabaseConfig, ModelConfig, OllamaConfig,
    QueryConfig, IndexConfig
)

class EnvironmentConfigLoader:
    """Loads configuration from environment variables.

    Single Responsibility: Environment access logic.
    """

    def load(self) -> Config:
        """Create Config from environment variables"""
        paths = self._load_path_config()
        return Config(
            paths=paths,
            database=self._load_database_config(paths),
            model=self._load_model_config(),
            ollama=self._load_ollama_config(),
            query=self._load_query_config(),
            index=self._load_index_config()
        )

    def _load_path_config(self) -> PathConfig:
        """Load repository and state paths from environment"""
        extra = self._get_path("CODE_KB_EXTRA_PATH")
        return PathConfig(
            repository=Path(self._get_optional("CODE_KB_REPO_PATH", ".")),
            extra_context=extra,
            extra_files=self._get_path_list("CODE_KB_EXTRA_FILES"),
            state_dir=self._get_optional("CODE_KB_STATE_DIR", PathConfig.state_dir)
        )

    def _load_database_config(self, paths: PathConfig) -> DatabaseConfig:
        """Database lives under the repository state directory"""
        return DatabaseConfig(
            path=str(paths.db_path),
            busy_timeout_ms=self._get_int("CODE_KB_BUSY_TIMEOUT_MS", 5000)
        )

    def _load_model_config(self) -> ModelConfig:
        """Load model configuration from environment"""
        return ModelConfig(
            name=self._get_optional("MODEL_NAME", ModelConfig.name)
        )

    def _load_ollama_config(self) -> OllamaConfig:
        """Load Ollama endpoint configuration from environment"""
        return OllamaConfig(
            url=self._get_optional("OLLAMA_URL", OllamaConfig.url),
            summary_model=self._get_optional("SUMMARY_MODEL", OllamaConfig.summary_model),
            answer_model=self._get_optional("ANSWER_MODEL", OllamaConfig.answer_model),
            temperature=self._get_float("OLLAMA_TEMPERATURE", 0.1),
            timeout=self._get_float("OLLAMA_TIMEOUT", 300.0)
        )

    def _load_query_config(self) -> QueryConfig:
        """Load retrieval limits from environment"""
        return QueryConfig(
            top_k=self._get_int("QUERY_TOP_K", 30),
            good_similarity=self._get_float("QUERY_GOOD_SIMILARITY", 0.4),
            token_budget=self._get_int("QUERY_TOKEN_BUDGET", 32000)
        )

    def _load_index_config(self) -> IndexConfig:
        """Load file filtering configuration from environment"""
        return IndexConfig(
            ignore_file=self._get_optional("CODE_KB_IGNORE_FILE", IndexConfig.ignore_file),
            skip_binary=self._get_bool("CODE_KB_SKIP_BINARY", True)
        )

    def _get_optional(self, key: str, default: str) -> str:
        """Get optional string environment variable"""
        return os.getenv(key, default)

    def _get_path(self, key: str) -> Optional[Path]:
        """Get optional path environment variable (unset or empty means None)"""
        value = os.getenv(key, "")
        return Path(value) if value else None

    def _get_path_list(self, key: str) -> List[Path]:
        """Get os.pathsep-separated paths, ignoring empty entries"""
        value = os.getenv(key, "")
        return [Path(part) for part in value.split(os.pathsep) if part]

    def _get_bool(self, key: str, default: bool) -> bool:
        """Get boolean environment variable"""
        value = os.getenv(key, str(default).lower())
        return value.lower() == "true"

    def _get_int(self, key: str, default: int) -> int:
        """Get integer environment variable"""
        value = os.getenv(key, str(default))
        return int(value)

    def _get_float(self, key: str, default: float) -> float:
        """Get float environment variable"""
        value = os.getenv(key, str(default))
        return float(value)
