"""
Configuration constants for the code index
"""
from pathlib import Path
from dataclasses import dataclass, field
from typing import List, Optional

# Namespace names used for the primary tree and supplementary material
REPO_NAMESPACE = "repo"
EXTRA_CONTEXT_NAMESPACE = "extra"

@dataclass
class PathConfig:
    """File path configuration"""
    repository: Path = Path(".")
    extra_context: Optional[Path] = None
    extra_files: List[Path] = field(default_factory=list)  # Flattened into the extra namespace
    state_dir: str = ".code-kb"
    db_file: str = "index.db"

    @property
    def db_path(self) -> Path:
        """Location of the persistent document store"""
        return self.repository / self.state_dir / self.db_file

@dataclass
class DatabaseConfig:
    """SQLite document store configuration"""
    path: str = ".code-kb/index.db"
    check_same_thread: bool = False  # Store guards the connection with its own lock
    busy_timeout_ms: int = 5000

@dataclass
class ModelConfig:
    """Embedding model configuration"""
    name: str = "sentence-transformers/all-MiniLM-L6-v2"
    show_progress: bool = False

@dataclass
class OllamaConfig:
    """Ollama endpoint used for summaries and answers"""
    url: str = "http://localhost:11434"
    summary_model: str = "qwen2.5-coder:7b"
    answer_model: str = "qwen2.5-coder:7b"
    temperature: float = 0.1
    max_output_tokens: int = 32768
    timeout: float = 300.0

@dataclass
class QueryConfig:
    """Retrieval and context assembly limits"""
    top_k: int = 30
    good_similarity: float = 0.4
    min_results: int = 3
    max_results: int = 20
    merge_threshold: int = 10  # Max line gap between ranges that still merge
    context_lines: int = 5
    token_budget: int = 32000

@dataclass
class IndexConfig:
    """File tree filtering configuration"""
    ignore_file: str = ".codekbignore"
    skip_binary: bool = True

@dataclass
class Config:
    """Main configuration container"""
    paths: PathConfig
    database: DatabaseConfig
    model: ModelConfig
    ollama: OllamaConfig
    query: QueryConfig
    index: IndexConfig

    @classmethod
    def from_env(cls) -> 'Config':
        """Create config from environment - delegates to EnvironmentConfigLoader"""
        from environment_config_loader import EnvironmentConfigLoader
        return EnvironmentConfigLoader().load()

# Default instance
default_config = Config.from_env()
