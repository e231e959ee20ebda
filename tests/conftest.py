"""
Pytest configuration and shared fixtures

Common fixtures used across multiple test files are defined here.
Capabilities are replaced by deterministic fakes so no model or Ollama
server is needed.
"""
import os
import re
import sys
import zlib
from pathlib import Path
from typing import Callable, Dict, List, Optional

import pytest

# Add engine directory to path for imports
engine_path = Path(__file__).parent.parent / "engine"
sys.path.insert(0, str(engine_path))

from config import DatabaseConfig, QueryConfig  # noqa: E402
from domain_models import ContentSpan, ContentSummary  # noqa: E402
from ingestion.database import DocumentStore  # noqa: E402
from ingestion.namespace import FileStat, FileTree, LocalFileTree  # noqa: E402
from pipeline.interfaces import EmbedderInterface, GeneratorInterface, SummarizerInterface  # noqa: E402

# Fixed mtime for files written by tests; keeps staleness checks deterministic
BASE_MTIME = 1_700_000_000

_NUMBERED_LINE = re.compile(r"^\s*\d+ \| ?(.*)$")
_TOKEN = re.compile(r"[a-z0-9]+")


# =============================================================================
# Capability Fakes
# =============================================================================

class FakeEmbedder(EmbedderInterface):
    """Hashed bag-of-words vectors.

    Texts sharing words get positive similarity; identical texts get
    identical vectors. Raises RuntimeError for texts containing `fail_on`.
    """

    def __init__(self, dimension: int = 64, fail_on: Optional[str] = None):
        self.dimension = dimension
        self.fail_on = fail_on
        self.calls: List[str] = []

    def embed(self, text: str) -> List[float]:
        self.calls.append(text)
        if self.fail_on and self.fail_on in text:
            raise RuntimeError(f"cannot embed {self.fail_on!r}")
        vector = [0.0] * self.dimension
        for token in _TOKEN.findall(text.lower()):
            vector[zlib.crc32(token.encode()) % self.dimension] += 1.0
        return vector

    @property
    def model_name(self) -> str:
        return "fake-hash-embedder"


class FakeSummarizer(SummarizerInterface):
    """Summarizes a file as one span covering every line.

    The summary text is the file's own code, so the fake embedder matches
    queries against it. Set `handler` to return custom summaries or raise.
    """

    def __init__(self, handler: Optional[Callable[[str, List[str]], List[ContentSummary]]] = None):
        self.handler = handler
        self.calls: List[str] = []

    def summarize(self, numbered_text: str) -> List[ContentSummary]:
        self.calls.append(numbered_text)
        lines = self.unnumber(numbered_text)
        if self.handler:
            return self.handler(numbered_text, lines)
        text = " ".join(line.strip() for line in lines if line.strip()) or "empty file"
        return [ContentSummary(summary=text, span=ContentSpan(1, len(lines)))]

    @staticmethod
    def unnumber(numbered_text: str) -> List[str]:
        lines = []
        for line in numbered_text.split("\n")[:-1]:
            match = _NUMBERED_LINE.match(line)
            lines.append(match.group(1) if match else line)
        return lines


class RecordingGenerator(GeneratorInterface):
    """Returns a canned answer and remembers every prompt"""

    def __init__(self, answer: str = "generated answer"):
        self.answer = answer
        self.prompts: List[str] = []

    def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self.answer


class MemoryFileTree(FileTree):
    """In-memory namespace for tests that don't need a directory"""

    def __init__(self, files: Optional[Dict[str, str]] = None, mod_time: float = BASE_MTIME):
        self.files = dict(files or {})
        self.mod_time = mod_time

    def walk(self):
        yield from sorted(self.files)

    def stat(self, path: str) -> FileStat:
        if path not in self.files:
            raise FileNotFoundError(path)
        return FileStat(size=len(self.files[path].encode()), mod_time=self.mod_time)

    def read(self, path: str) -> bytes:
        if path not in self.files:
            raise FileNotFoundError(path)
        return self.files[path].encode()


# =============================================================================
# Capability Fixtures
# =============================================================================

@pytest.fixture
def embedder():
    """Deterministic keyword embedder"""
    return FakeEmbedder()


@pytest.fixture
def summarizer():
    """Whole-file summarizer; set .handler to customize"""
    return FakeSummarizer()


@pytest.fixture
def generator():
    return RecordingGenerator()


# =============================================================================
# Store Fixtures
# =============================================================================

@pytest.fixture
def db_config(tmp_path):
    """Database config pointing into a temporary state directory"""
    return DatabaseConfig(path=str(tmp_path / ".code-kb" / "index.db"))


@pytest.fixture
def store(db_config, embedder):
    """Open document store, closed after the test"""
    store = DocumentStore.open(db_config, embedder)
    yield store
    store.close()


@pytest.fixture
def query_config():
    return QueryConfig()


# =============================================================================
# File Tree Fixtures
# =============================================================================

@pytest.fixture
def repo_path(tmp_path):
    """Empty repository directory.

    Use this with write_file to build a namespace on disk.
    """
    path = tmp_path / "repo"
    path.mkdir()
    return path


@pytest.fixture
def write_file():
    """Write a text file and pin its mtime.

    Usage: write_file(root, "pkg/a.go", "package pkg\\n", mtime=BASE_MTIME + 5)
    """
    def _write(root: Path, rel_path: str, content: str, mtime: float = BASE_MTIME) -> Path:
        path = root / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        os.utime(path, (mtime, mtime))
        return path
    return _write


@pytest.fixture
def repo_tree(repo_path):
    """LocalFileTree over repo_path with default filtering"""
    return LocalFileTree.from_directory(repo_path, ignore_file=".codekbignore")


@pytest.fixture
def memory_tree():
    """Factory for in-memory namespaces"""
    return MemoryFileTree
