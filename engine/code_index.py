"""Code index facade

Wires the document store, namespaces and external capabilities together
and exposes the operations callers need:

    with CodeIndex.from_config(default_config) as index:
        stats = index.update_index()
        result = index.query("where is the retry policy configured?")
        print(result.answer)
"""
import logging
from typing import List, Optional

from config import EXTRA_CONTEXT_NAMESPACE, REPO_NAMESPACE, Config
from domain_models import FileRef, QueryResult, SearchResult
from ingestion.database import DocumentStore
from ingestion.namespace import LocalFileTree, NamespaceMap, VirtualFileTree
from operations.index_orchestrator import IndexOrchestrator
from operations.query_executor import QueryExecutor
from pipeline.factory import Capabilities, CapabilityFactory
from value_objects import IndexingStats

logger = logging.getLogger(__name__)

# Reserved by the document ID scheme
_RESERVED_NAMESPACE_CHARS = (":", "#")


def validate_namespaces(namespaces: NamespaceMap):
    for name in namespaces:
        if not name or any(c in name for c in _RESERVED_NAMESPACE_CHARS):
            raise ValueError(f"invalid namespace name: {name!r}")


def build_namespaces(config: Config) -> NamespaceMap:
    """The repository tree, plus the extra namespace when configured

    The extra namespace is either a directory or a list of individual
    files, never both.
    """
    if config.paths.extra_context and config.paths.extra_files:
        raise ValueError("configure either an extra context directory or extra files, not both")
    namespaces: NamespaceMap = {
        REPO_NAMESPACE: LocalFileTree.from_directory(
            config.paths.repository,
            ignore_file=config.index.ignore_file,
            skip_binary=config.index.skip_binary
        )
    }
    if config.paths.extra_context:
        namespaces[EXTRA_CONTEXT_NAMESPACE] = LocalFileTree.from_directory(
            config.paths.extra_context,
            ignore_file=config.index.ignore_file,
            skip_binary=config.index.skip_binary
        )
    elif config.paths.extra_files:
        namespaces[EXTRA_CONTEXT_NAMESPACE] = VirtualFileTree.from_files(
            config.paths.extra_files,
            skip_binary=config.index.skip_binary
        )
    return namespaces


class CodeIndex:
    """Semantic index over one or more namespaces of source files"""

    def __init__(self, config: Config, capabilities: Capabilities, namespaces: NamespaceMap):
        validate_namespaces(namespaces)
        self.config = config
        self.capabilities = capabilities
        self.namespaces = namespaces
        self.store = DocumentStore(config.database, capabilities.embedder)
        self.orchestrator = IndexOrchestrator(self.store, capabilities.summarizer, namespaces)
        self.executor = QueryExecutor(self.store, capabilities.generator, namespaces, config.query)
        self.cleaner = self.orchestrator.cleaner

    @classmethod
    def from_config(cls, config: Config, capabilities: Optional[Capabilities] = None) -> 'CodeIndex':
        capabilities = capabilities or CapabilityFactory(config).create()
        return cls(config, capabilities, build_namespaces(config))

    def open(self) -> 'CodeIndex':
        if not self.store.is_open:
            self.store.connect()
            logger.info(f"Opened code index with namespaces {sorted(self.namespaces)}")
        return self

    def close(self):
        self.store.close()
        self.capabilities.close()

    def __enter__(self):
        return self.open()

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def update_index(self, force: bool = False) -> IndexingStats:
        """Reindex stale files and drop entries for deleted ones"""
        return self.orchestrator.update_index(force=force)

    def search(self, text: str, limit: Optional[int] = None) -> List[SearchResult]:
        return self.executor.search(text, limit or self.config.query.top_k)

    def query(self, text: str) -> QueryResult:
        return self.executor.execute(text)

    def indexed_files(self) -> List[FileRef]:
        return self.cleaner.indexed_files()

    def document_count(self) -> int:
        return self.store.count()
