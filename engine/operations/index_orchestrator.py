import logging
from typing import Optional

from errors import CodeKBError, NamespaceWalkError
from ingestion.database import DocumentStore
from ingestion.namespace import FileTree, NamespaceMap
from operations.document_indexer import DocumentIndexer
from operations.orphan_cleaner import OrphanCleaner
from pipeline.interfaces.summarizer import SummarizerInterface
from value_objects import IndexingStats, ProcessingResult

logger = logging.getLogger(__name__)


class IndexOrchestrator:
    """Synchronizes the store with every namespace

    One pass walks each namespace, reindexes stale files, then sweeps
    entries for files that no longer exist. Calls are synchronous and
    sequential across files.
    """

    def __init__(self, store: DocumentStore, summarizer: SummarizerInterface,
                 namespaces: NamespaceMap, indexer: Optional[DocumentIndexer] = None,
                 cleaner: Optional[OrphanCleaner] = None):
        self.store = store
        self.namespaces = namespaces
        self.indexer = indexer or DocumentIndexer(store, summarizer)
        self.cleaner = cleaner or OrphanCleaner(store, namespaces)

    def update_index(self, force: bool = False) -> IndexingStats:
        """Run one update pass.

        Raises NamespaceWalkError when a namespace cannot be walked and
        StoreIOFailure when storage fails; every other failure is per file.
        """
        stats = IndexingStats()
        for namespace in sorted(self.namespaces):
            stats = stats.add(self._index_namespace(namespace, self.namespaces[namespace], force))

        stats = stats.add_removed(self._cleanup())
        logger.info(f"Index update complete: {stats}")
        return stats

    def _index_namespace(self, namespace: str, tree: FileTree, force: bool) -> IndexingStats:
        stats = IndexingStats()
        try:
            for path in tree.walk():
                stats = stats.add_result(self._index_one(namespace, tree, path, force))
        except NamespaceWalkError:
            logger.error(f"Failed to walk namespace {namespace}")
            raise
        except OSError as e:
            raise NamespaceWalkError(f"failed to walk namespace {namespace}: {e}") from e
        return stats

    def _index_one(self, namespace: str, tree: FileTree, path: str, force: bool) -> ProcessingResult:
        try:
            info = tree.stat(path)
        except OSError as e:
            logger.warning(f"Failed to get info for file {namespace}:{path}: {e}")
            return ProcessingResult.failure(str(e))
        return self.indexer.index_file(namespace, tree, path, info, force=force)

    def _cleanup(self) -> int:
        """Deleted-file sweep; never fatal"""
        try:
            return len(self.cleaner.clean().removed)
        except CodeKBError as e:
            logger.error(f"Failed to cleanup deleted files: {e}")
            return 0
