"""Deleted-file cleanup

Removes the marker and chunks of every indexed file whose source no longer
exists (or is now hidden by the namespace's ignore rules).
"""
import logging
from dataclasses import dataclass, field
from typing import List

from domain_models import FILE_ENTRY_TRUE, FileRef
from errors import CodeKBError
from ingestion.database import DocumentStore
from ingestion.namespace import NamespaceMap

logger = logging.getLogger(__name__)


@dataclass
class OrphanCleanupResult:
    """Result of one cleanup sweep"""
    checked: int = 0
    removed: List[FileRef] = field(default_factory=list)
    failed: List[FileRef] = field(default_factory=list)

    @property
    def message(self) -> str:
        if not self.removed:
            return f"No deleted files among {self.checked} indexed files"
        return f"Removed {len(self.removed)} deleted files from index"


class OrphanCleaner:
    """Sweeps index entries for files that disappeared from their namespace

    Example:
        cleaner = OrphanCleaner(store, namespaces)
        result = cleaner.clean()
    """

    def __init__(self, store: DocumentStore, namespaces: NamespaceMap):
        self.store = store
        self.namespaces = namespaces

    def indexed_files(self) -> List[FileRef]:
        """Every file that currently has a marker, sorted"""
        markers = self.store.filter_by_metadata({"is_file_entry": FILE_ENTRY_TRUE})
        return sorted(doc.file_ref for doc in markers)

    def clean(self) -> OrphanCleanupResult:
        """Delete entries for missing files. Per-entry failures are logged and skipped."""
        result = OrphanCleanupResult()
        for ref in self.indexed_files():
            result.checked += 1
            self._clean_one(ref, result)
        logger.info(result.message)
        return result

    def _clean_one(self, ref: FileRef, result: OrphanCleanupResult):
        tree = self.namespaces.get(ref.namespace)
        if tree is None:
            # Namespace not mounted this session; keep its entries
            return
        try:
            if tree.exists(ref.path):
                return
            logger.info(f"Removing index entries for deleted file {ref}")
            self.store.delete_file(ref.marker_id)
            result.removed.append(ref)
        except (CodeKBError, OSError) as e:
            logger.warning(f"Failed to delete entries for deleted file {ref}: {e}")
            result.failed.append(ref)
