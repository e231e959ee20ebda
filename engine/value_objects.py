"""
Value objects for the code index.

Principles:
- Immutable data structures
- Named instead of primitive types (no Primitive Obsession)
- Small, focused classes with single responsibility
"""

from dataclasses import dataclass, replace
from typing import Optional

@dataclass(frozen=True)
class IndexingStats:
    """Immutable statistics about one index update pass."""
    files: int = 0
    chunks: int = 0
    skipped: int = 0
    failed: int = 0
    removed: int = 0

    def add_result(self, result: 'ProcessingResult') -> 'IndexingStats':
        """Return new stats with one file's outcome folded in."""
        if result.was_skipped:
            return replace(self, skipped=self.skipped + 1)
        if result.failed:
            return replace(self, failed=self.failed + 1)
        return replace(self, files=self.files + 1, chunks=self.chunks + result.chunks_count)

    def add_removed(self, count: int = 1) -> 'IndexingStats':
        return replace(self, removed=self.removed + count)

    def add(self, other: 'IndexingStats') -> 'IndexingStats':
        """Combine two stats objects."""
        return IndexingStats(
            files=self.files + other.files,
            chunks=self.chunks + other.chunks,
            skipped=self.skipped + other.skipped,
            failed=self.failed + other.failed,
            removed=self.removed + other.removed
        )

    @property
    def writes(self) -> int:
        """Files whose documents were written or removed"""
        return self.files + self.removed

    def __str__(self) -> str:
        return (f"{self.files} files, {self.chunks} chunks, {self.skipped} up to date, "
                f"{self.failed} failed, {self.removed} removed")

@dataclass(frozen=True)
class ProcessingResult:
    """Result of processing a single file."""
    chunks_count: int
    was_skipped: bool
    error_message: Optional[str] = None

    @classmethod
    def skipped(cls) -> 'ProcessingResult':
        """Create a result for an up-to-date file."""
        return cls(chunks_count=0, was_skipped=True)

    @classmethod
    def success(cls, chunks_count: int) -> 'ProcessingResult':
        """Create a result for successful indexing."""
        return cls(chunks_count=chunks_count, was_skipped=False)

    @classmethod
    def failure(cls, error: str) -> 'ProcessingResult':
        """Create a result for failed indexing."""
        return cls(chunks_count=0, was_skipped=False, error_message=error)

    @property
    def succeeded(self) -> bool:
        return not self.was_skipped and self.error_message is None

    @property
    def failed(self) -> bool:
        return self.error_message is not None
