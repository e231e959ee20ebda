import logging
from datetime import datetime
from typing import List

from domain_models import ContentSummary, Document, FileRef, compute_id, format_mod_time, split_lines
from errors import (
    CodeKBError, DocumentNotFoundError, MalformedSummary, StaleMetadataParseError,
    StoreIOFailure, SummarizationFailure
)
from ingestion.database import DocumentStore
from ingestion.language import detect_language
from ingestion.namespace import FileStat, FileTree
from models import ChunkMetadata, MarkerMetadata
from pipeline.interfaces.summarizer import SummarizerInterface
from value_objects import ProcessingResult

logger = logging.getLogger(__name__)


def number_lines(lines: List[str]) -> str:
    """Prefix every line with its 1-based line number"""
    return "".join(f"{idx:4d} | {line}\n" for idx, line in enumerate(lines, start=1))


def validate_summaries(summaries: List[ContentSummary], total_lines: int):
    """Reject the whole file if any span falls outside it"""
    if not summaries:
        raise SummarizationFailure("no summaries found in response")
    for idx, summary in enumerate(summaries):
        if not summary.summary.strip():
            raise SummarizationFailure(f"empty summary at index {idx}")
        if not summary.span.is_within(total_lines):
            raise MalformedSummary(idx, summary.span.start_line, summary.span.end_line, total_lines)


class DocumentIndexer:
    """Indexes one file of one namespace at a time.

    A stale file's marker and chunks are rebuilt from fresh summaries and
    swapped in with a single store transaction.
    """

    def __init__(self, store: DocumentStore, summarizer: SummarizerInterface):
        self.store = store
        self.summarizer = summarizer

    def index_file(self, namespace: str, tree: FileTree, path: str,
                   info: FileStat, force: bool = False) -> ProcessingResult:
        """Index a file if stale. Per-file failures become failure results.

        A failed file keeps only a fresh marker, so its old chunks are gone
        and it is not retried until it changes again. StoreIOFailure is not
        caught here; it aborts the pass.
        """
        ref = FileRef(namespace, path)
        if not force and not self.needs_reindexing(ref, info):
            return ProcessingResult.skipped()
        try:
            chunks = self._do_index(ref, tree, info)
        except StoreIOFailure:
            raise
        except (CodeKBError, OSError, ValueError) as e:
            logger.warning(f"Failed to index file {ref}: {e}")
            self._record_failure(ref, info)
            return ProcessingResult.failure(str(e))
        return ProcessingResult.success(chunks_count=chunks)

    def needs_reindexing(self, ref: FileRef, info: FileStat) -> bool:
        """Stale when no marker exists or the file is newer, at second resolution"""
        try:
            marker = self.store.get(ref.marker_id)
        except DocumentNotFoundError:
            logger.debug(f"File needs indexing - no existing file-level entry found: {ref}")
            return True

        try:
            last_indexed = self._recorded_mod_time(marker)
        except StaleMetadataParseError as e:
            logger.debug(f"File needs indexing - {e}: {ref}")
            return True

        needs_update = int(info.mod_time) > last_indexed
        if needs_update:
            logger.debug(f"File needs update: {ref} (mod_time {int(info.mod_time)} > {last_indexed})")
        return needs_update

    @staticmethod
    def _recorded_mod_time(marker: Document) -> int:
        raw = marker.metadata.get("mod_time", "")
        try:
            return int(datetime.fromisoformat(raw).timestamp())
        except (TypeError, ValueError) as e:
            raise StaleMetadataParseError(f"failed to parse last mod time {raw!r}") from e

    def _do_index(self, ref: FileRef, tree: FileTree, info: FileStat) -> int:
        logger.info(f"Indexing file {ref}")
        lines = split_lines(tree.read(ref.path).decode("utf-8", errors="replace"))

        summaries = self.summarizer.summarize(number_lines(lines))
        validate_summaries(summaries, len(lines))

        docs = self._build_documents(ref, info, summaries)
        self.store.replace_file(ref.marker_id, docs)
        return len(summaries)

    def _record_failure(self, ref: FileRef, info: FileStat):
        self.store.replace_file(ref.marker_id, [self._build_marker(ref, info)])

    @staticmethod
    def _common_metadata(ref: FileRef, info: FileStat) -> dict:
        return dict(
            path=ref.path,
            language=detect_language(ref.path),
            mod_time=format_mod_time(info.mod_time),
            size=info.size,
            namespace=ref.namespace
        )

    def _build_marker(self, ref: FileRef, info: FileStat) -> Document:
        metadata = MarkerMetadata(**self._common_metadata(ref, info))
        return Document(id=ref.marker_id, content="", metadata=metadata.to_metadata())

    def _build_documents(self, ref: FileRef, info: FileStat,
                         summaries: List[ContentSummary]) -> List[Document]:
        """Empty-content marker followed by one chunk per summary"""
        common = self._common_metadata(ref, info)
        docs = [self._build_marker(ref, info)]
        for idx, summary in enumerate(summaries):
            metadata = ChunkMetadata(
                start_line=summary.span.start_line,
                end_line=summary.span.end_line,
                **common
            )
            docs.append(Document(
                id=compute_id(ref.namespace, ref.path, idx),
                content=summary.summary,
                metadata=metadata.to_metadata()
            ))
        return docs
