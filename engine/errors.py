# Copyright (c) 2024 RAG-KB Contributors
# SPDX-License-Identifier: MIT

"""Error taxonomy for the code index.

Per-file errors (summaries, embeddings, malformed ranges) are caught by the
indexer and skipped. StoreIOFailure and NamespaceWalkError abort the
enclosing operation.
"""


class CodeKBError(Exception):
    """Base class for all code index errors"""


class InvalidDocumentError(CodeKBError, ValueError):
    """Document rejected before reaching storage (empty ID, bad metadata)"""


class DocumentNotFoundError(CodeKBError, LookupError):
    """Single-key lookup miss. Expected, never fatal."""

    def __init__(self, doc_id: str):
        super().__init__(f"document not found: {doc_id}")
        self.doc_id = doc_id


class StoreIOFailure(CodeKBError):
    """Underlying storage failed. Fatal to the enclosing operation."""


class EmbeddingFailure(CodeKBError):
    """Embedding provider could not embed the given text"""


class SummarizationFailure(CodeKBError):
    """Summarizer failed or returned no usable summaries"""


class GenerationFailure(CodeKBError):
    """Answer generator failed"""


class MalformedSummary(CodeKBError):
    """Summary line range falls outside the source file"""

    def __init__(self, index: int, start_line: int, end_line: int, total_lines: int):
        super().__init__(
            f"invalid line range {start_line}-{end_line} at index {index} "
            f"(file has {total_lines} lines)"
        )
        self.index = index
        self.start_line = start_line
        self.end_line = end_line
        self.total_lines = total_lines


class StaleMetadataParseError(CodeKBError):
    """Recorded mod_time on a marker could not be parsed"""


class NamespaceWalkError(CodeKBError):
    """Walking a namespace file tree failed with an I/O error"""
