"""Turns ranked chunk hits into source excerpts.

Hits are grouped per file, nearby line ranges are merged, files that are
mostly covered are promoted to a single whole-file excerpt, and excerpts
are accumulated until the token budget runs out.
"""
import logging
from collections import defaultdict
from typing import Dict, List

from config import QueryConfig
from domain_models import CodeExample, FileRef, SearchResult, SnippetRange, split_lines
from errors import InvalidDocumentError
from ingestion.namespace import NamespaceMap
from models import ChunkMetadata, parse_metadata

logger = logging.getLogger(__name__)


def merge_ranges(ranges: List[SnippetRange], threshold: int) -> List[SnippetRange]:
    """Merge overlapping or nearby ranges.

    Ranges are sorted by start line; a range merges into the current one
    when it starts no more than `threshold` lines after the current end.
    """
    if not ranges:
        return []

    ordered = sorted(ranges, key=lambda r: (r.start_line, r.end_line))
    first = ordered[0]
    merged = [SnippetRange(first.start_line, first.end_line, first.path, first.namespace)]
    for r in ordered[1:]:
        current = merged[-1]
        if r.start_line <= current.end_line + threshold:
            current.end_line = max(current.end_line, r.end_line)
        else:
            merged.append(SnippetRange(r.start_line, r.end_line, r.path, r.namespace))
    return merged


def covered_lines(ranges: List[SnippetRange]) -> int:
    """Number of distinct lines covered by the ranges"""
    lines = set()
    for r in ranges:
        lines.update(range(r.start_line, r.end_line + 1))
    return len(lines)


def should_include_whole_file(ranges: List[SnippetRange], total_lines: int) -> bool:
    """True when the ranges cover more than half of the file"""
    if not ranges:
        return False
    included = covered_lines(ranges)
    logger.debug(f"checking if should include whole file: {included} of {total_lines} lines")
    return included * 2 > total_lines


def extract_snippet(lines: List[str], r: SnippetRange, context_lines: int) -> CodeExample:
    """Cut a range out of the file, padded with context and clipped to the file"""
    start = max(1, r.start_line - context_lines)
    end = min(len(lines), r.end_line + context_lines)
    return CodeExample(
        path=r.path,
        namespace=r.namespace,
        start_line=start,
        end_line=end,
        content="\n".join(lines[start - 1:end])
    )


class SnippetCollector:
    """Collects budget-limited excerpts for a set of search results"""

    def __init__(self, namespaces: NamespaceMap, config: QueryConfig):
        self.namespaces = namespaces
        self.config = config

    def collect(self, results: List[SearchResult]) -> List[CodeExample]:
        """Excerpts in (namespace, path, line) order until the budget is spent"""
        examples: List[CodeExample] = []
        total_tokens = 0
        for ref, ranges in sorted(self.group_by_file(results).items()):
            for example in self._file_examples(ref, ranges):
                if total_tokens + example.token_estimate > self.config.token_budget:
                    logger.info(f"exceeded max tokens at {total_tokens}, dropping remaining snippets")
                    return examples
                total_tokens += example.token_estimate
                examples.append(example)
        return examples

    @staticmethod
    def group_by_file(results: List[SearchResult]) -> Dict[FileRef, List[SnippetRange]]:
        grouped: Dict[FileRef, List[SnippetRange]] = defaultdict(list)
        for result in results:
            doc = result.document
            try:
                metadata = parse_metadata(doc.metadata)
            except InvalidDocumentError as e:
                logger.error(f"failed to read line range of {doc.id}: {e}")
                continue
            if not isinstance(metadata, ChunkMetadata):
                continue
            ref = FileRef(metadata.namespace, metadata.path)
            grouped[ref].append(SnippetRange(
                start_line=metadata.start_line,
                end_line=metadata.end_line,
                path=ref.path,
                namespace=ref.namespace
            ))
        return dict(grouped)

    def _file_examples(self, ref: FileRef, ranges: List[SnippetRange]) -> List[CodeExample]:
        lines = self._read_lines(ref)
        if lines is None:
            return []

        merged = merge_ranges(ranges, self.config.merge_threshold)
        if should_include_whole_file(merged, len(lines)):
            merged = [SnippetRange(1, len(lines), ref.path, ref.namespace)]

        examples = []
        for r in merged:
            if r.start_line > len(lines):
                logger.warning(f"range {r.start_line}-{r.end_line} is past the end of {ref}")
                continue
            examples.append(extract_snippet(lines, r, self.config.context_lines))
        return examples

    def _read_lines(self, ref: FileRef):
        tree = self.namespaces.get(ref.namespace)
        if tree is None:
            logger.warning(f"namespace not found: {ref.namespace}")
            return None
        try:
            content = tree.read(ref.path)
        except OSError as e:
            logger.error(f"failed to read file {ref}: {e}")
            return None
        return split_lines(content.decode("utf-8", errors="replace"))
