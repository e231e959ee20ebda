"""Tests for document IDs and small domain types"""
import pytest

from domain_models import (
    CodeExample, ContentSpan, Document, FileRef, QueryResult, chunk_prefix, compute_id,
    format_mod_time, split_lines
)


class TestComputeId:
    """Marker and chunk ID layout"""

    def test_marker_id(self):
        assert compute_id("repo", "pkg/a.go") == "repo:pkg/a.go"

    def test_chunk_id(self):
        assert compute_id("repo", "pkg/a.go", 3) == "repo:pkg/a.go#3"

    def test_hash_and_percent_are_escaped(self):
        assert compute_id("repo", "a#b%c.go") == "repo:a%23b%25c.go"

    def test_chunk_prefix_does_not_cover_sibling(self):
        prefix = chunk_prefix(compute_id("repo", "a.go"))
        assert compute_id("repo", "a.go", 0).startswith(prefix)
        assert not compute_id("repo", "a.go.bak").startswith(prefix)
        assert not compute_id("repo", "a.go#x").startswith(prefix)


class TestFileRef:
    @pytest.mark.parametrize("path", ["a.go", "dir/a b.go", "weird#name%.go", "x:y.go"])
    def test_parse_recovers_path(self, path):
        assert FileRef.parse(compute_id("repo", path)) == FileRef("repo", path)
        assert FileRef.parse(compute_id("repo", path, 7)) == FileRef("repo", path)

    @pytest.mark.parametrize("doc_id", ["", "no-separator", ":a.go", "repo:"])
    def test_parse_rejects_malformed(self, doc_id):
        with pytest.raises(ValueError):
            FileRef.parse(doc_id)

    def test_orders_by_namespace_then_path(self):
        refs = [FileRef("repo", "b.go"), FileRef("extra", "z.md"), FileRef("repo", "a.go")]
        assert sorted(refs) == [FileRef("extra", "z.md"), FileRef("repo", "a.go"), FileRef("repo", "b.go")]

    def test_str(self):
        assert str(FileRef("repo", "a.go")) == "repo:a.go"


class TestSmallTypes:
    def test_format_mod_time_truncates_to_seconds(self):
        assert format_mod_time(1_700_000_000.9) == "2023-11-14T22:13:20+00:00"

    def test_split_lines_keeps_trailing_empty_line(self):
        assert split_lines("a\nb\n") == ["a", "b", ""]

    def test_span_bounds(self):
        assert ContentSpan(1, 10).is_within(10) is True
        assert ContentSpan(1, 11).is_within(10) is False

    def test_token_estimate(self):
        assert CodeExample("a.go", "repo", 1, 1, "x" * 41).token_estimate == 10

    def test_document_file_ref_from_metadata(self):
        doc = Document(id="repo:a.go", content="", metadata={"namespace": "repo", "path": "a.go",
                                                           "is_file_entry": "true"})
        assert doc.is_file_entry is True
        assert doc.file_ref == FileRef("repo", "a.go")

    def test_refusal_result_is_not_generated(self):
        assert QueryResult(answer="no").generated is False
