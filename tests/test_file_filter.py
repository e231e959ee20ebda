"""Tests for FileFilterPolicy"""
import pytest

from ingestion.file_filter import FileFilterPolicy


class TestDefaultExclusions:
    """Built-in directory, extension and file name rules"""

    @pytest.fixture
    def policy(self):
        return FileFilterPolicy()

    def test_excludes_git_directory(self, policy):
        assert policy.should_exclude(".git/config") is True
        assert policy.should_exclude(".git", is_dir=True) is True

    def test_excludes_dependency_directories(self, policy):
        assert policy.should_exclude("node_modules/pkg/index.js") is True
        assert policy.should_exclude("vendor/github.com/x/y.go") is True

    def test_excludes_index_state(self, policy):
        assert policy.should_exclude(".code-kb/index.db") is True

    def test_excludes_binary_extensions(self, policy):
        assert policy.should_exclude("assets/logo.PNG") is True
        assert policy.should_exclude("lib/native.so") is True

    def test_excludes_lock_file(self, policy):
        assert policy.should_exclude("go.sum") is True

    def test_keeps_source(self, policy):
        assert policy.should_exclude("cmd/server/main.go") is False
        assert policy.should_exclude("README.md") is False

    def test_extension_rule_ignores_directories(self, policy):
        assert policy.should_exclude("data.bin", is_dir=True) is False


class TestPatterns:
    """gitignore-style extra patterns"""

    def test_basename_glob_matches_anywhere(self):
        policy = FileFilterPolicy(["*.log"])
        assert policy.should_exclude("logs/today.log") is True
        assert policy.should_exclude("today.log") is True
        assert policy.should_exclude("today.go") is False

    def test_directory_pattern_hides_contents(self):
        policy = FileFilterPolicy(["generated/"])
        assert policy.should_exclude("generated", is_dir=True) is True
        assert policy.should_exclude("pkg/generated/api.go") is True
        assert policy.should_exclude("generated") is False

    def test_anchored_pattern(self):
        policy = FileFilterPolicy(["/docs/*.md"])
        assert policy.should_exclude("docs/intro.md") is True
        assert policy.should_exclude("pkg/docs/intro.md") is False

    def test_from_ignore_file(self, tmp_path):
        ignore = tmp_path / ".codekbignore"
        ignore.write_text("# comment\n\n*.tmp\ntestdata/\n")

        policy = FileFilterPolicy.from_ignore_file(ignore)

        assert policy.patterns == ["*.tmp", "testdata/"]
        assert policy.should_exclude("x/testdata/case.go") is True

    def test_missing_ignore_file_means_defaults(self, tmp_path):
        policy = FileFilterPolicy.from_ignore_file(tmp_path / "absent")
        assert policy.patterns == []

    def test_negated_pattern_keeps_file(self):
        policy = FileFilterPolicy(["*.log", "!keep.log"])
        assert policy.should_exclude("keep.log") is False
        assert policy.should_exclude("drop.log") is True

    def test_double_star_matches_zero_directories(self):
        policy = FileFilterPolicy(["docs/**/*.md"])
        assert policy.should_exclude("docs/a.md") is True
        assert policy.should_exclude("docs/guide/deep/b.md") is True

    def test_single_star_stays_within_directory(self):
        policy = FileFilterPolicy(["src/*.go"])
        assert policy.should_exclude("src/x.go") is True
        assert policy.should_exclude("src/sub/x.go") is False
