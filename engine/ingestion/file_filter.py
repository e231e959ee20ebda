"""File filtering policy for namespace file trees

Following Sandi Metz principles:
- Single Responsibility: Only handles file exclusion logic
- Small methods: Each method under 5 lines where possible
- Tell, Don't Ask: Policy makes decisions, doesn't expose internals
"""
from pathlib import Path, PurePosixPath
from typing import Iterable, List, Optional

import pathspec


class FileFilterPolicy:
    """Determines which paths of a file tree are hidden from the index

    Paths are relative POSIX strings. Built-in directory, extension and
    file name rules always apply; extra patterns follow .gitignore syntax
    (negation, anchoring, '**', directory-only patterns).
    """

    EXCLUDED_DIRS = {
        '.git', '.code-kb',  # Version control & index state
        'vendor', 'node_modules',  # Dependencies
        '.idea', '.vscode',  # IDE directories
        'bin', 'dist', 'build',  # Build artifacts
    }

    EXCLUDED_EXTENSIONS = {
        '.exe', '.dll', '.so', '.dylib',  # Binaries
        '.png', '.jpg', '.jpeg', '.gif', '.ico', '.svg',  # Images
        '.pdf', '.doc', '.docx',  # Documents
        '.zip', '.tar', '.gz', '.rar', '.7z',  # Archives
        '.bin', '.dat', '.db',  # Other binaries
    }

    EXCLUDED_FILES = {'go.sum'}

    def __init__(self, patterns: Optional[Iterable[str]] = None):
        self.patterns: List[str] = [p for p in (patterns or []) if p]
        self.ignore_spec = pathspec.PathSpec.from_lines("gitignore", self.patterns)

    @classmethod
    def from_ignore_file(cls, path: Path) -> 'FileFilterPolicy':
        """Build policy from an ignore file; a missing file means defaults only"""
        if not path.is_file():
            return cls()
        lines = path.read_text(encoding="utf-8", errors="replace").splitlines()
        return cls(cls._parse_patterns(lines))

    @staticmethod
    def _parse_patterns(lines: Iterable[str]) -> List[str]:
        stripped = (line.rstrip() for line in lines)
        return [line for line in stripped if line.strip() and not line.startswith('#')]

    def should_exclude(self, rel_path: str, is_dir: bool = False) -> bool:
        """Determine if a path should be excluded"""
        path = PurePosixPath(rel_path)
        return (
            self._is_in_excluded_directory(path) or
            (not is_dir and self._has_excluded_name(path)) or
            self._matches_pattern(path, is_dir)
        )

    def _is_in_excluded_directory(self, path: PurePosixPath) -> bool:
        return any(part in self.EXCLUDED_DIRS for part in path.parts)

    def _has_excluded_name(self, path: PurePosixPath) -> bool:
        if path.name in self.EXCLUDED_FILES:
            return True
        return path.suffix.lower() in self.EXCLUDED_EXTENSIONS

    def _matches_pattern(self, path: PurePosixPath, is_dir: bool) -> bool:
        # Directory-only patterns ("build/") match only paths ending in '/'
        candidate = f"{path}/" if is_dir else str(path)
        return self.ignore_spec.match_file(candidate)
