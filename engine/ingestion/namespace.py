# Copyright (c) 2024 RAG-KB Contributors
# SPDX-License-Identifier: MIT

"""Namespace file trees.

A namespace is a named collection of files exposed through walk/stat/read
over relative POSIX paths. LocalFileTree serves a directory on disk and
VirtualFileTree a set of individually added files. Both hide whatever
their FileFilterPolicy excludes, plus non-UTF-8 files.
"""
import codecs
import logging
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Dict, Iterable, Iterator, Optional

from errors import NamespaceWalkError
from ingestion.file_filter import FileFilterPolicy

logger = logging.getLogger(__name__)

# Bytes sniffed to decide whether a file is text
_SNIFF_BYTES = 512


@dataclass(frozen=True)
class FileStat:
    size: int
    mod_time: float


class FileTree(ABC):
    """File-tree capability of one namespace"""

    @abstractmethod
    def walk(self) -> Iterator[str]:
        """Yield relative paths of every visible file. Order is unspecified."""

    @abstractmethod
    def stat(self, path: str) -> FileStat:
        """Raises FileNotFoundError for missing or hidden paths"""

    @abstractmethod
    def read(self, path: str) -> bytes:
        """Raises FileNotFoundError for missing or hidden paths"""

    def exists(self, path: str) -> bool:
        try:
            self.stat(path)
        except FileNotFoundError:
            return False
        return True


NamespaceMap = Dict[str, FileTree]


def is_binary_content(data: bytes) -> bool:
    """True when the leading bytes are not valid UTF-8"""
    try:
        # Non-final decode tolerates a multi-byte character cut at the boundary
        codecs.getincrementaldecoder('utf-8')().decode(data[:_SNIFF_BYTES], final=False)
    except UnicodeDecodeError:
        return True
    return False


class LocalFileTree(FileTree):
    """Directory on disk, filtered

    Example:
        tree = LocalFileTree.from_directory(Path("."), ignore_file=".codekbignore")
        for path in tree.walk():
            print(path, tree.stat(path).size)
    """

    def __init__(self, root: Path, filter_policy: Optional[FileFilterPolicy] = None,
                 skip_binary: bool = True):
        self.root = Path(root)
        self.filter_policy = filter_policy or FileFilterPolicy()
        self.skip_binary = skip_binary

    @classmethod
    def from_directory(cls, root: Path, ignore_file: Optional[str] = None,
                       skip_binary: bool = True) -> 'LocalFileTree':
        policy = FileFilterPolicy()
        if ignore_file:
            policy = FileFilterPolicy.from_ignore_file(Path(root) / ignore_file)
        return cls(root, policy, skip_binary)

    def walk(self) -> Iterator[str]:
        if not self.root.is_dir():
            raise NamespaceWalkError(f"namespace root is not a directory: {self.root}")
        for dirpath, dirnames, filenames in os.walk(self.root, onerror=self._raise_walk_error):
            rel_dir = PurePosixPath(Path(dirpath).relative_to(self.root).as_posix())
            dirnames[:] = sorted(
                d for d in dirnames
                if not self.filter_policy.should_exclude(str(rel_dir / d), is_dir=True)
            )
            for name in sorted(filenames):
                rel_path = self._relative(rel_dir / name)
                if self._is_visible(rel_path):
                    yield rel_path

    def stat(self, path: str) -> FileStat:
        full_path = self._resolve(path)
        if not self._is_visible(path):
            raise FileNotFoundError(path)
        info = full_path.stat()
        return FileStat(size=info.st_size, mod_time=info.st_mtime)

    def read(self, path: str) -> bytes:
        full_path = self._resolve(path)
        if not self._is_visible(path):
            raise FileNotFoundError(path)
        return full_path.read_bytes()

    @staticmethod
    def _raise_walk_error(error: OSError):
        raise NamespaceWalkError(f"failed to walk directory: {error}") from error

    @staticmethod
    def _relative(path: PurePosixPath) -> str:
        text = str(path)
        return text[2:] if text.startswith("./") else text

    def _resolve(self, path: str) -> Path:
        """Map a relative path into the tree, refusing escapes"""
        rel = PurePosixPath(path)
        if rel.is_absolute() or '..' in rel.parts:
            raise FileNotFoundError(path)
        return self.root / rel

    def _is_visible(self, path: str) -> bool:
        full_path = self.root / path
        if not full_path.is_file():
            return False
        if self.filter_policy.should_exclude(path):
            return False
        return not (self.skip_binary and self._is_binary(full_path))

    @staticmethod
    def _is_binary(full_path: Path) -> bool:
        try:
            with open(full_path, 'rb') as f:
                head = f.read(_SNIFF_BYTES)
        except OSError:
            return False
        return is_binary_content(head)


@dataclass(frozen=True)
class _VirtualFile:
    content: bytes
    info: FileStat


class VirtualFileTree(FileTree):
    """Individually chosen files, flattened to their base names

    Each file is snapshotted when added: content, size and modification
    time are read once from disk. A later file with the same base name
    replaces the earlier one.

    Example:
        tree = VirtualFileTree()
        tree.add_file(Path("/etc/nginx/nginx.conf"))
        list(tree.walk())  # ["nginx.conf"]
    """

    def __init__(self, filter_policy: Optional[FileFilterPolicy] = None,
                 skip_binary: bool = True):
        self.filter_policy = filter_policy or FileFilterPolicy()
        self.skip_binary = skip_binary
        self.files: Dict[str, _VirtualFile] = {}

    @classmethod
    def from_files(cls, paths: Iterable[Path], skip_binary: bool = True) -> 'VirtualFileTree':
        """Add every readable file; unreadable ones are logged and skipped"""
        tree = cls(skip_binary=skip_binary)
        for path in paths:
            try:
                tree.add_file(path)
            except OSError as e:
                logger.warning(f"Skipping extra file {path}: {e}")
        return tree

    def add_file(self, source_path: Path) -> str:
        """Snapshot a file from disk and return its name in the tree"""
        source_path = Path(source_path)
        content = source_path.read_bytes()
        info = source_path.stat()
        name = source_path.name
        if name in self.files:
            logger.warning(f"Extra file {source_path} replaces an earlier file named {name}")
        self.files[name] = _VirtualFile(content, FileStat(size=info.st_size, mod_time=info.st_mtime))
        return name

    def walk(self) -> Iterator[str]:
        for name in sorted(self.files):
            if self._is_visible(name):
                yield name

    def stat(self, path: str) -> FileStat:
        return self._lookup(path).info

    def read(self, path: str) -> bytes:
        return self._lookup(path).content

    def _lookup(self, path: str) -> _VirtualFile:
        if not self._is_visible(path):
            raise FileNotFoundError(path)
        return self.files[path]

    def _is_visible(self, path: str) -> bool:
        entry = self.files.get(path)
        if entry is None or self.filter_policy.should_exclude(path):
            return False
        return not (self.skip_binary and is_binary_content(entry.content))
