"""
Ingestion package - document storage and namespace access.

- Document store (DocumentStore) on SQLite with brute-force cosine search
- Namespace file trees (FileTree, LocalFileTree) with ignore filtering
- Language detection for metadata

Usage:
    from ingestion import DocumentStore, LocalFileTree
    store = DocumentStore.open(config.database, embedder)
"""

from .database import DatabaseConnection, SchemaManager, DocumentStore
from .document_repository import DocumentRepository
from .file_filter import FileFilterPolicy
from .language import detect_language
from .namespace import FileStat, FileTree, LocalFileTree, NamespaceMap
from .vector_index import NO_MATCH, cosine_similarity

__all__ = [
    'DatabaseConnection',
    'SchemaManager',
    'DocumentStore',
    'DocumentRepository',
    'FileFilterPolicy',
    'detect_language',
    'FileStat',
    'FileTree',
    'LocalFileTree',
    'NamespaceMap',
    'NO_MATCH',
    'cosine_similarity',
]
