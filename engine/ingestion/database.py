# Copyright (c) 2024 RAG-KB Contributors
# SPDX-License-Identifier: MIT

"""Durable document store with brute-force vector search.

Documents live in a single SQLite table keyed by ID. Reads are single
statements and see a consistent WAL snapshot; every multi-row write runs in
one transaction, so readers of a file's ID range never observe a half
replaced file.
"""
import logging
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, List, Optional

from config import DatabaseConfig
from domain_models import Document, SearchResult, chunk_prefix
from errors import DocumentNotFoundError, EmbeddingFailure, InvalidDocumentError, StoreIOFailure
from ingestion.document_repository import DocumentRepository
from ingestion.vector_index import rank
from pipeline.interfaces.embedder import EmbedderInterface

# Centralized logging configuration - import triggers suppression
import ingestion.logging_config  # noqa: F401

logger = logging.getLogger(__name__)


class DatabaseConnection:
    """Manages the SQLite connection"""

    def __init__(self, config: DatabaseConfig):
        self.config = config
        self.conn = None

    def connect(self) -> sqlite3.Connection:
        """Establish database connection"""
        Path(self.config.path).parent.mkdir(parents=True, exist_ok=True)
        self.conn = sqlite3.connect(
            self.config.path,
            check_same_thread=self.config.check_same_thread
        )
        # WAL gives readers a stable snapshot while a writer commits
        self.conn.execute("PRAGMA journal_mode=WAL")
        self.conn.execute(f"PRAGMA busy_timeout={int(self.config.busy_timeout_ms)}")
        return self.conn

    def close(self):
        """Close connection"""
        if self.conn:
            self.conn.close()
            self.conn = None


class SchemaManager:
    """Manages database schema"""

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def create_schema(self):
        """Create all required tables"""
        self._create_documents_table()
        self.conn.commit()

    def _create_documents_table(self):
        self.conn.execute("""
            CREATE TABLE IF NOT EXISTS documents (
                id TEXT PRIMARY KEY NOT NULL,
                content TEXT NOT NULL,
                metadata TEXT NOT NULL,
                vector BLOB
            )
        """)


class DocumentStore:
    """Keyed document storage with similarity and metadata retrieval.

    The embedder is injected at construction; the store calls it for every
    non-empty document it writes and for every query text.

    Usage:
        with DocumentStore.open(config, embedder) as store:
            store.put(doc)
            results = store.query("parse config", limit=10)
    """

    def __init__(self, config: DatabaseConfig, embedder: EmbedderInterface):
        self.config = config
        self.embedder = embedder
        self._db = DatabaseConnection(config)
        self._repo: Optional[DocumentRepository] = None
        self._lock = threading.RLock()

    @classmethod
    def open(cls, config: DatabaseConfig, embedder: EmbedderInterface) -> 'DocumentStore':
        store = cls(config, embedder)
        store.connect()
        return store

    def connect(self):
        """Open the database file and ensure the schema exists"""
        try:
            conn = self._db.connect()
            SchemaManager(conn).create_schema()
        except sqlite3.Error as e:
            self._db.close()
            raise StoreIOFailure(f"failed to open document store at {self.config.path}: {e}") from e
        self._repo = DocumentRepository(conn)
        logger.debug(f"Opened document store at {self.config.path}")

    def close(self):
        with self._lock:
            self._db.close()
            self._repo = None

    @property
    def is_open(self) -> bool:
        return self._repo is not None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def put(self, doc: Document):
        """Embed and upsert one document"""
        self._embed(doc)
        with self._transaction() as repo:
            repo.upsert(doc)

    def batch_put(self, docs: List[Document]):
        """Embed every document, then write all of them in one transaction.

        Any embedding failure aborts the batch before anything is written.
        """
        for doc in docs:
            self._embed(doc)
        with self._transaction() as repo:
            repo.upsert_many(docs)

    def delete(self, doc_id: str):
        with self._transaction() as repo:
            repo.delete(doc_id)

    def delete_by_prefix(self, prefix: str) -> int:
        """Remove every document whose ID begins with prefix"""
        with self._transaction() as repo:
            return repo.delete_ids(repo.ids_with_prefix(prefix))

    def delete_file(self, marker_id: str) -> int:
        """Remove a file's marker and all of its chunks atomically"""
        with self._transaction() as repo:
            return self._delete_file_entries(repo, marker_id)

    def replace_file(self, marker_id: str, docs: List[Document]) -> int:
        """Swap a file's documents for a new set in one transaction.

        Embedding happens before the transaction opens, so a provider
        failure leaves the previous documents untouched.
        """
        for doc in docs:
            self._embed(doc)
        with self._transaction() as repo:
            removed = self._delete_file_entries(repo, marker_id)
            repo.upsert_many(docs)
        return removed

    @staticmethod
    def _delete_file_entries(repo: DocumentRepository, marker_id: str) -> int:
        removed = repo.delete(marker_id)
        return removed + repo.delete_ids(repo.ids_with_prefix(chunk_prefix(marker_id)))

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, doc_id: str) -> Document:
        doc = self._read(lambda repo: repo.get(doc_id))
        if doc is None:
            raise DocumentNotFoundError(doc_id)
        return doc

    def scan_by_prefix(self, prefix: str) -> List[Document]:
        return self._read(lambda repo: repo.scan_prefix(prefix))

    def filter_by_metadata(self, filters: Dict[str, str]) -> List[Document]:
        """Full scan keeping documents whose metadata matches every filter"""
        return self._read(lambda repo: [
            doc for doc in repo.scan_all() if self._matches(doc, filters)
        ])

    def query(self, text: str, limit: int, filters: Optional[Dict[str, str]] = None) -> List[SearchResult]:
        """Rank filtered documents by cosine similarity to the embedded text.

        Ordered by similarity descending, ties by ascending ID.
        """
        query_vector = self._embed_text(text)
        filters = filters or {}
        return self._read(lambda repo: rank(
            query_vector,
            (doc for doc in repo.scan_all() if self._matches(doc, filters)),
            limit
        ))

    def count(self) -> int:
        return self._read(lambda repo: repo.count())

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @staticmethod
    def _matches(doc: Document, filters: Dict[str, str]) -> bool:
        return all(doc.metadata.get(key) == value for key, value in filters.items())

    def _embed(self, doc: Document):
        if not doc.id:
            raise InvalidDocumentError("document ID cannot be empty")
        # Markers carry no content and are never ranked
        doc.vector = self._embed_text(doc.content) if doc.content else []

    def _embed_text(self, text: str) -> List[float]:
        try:
            return list(self.embedder.embed(text))
        except EmbeddingFailure:
            raise
        except Exception as e:
            raise EmbeddingFailure(f"failed to embed text: {e}") from e

    def _require_repo(self) -> DocumentRepository:
        if self._repo is None:
            raise StoreIOFailure("document store is not open")
        return self._repo

    def _read(self, fn):
        with self._lock:
            repo = self._require_repo()
            try:
                return fn(repo)
            except sqlite3.Error as e:
                raise StoreIOFailure(f"document store read failed: {e}") from e

    @contextmanager
    def _transaction(self) -> Iterator[DocumentRepository]:
        with self._lock:
            repo = self._require_repo()
            try:
                with repo.conn:
                    yield repo
            except sqlite3.Error as e:
                raise StoreIOFailure(f"document store write failed: {e}") from e
