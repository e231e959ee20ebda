import json
import sqlite3
from typing import Dict, Iterator, List, Optional, Tuple

from domain_models import Document
from ingestion.vector_index import decode_vector, encode_vector

_COLUMNS = "id, content, metadata, vector"


class DocumentRepository:
    """CRUD operations for the documents table.

    Single Responsibility: Manage document rows only. Callers own
    transactions; nothing here commits.
    """

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def upsert(self, doc: Document):
        """Insert or replace a document row"""
        self.conn.execute(
            f"INSERT OR REPLACE INTO documents ({_COLUMNS}) VALUES (?, ?, ?, ?)",
            self._to_row(doc)
        )

    def upsert_many(self, docs: List[Document]):
        self.conn.executemany(
            f"INSERT OR REPLACE INTO documents ({_COLUMNS}) VALUES (?, ?, ?, ?)",
            [self._to_row(doc) for doc in docs]
        )

    def get(self, doc_id: str) -> Optional[Document]:
        """Get document by ID"""
        cursor = self.conn.execute(
            f"SELECT {_COLUMNS} FROM documents WHERE id = ?",
            (doc_id,)
        )
        row = cursor.fetchone()
        if not row:
            return None
        return self._from_row(row)

    def delete(self, doc_id: str) -> int:
        cursor = self.conn.execute("DELETE FROM documents WHERE id = ?", (doc_id,))
        return cursor.rowcount

    def delete_ids(self, doc_ids: List[str]) -> int:
        if not doc_ids:
            return 0
        cursor = self.conn.executemany(
            "DELETE FROM documents WHERE id = ?",
            [(doc_id,) for doc_id in doc_ids]
        )
        return cursor.rowcount

    def ids_with_prefix(self, prefix: str) -> List[str]:
        """Ordered scan anchored at prefix, stopping at the first non-match"""
        return [doc_id for doc_id, _ in self._seek(prefix, "id")]

    def scan_prefix(self, prefix: str) -> List[Document]:
        return [self._from_row(row) for _, row in self._seek(prefix, _COLUMNS)]

    def scan_all(self) -> Iterator[Document]:
        """Full scan in key order"""
        cursor = self.conn.execute(f"SELECT {_COLUMNS} FROM documents ORDER BY id")
        for row in cursor:
            yield self._from_row(row)

    def count(self) -> int:
        cursor = self.conn.execute("SELECT COUNT(*) FROM documents")
        return cursor.fetchone()[0]

    def _seek(self, prefix: str, columns: str) -> Iterator[Tuple[str, tuple]]:
        cursor = self.conn.execute(
            f"SELECT {columns} FROM documents WHERE id >= ? ORDER BY id",
            (prefix,)
        )
        for row in cursor:
            if not row[0].startswith(prefix):
                break
            yield row[0], row

    @staticmethod
    def _to_row(doc: Document) -> tuple:
        return (
            doc.id,
            doc.content,
            json.dumps(doc.metadata, sort_keys=True),
            encode_vector(doc.vector)
        )

    @staticmethod
    def _from_row(row) -> Document:
        metadata: Dict[str, str] = json.loads(row[2]) if row[2] else {}
        return Document(
            id=row[0],
            content=row[1],
            metadata=metadata,
            vector=decode_vector(row[3])
        )
