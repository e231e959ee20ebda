"""
NumPy cosine similarity and brute-force ranking.

Search is exhaustive: every candidate vector is scored against the query.
"""
import logging
from typing import Iterable, List, Sequence

import numpy as np

from domain_models import Document, SearchResult

logger = logging.getLogger(__name__)

# Returned instead of raising when vectors cannot be compared
NO_MATCH = -1.0


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """dot(a,b) / (|a| * |b|)

    Returns NO_MATCH on dimensionality mismatch and 0.0 when either
    vector has zero norm.
    """
    if len(a) != len(b) or len(a) == 0:
        return NO_MATCH

    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)
    norm_a = np.linalg.norm(va)
    norm_b = np.linalg.norm(vb)
    if norm_a == 0 or norm_b == 0:
        return 0.0
    return float(np.dot(va, vb) / (norm_a * norm_b))


def rank(query_vector: Sequence[float], documents: Iterable[Document], limit: int) -> List[SearchResult]:
    """Score every document and keep the best `limit`.

    Ties keep input order; the store yields documents in ID order, so equal
    similarities are ranked by ascending ID.
    """
    results = [
        SearchResult(document=doc, similarity=cosine_similarity(query_vector, doc.vector))
        for doc in documents
    ]
    results.sort(key=lambda r: r.similarity, reverse=True)
    if limit < 0:
        limit = 0
    return results[:limit]


def encode_vector(vector: Sequence[float]) -> bytes:
    """Pack a vector as float32 for storage"""
    return np.asarray(vector, dtype=np.float32).tobytes()


def decode_vector(blob: bytes) -> List[float]:
    """Unpack a stored float32 vector"""
    if not blob:
        return []
    return np.frombuffer(blob, dtype=np.float32).tolist()
