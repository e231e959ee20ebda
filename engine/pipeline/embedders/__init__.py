"""Embedding provider implementations."""

from .sentence_transformer_embedder import SentenceTransformerEmbedder

__all__ = ['SentenceTransformerEmbedder']
