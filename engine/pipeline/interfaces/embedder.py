"""Embedder interface for text embedding generation.

Defines the contract for embedding providers (SentenceTransformers, Ollama, etc.).
"""

from abc import ABC, abstractmethod
from typing import List


class EmbedderInterface(ABC):
    """Interface for text embedding implementations.

    Contract (Liskov Substitution):
        - embed() returns one vector for one text
        - Every vector from one embedder has the same length
        - Failures raise EmbeddingFailure
    """

    @abstractmethod
    def embed(self, text: str) -> List[float]:
        """Generate the embedding for a single text."""
        pass

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Name/identifier of the embedding model."""
        pass

    def close(self) -> None:
        """Release model or connection resources."""
