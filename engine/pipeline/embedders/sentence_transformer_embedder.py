"""SentenceTransformer embedder adapter.

Wraps a SentenceTransformer model to implement EmbedderInterface.
"""

import logging
from typing import List, Optional

from errors import EmbeddingFailure
from pipeline.interfaces.embedder import EmbedderInterface

logger = logging.getLogger(__name__)


class SentenceTransformerEmbedder(EmbedderInterface):
    """Embedder implementation using SentenceTransformers.

    The model is loaded on first use unless one is injected.
    """

    def __init__(self, model_name: str, model=None, show_progress: bool = False):
        """Initialize with a model name or an existing model.

        Args:
            model_name: HuggingFace model identifier
            model: Optional preloaded SentenceTransformer instance
            show_progress: Show encode progress bars
        """
        self._model_name = model_name
        self._model = model
        self._show_progress = show_progress

    def embed(self, text: str) -> List[float]:
        model = self._get_model()
        try:
            vector = model.encode(text, show_progress_bar=self._show_progress)
        except Exception as e:
            raise EmbeddingFailure(f"failed to embed text: {e}") from e
        return [float(v) for v in vector]

    @property
    def dimension(self) -> Optional[int]:
        """Embedding vector dimension, once the model is loaded."""
        if self._model is None:
            return None
        return self._model.get_sentence_embedding_dimension()

    @property
    def model_name(self) -> str:
        return self._model_name

    def close(self) -> None:
        self._model = None

    def _get_model(self):
        if self._model is None:
            logger.info(f"Loading embedding model {self._model_name}")
            try:
                from sentence_transformers import SentenceTransformer
                self._model = SentenceTransformer(self._model_name)
            except Exception as e:
                raise EmbeddingFailure(f"failed to load model {self._model_name}: {e}") from e
        return self._model
