"""Tests for the SentenceTransformer embedder adapter."""
from unittest.mock import Mock, patch

import numpy as np
import pytest

from errors import EmbeddingFailure
from pipeline.embedders import SentenceTransformerEmbedder


class TestSentenceTransformerEmbedder:
    """Adapter behaviour with an injected model"""

    def test_embed_returns_float_list(self):
        model = Mock()
        model.encode.return_value = np.array([0.1, 0.2, 0.3], dtype=np.float32)
        embedder = SentenceTransformerEmbedder("test-model", model=model)

        vector = embedder.embed("parse config")

        assert vector == pytest.approx([0.1, 0.2, 0.3])
        assert all(isinstance(v, float) for v in vector)
        model.encode.assert_called_once_with("parse config", show_progress_bar=False)

    def test_model_error_is_embedding_failure(self):
        model = Mock()
        model.encode.side_effect = RuntimeError("cuda oom")
        embedder = SentenceTransformerEmbedder("test-model", model=model)

        with pytest.raises(EmbeddingFailure):
            embedder.embed("x")

    def test_dimension_from_model(self):
        model = Mock()
        model.get_sentence_embedding_dimension.return_value = 384
        assert SentenceTransformerEmbedder("m", model=model).dimension == 384

    def test_model_loaded_lazily(self):
        embedder = SentenceTransformerEmbedder("lazy-model")
        assert embedder.dimension is None
        assert embedder.model_name == "lazy-model"

    def test_load_failure_is_embedding_failure(self):
        with patch("sentence_transformers.SentenceTransformer", side_effect=OSError("not found")):
            with pytest.raises(EmbeddingFailure, match="failed to load model"):
                SentenceTransformerEmbedder("missing/model").embed("x")
