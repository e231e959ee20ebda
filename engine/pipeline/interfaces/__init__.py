"""Contracts for the external capabilities the index depends on."""

from .embedder import EmbedderInterface
from .summarizer import SummarizerInterface
from .generator import GeneratorInterface

__all__ = [
    'EmbedderInterface',
    'SummarizerInterface',
    'GeneratorInterface',
]
