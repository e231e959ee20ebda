"""Capability factory - builds the external capabilities from config.

Capabilities are constructed explicitly and handed to the components that
use them; nothing here is cached at module level.
"""
from dataclasses import dataclass
from typing import Optional

from config import Config
from pipeline.embedders import SentenceTransformerEmbedder
from pipeline.interfaces import EmbedderInterface, GeneratorInterface, SummarizerInterface
from pipeline.ollama_client import OllamaClient
from pipeline.ollama_generator import OllamaGenerator
from pipeline.ollama_summarizer import OllamaSummarizer


@dataclass
class Capabilities:
    """The three external capabilities, closed together"""
    embedder: EmbedderInterface
    summarizer: SummarizerInterface
    generator: GeneratorInterface
    client: Optional[OllamaClient] = None

    def close(self):
        self.embedder.close()
        self.summarizer.close()
        self.generator.close()
        if self.client:
            self.client.close()


class CapabilityFactory:
    """Creates capability instances from configuration"""

    def __init__(self, config: Config):
        self.config = config

    def create(self) -> Capabilities:
        client = OllamaClient(self.config.ollama)
        return Capabilities(
            embedder=self.create_embedder(),
            summarizer=OllamaSummarizer(client, self.config.ollama),
            generator=OllamaGenerator(client, self.config.ollama),
            client=client
        )

    def create_embedder(self) -> EmbedderInterface:
        return SentenceTransformerEmbedder(
            self.config.model.name,
            show_progress=self.config.model.show_progress
        )
