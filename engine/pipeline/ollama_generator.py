"""Answer generation using Ollama."""

import logging

from config import OllamaConfig
from errors import GenerationFailure
from pipeline.interfaces.generator import GeneratorInterface
from pipeline.ollama_client import OllamaClient, OllamaError

logger = logging.getLogger(__name__)


class OllamaGenerator(GeneratorInterface):
    """Returns the model's reply to a prompt verbatim."""

    def __init__(self, client: OllamaClient, config: OllamaConfig):
        self.client = client
        self.model = config.answer_model

    def generate(self, prompt: str) -> str:
        try:
            return self.client.generate(self.model, prompt)
        except OllamaError as e:
            raise GenerationFailure(f"failed to generate answer: {e}") from e
