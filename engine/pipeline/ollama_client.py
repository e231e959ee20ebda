"""Minimal Ollama HTTP client shared by the summarizer and the generator."""

import logging
from typing import Any, Dict, Optional

import requests

from config import OllamaConfig

logger = logging.getLogger(__name__)


class OllamaError(Exception):
    """Ollama request failed or returned an unusable body"""


class OllamaClient:
    """Posts non-streaming generate requests to an Ollama server.

    Owns one requests.Session; call close() when done.
    """

    def __init__(self, config: OllamaConfig, session: Optional[requests.Session] = None):
        self.config = config
        self.base_url = config.url.rstrip("/")
        self.session = session or requests.Session()

    def generate(self, model: str, prompt: str, format: Any = None,
                 options: Optional[Dict[str, Any]] = None) -> str:
        """Run one completion and return the response text"""
        payload: Dict[str, Any] = {
            "model": model,
            "prompt": prompt,
            "stream": False,
            "options": {
                "temperature": self.config.temperature,
                **(options or {}),
            },
        }
        if format is not None:
            payload["format"] = format

        try:
            response = self.session.post(
                f"{self.base_url}/api/generate",
                json=payload,
                timeout=self.config.timeout
            )
        except requests.RequestException as e:
            raise OllamaError(f"Ollama request failed: {e}") from e

        if response.status_code != 200:
            raise OllamaError(f"Ollama API error: {response.status_code} {response.text[:200]}")

        try:
            body = response.json()
        except ValueError as e:
            raise OllamaError(f"Ollama returned invalid JSON: {e}") from e

        text = body.get("response", "")
        if not text:
            raise OllamaError("no content generated")
        logger.debug(f"Ollama {model} returned {len(text)} chars")
        return text

    def close(self) -> None:
        self.session.close()
