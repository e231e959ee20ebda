"""LLM-based file summarization using Ollama.

Splits a line-numbered file into semantically meaningful spans and
describes each one. Output is requested as JSON matching SummaryResponse.
"""

import logging
from typing import List

from pydantic import ValidationError

from config import OllamaConfig
from domain_models import ContentSummary
from errors import SummarizationFailure
from models import SummaryResponse
from pipeline.interfaces.summarizer import SummarizerInterface
from pipeline.ollama_client import OllamaClient, OllamaError

logger = logging.getLogger(__name__)

SUMMARY_PROMPT = """Analyze this file and create semantic summaries of its contents.

For code files:
- Identify and describe each important element (functions, structs, types, etc)
- Explain what each element does in clear, concise English
- Include the exact line ranges for each element
- NEVER use placeholders like "[previous code remains the same]" - always provide exact code
- When showing code changes or examples, include sufficient context to make it clear where they belong

For documentation files:
- Break down the content into logical sections
- Summarize the key points of each section
- Include the exact line ranges for each section
- NEVER use placeholders or summaries - always quote exact text

Return ONLY a JSON object of the form:
{{"summaries": [{{"summary": "...", "start_line": 1, "end_line": 10}}]}}

File contents:

{content}"""


class OllamaSummarizer(SummarizerInterface):
    """Summarizer backed by an Ollama model with structured JSON output."""

    def __init__(self, client: OllamaClient, config: OllamaConfig):
        self.client = client
        self.model = config.summary_model
        self.max_output_tokens = config.max_output_tokens

    def summarize(self, numbered_text: str) -> List[ContentSummary]:
        prompt = SUMMARY_PROMPT.format(content=numbered_text)
        try:
            raw = self.client.generate(
                self.model,
                prompt,
                format=SummaryResponse.model_json_schema(),
                options={"num_predict": self.max_output_tokens}
            )
        except OllamaError as e:
            raise SummarizationFailure(f"failed to generate summaries: {e}") from e

        return self._parse(raw)

    @staticmethod
    def _parse(raw: str) -> List[ContentSummary]:
        try:
            response = SummaryResponse.model_validate_json(raw)
        except ValidationError as e:
            raise SummarizationFailure(f"failed to parse response as JSON: {e}") from e

        if not response.summaries:
            raise SummarizationFailure("no summaries found in response")
        return [item.to_content_summary() for item in response.summaries]
