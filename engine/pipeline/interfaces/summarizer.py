"""Summarizer interface for splitting a file into described spans."""

from abc import ABC, abstractmethod
from typing import List

from domain_models import ContentSummary


class SummarizerInterface(ABC):
    """Interface for file summarization implementations.

    Contract:
        - Input is the full file text with every line prefixed by its
          1-based line number
        - Output is ordered and never empty
        - Failures raise SummarizationFailure
        - Line ranges are returned as produced; callers validate bounds
    """

    @abstractmethod
    def summarize(self, numbered_text: str) -> List[ContentSummary]:
        pass

    def close(self) -> None:
        """Release connection resources."""
