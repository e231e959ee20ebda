"""Typed document metadata and external response schemas.

Markers and chunks share a field set but are distinguished by the
``is_file_entry`` tag. Both are validated at construction and flattened to
the string map persisted on each Document.
"""
from datetime import datetime
from typing import Dict, List, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from domain_models import FILE_ENTRY_FALSE, FILE_ENTRY_TRUE, ContentSpan, ContentSummary
from errors import InvalidDocumentError


class FileMetadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    path: str = Field(..., min_length=1)
    language: str
    mod_time: str
    size: int = Field(..., ge=0)
    namespace: str = Field(..., min_length=1)

    @model_validator(mode="after")
    def _check_mod_time(self):
        datetime.fromisoformat(self.mod_time)
        return self

    def to_metadata(self) -> Dict[str, str]:
        """Flatten to the persisted string map"""
        return {key: str(value) for key, value in self.model_dump().items()}


class MarkerMetadata(FileMetadata):
    """Bookkeeping record of a file's last indexed state"""
    is_file_entry: Literal["true"] = FILE_ENTRY_TRUE


class ChunkMetadata(FileMetadata):
    """One summarized span of a file"""
    is_file_entry: Literal["false"] = FILE_ENTRY_FALSE
    start_line: int = Field(..., ge=1)
    end_line: int = Field(..., ge=1)

    @model_validator(mode="after")
    def _check_range(self):
        if self.end_line < self.start_line:
            raise ValueError(f"end_line {self.end_line} before start_line {self.start_line}")
        return self

    @property
    def span(self) -> ContentSpan:
        return ContentSpan(self.start_line, self.end_line)


def parse_metadata(metadata: Dict[str, str]) -> Union[MarkerMetadata, ChunkMetadata]:
    """Rebuild typed metadata from a persisted string map"""
    model = MarkerMetadata if metadata.get("is_file_entry") == FILE_ENTRY_TRUE else ChunkMetadata
    try:
        return model.model_validate(metadata)
    except ValidationError as e:
        raise InvalidDocumentError(f"invalid {model.__name__}: {e}") from e


class SummaryItem(BaseModel):
    summary: str = Field(..., description="What this code element or section does")
    start_line: int = Field(..., description="The starting line number of this element")
    end_line: int = Field(..., description="The ending line number of this element")

    def to_content_summary(self) -> ContentSummary:
        return ContentSummary(
            summary=self.summary,
            span=ContentSpan(self.start_line, self.end_line)
        )


class SummaryResponse(BaseModel):
    """Structured output requested from the summarizer model"""
    summaries: List[SummaryItem]
