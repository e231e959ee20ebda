"""Domain models for the code index"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional
from urllib.parse import quote, unquote

# Characters escaped inside the path portion of an ID. '#' separates a
# marker from its chunk index and must never appear unescaped.
_ID_PATH_SAFE = "/:@!$&'()*+,;=-._~ "

FILE_ENTRY_TRUE = "true"
FILE_ENTRY_FALSE = "false"


def compute_id(namespace: str, path: str, index: int = -1) -> str:
    """Build a document ID. index < 0 gives the file-level marker ID."""
    marker = f"{namespace}:{quote(path, safe=_ID_PATH_SAFE)}"
    if index < 0:
        return marker
    return f"{marker}#{index}"


def chunk_prefix(marker_id: str) -> str:
    """Prefix shared by every chunk ID of a marker, and by nothing else"""
    return f"{marker_id}#"


def format_mod_time(timestamp: float) -> str:
    """ISO-8601, second precision, UTC"""
    moment = datetime.fromtimestamp(int(timestamp), tz=timezone.utc)
    return moment.isoformat()


def split_lines(text: str) -> List[str]:
    """Split file text into lines. A trailing newline yields a final empty line."""
    return text.split("\n")


@dataclass(frozen=True, order=True)
class FileRef:
    """Identifies one indexed file"""
    namespace: str
    path: str

    @classmethod
    def parse(cls, doc_id: str) -> 'FileRef':
        """Recover the file a document ID belongs to"""
        namespace, sep, rest = doc_id.partition(":")
        if not sep or not namespace or not rest:
            raise ValueError(f"invalid file ref: {doc_id}")
        escaped_path = rest.split("#", 1)[0]
        return cls(namespace=namespace, path=unquote(escaped_path))

    @property
    def marker_id(self) -> str:
        return compute_id(self.namespace, self.path)

    def __str__(self) -> str:
        return f"{self.namespace}:{self.path}"


@dataclass
class Document:
    """A retrievable unit: file marker or summarized chunk"""
    id: str
    content: str
    metadata: Dict[str, str] = field(default_factory=dict)
    vector: List[float] = field(default_factory=list)

    @property
    def is_file_entry(self) -> bool:
        return self.metadata.get("is_file_entry") == FILE_ENTRY_TRUE

    @property
    def file_ref(self) -> FileRef:
        return FileRef(
            namespace=self.metadata.get("namespace", ""),
            path=self.metadata.get("path", "")
        )


@dataclass
class SearchResult:
    """A document with its similarity to the query"""
    document: Document
    similarity: float


@dataclass(frozen=True)
class ContentSpan:
    """1-based inclusive line range"""
    start_line: int
    end_line: int

    def is_within(self, total_lines: int) -> bool:
        return 1 <= self.start_line <= self.end_line <= total_lines


@dataclass(frozen=True)
class ContentSummary:
    """Generated description of one span of a file"""
    summary: str
    span: ContentSpan


@dataclass
class SnippetRange:
    """Line range of a file selected for the prompt"""
    start_line: int
    end_line: int
    path: str = ""
    namespace: str = ""


@dataclass
class CodeExample:
    """Source excerpt rendered into the answer prompt"""
    path: str
    namespace: str
    start_line: int
    end_line: int
    content: str

    @property
    def token_estimate(self) -> int:
        """Rough token estimation (4 chars per token)"""
        return len(self.content) // 4


@dataclass
class QueryResult:
    """Answer to a query plus the context it was grounded on"""
    answer: str
    prompt: Optional[str] = None
    examples: List[CodeExample] = field(default_factory=list)

    @property
    def generated(self) -> bool:
        return self.prompt is not None
