"""Extension to language label mapping. Metadata only."""
from pathlib import PurePosixPath

UNKNOWN_LANGUAGE = "Unknown"

LANGUAGES = {
    ".go": "Go",
    ".js": "JavaScript",
    ".jsx": "JavaScript",
    ".ts": "TypeScript",
    ".tsx": "TypeScript",
    ".py": "Python",
    ".java": "Java",
    ".rb": "Ruby",
    ".php": "PHP",
    ".rs": "Rust",
    ".c": "C",
    ".cpp": "C++",
    ".cc": "C++",
    ".cxx": "C++",
    ".h": "C/C++ Header",
    ".hpp": "C/C++ Header",
}


def detect_language(path: str) -> str:
    """Detect the language of a file from its extension"""
    return LANGUAGES.get(PurePosixPath(path).suffix.lower(), UNKNOWN_LANGUAGE)
