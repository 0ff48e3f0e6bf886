"""Language detection and regex definitions for test sources.

Languages with a bundled tree-sitter grammar are parsed structurally; the
``FALLBACK_LANGUAGES`` entries describe how the regex fallback finds
top-level functions for the rest.
"""

import re as _re
from dataclasses import dataclass
from pathlib import Path

_EXTENSIONS = {
    ".go": "go",
    ".py": "python",
    ".js": "javascript",
    ".mjs": "javascript",
    ".ts": "typescript",
    ".rs": "rust",
    ".kt": "kotlin",
}


@dataclass(frozen=True)
class FallbackLanguage:
    """How to spot a top-level function without a parser.

    ``function_pattern`` is anchored at column 0 and its first group is the
    function name. The body runs to the matching closing brace.
    """

    name: str
    function_pattern: "_re.Pattern[str]"


FALLBACK_LANGUAGES: dict[str, FallbackLanguage] = {
    "javascript": FallbackLanguage(
        "javascript",
        _re.compile(r"^(?:export\s+)?(?:async\s+)?function\s*\*?\s*(\w+)\s*\(", _re.MULTILINE),
    ),
    "typescript": FallbackLanguage(
        "typescript",
        _re.compile(r"^(?:export\s+)?(?:async\s+)?function\s*\*?\s*(\w+)\s*[<(]", _re.MULTILINE),
    ),
    "rust": FallbackLanguage(
        "rust",
        _re.compile(r"^(?:pub(?:\([^)]*\))?\s+)?(?:async\s+)?fn\s+(\w+)", _re.MULTILINE),
    ),
    "kotlin": FallbackLanguage(
        "kotlin",
        _re.compile(r"^(?:(?:private|internal|public)\s+)?fun\s+(\w+)\s*\(", _re.MULTILINE),
    ),
}


def detect_language(filepath) -> str:
    """Map a file path to a language name, ``"unknown"`` if unrecognized."""
    return _EXTENSIONS.get(Path(filepath).suffix.lower(), "unknown")
