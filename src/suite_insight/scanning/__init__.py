"""Test source scanning: file enumeration and top-level function spans."""

from .fallback import RegexSymbolIndex
from .index import SourceSymbolIndex, TestArtifact, TestArtifactIndex
from .languages import detect_language
from .models import FunctionSpan
from .treesitter_parser import TreeSitterParser, get_supported_languages

__all__ = [
    "FunctionSpan",
    "RegexSymbolIndex",
    "SourceSymbolIndex",
    "TestArtifact",
    "TestArtifactIndex",
    "TreeSitterParser",
    "detect_language",
    "get_supported_languages",
]
