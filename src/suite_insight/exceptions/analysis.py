"""Analysis-related exceptions: document access, parsing, patterns, probes."""

from pathlib import Path
from typing import Optional

from .base import SuiteInsightError


class AnalysisError(SuiteInsightError):
    """Base class for analysis-related errors."""
    pass


class DocumentReadError(AnalysisError):
    """Raised when a requirements or design document cannot be read."""

    def __init__(self, filepath: Path, kind: str, reason: str):
        super().__init__(
            f"Cannot read {kind} document: {filepath}",
            details={"filepath": str(filepath), "kind": kind, "reason": reason},
        )
        self.filepath = filepath
        self.kind = kind
        self.reason = reason


class ParsingError(AnalysisError):
    """Raised when a test source file cannot be parsed."""

    def __init__(self, filepath: Path, language: str, reason: str):
        super().__init__(
            f"Failed to parse {language} file: {filepath}",
            details={"filepath": str(filepath), "language": language, "reason": reason},
        )
        self.filepath = filepath
        self.language = language
        self.reason = reason


class InvalidPatternError(AnalysisError):
    """Raised when a caller-supplied regular expression does not compile."""

    def __init__(self, pattern: str, reason: str):
        super().__init__(
            f"Invalid regex pattern: {pattern}",
            details={"pattern": pattern, "reason": reason},
        )
        self.pattern = pattern
        self.reason = reason


class PatternNotFoundError(AnalysisError):
    """Raised when an expected pattern is absent from checked content."""

    def __init__(self, pattern: str, source: Optional[str] = None):
        details = {"pattern": pattern}
        if source:
            details["source"] = source
        super().__init__(f"Expected pattern not found: {pattern}", details=details)
        self.pattern = pattern
        self.source = source


class SensitiveDataError(AnalysisError):
    """Raised when checked content leaks credentials."""

    def __init__(self, pattern: str, line_number: int):
        super().__init__(
            "Sensitive information found in content",
            details={"pattern": pattern, "line": str(line_number)},
        )
        self.pattern = pattern
        self.line_number = line_number


class AnalysisCancelledError(AnalysisError):
    """Raised when the caller cancels an analysis run before it completes."""

    def __init__(self, pending: Optional[list] = None):
        pending = pending or []
        details = {"pending": ", ".join(pending)} if pending else None
        super().__init__("Analysis cancelled before all probes completed", details=details)
        self.pending = pending
