"""Exception hierarchy for Suite Insight."""

from .analysis import (
    AnalysisCancelledError,
    AnalysisError,
    DocumentReadError,
    InvalidPatternError,
    ParsingError,
    PatternNotFoundError,
    SensitiveDataError,
)
from .base import SuiteInsightError
from .config import (
    ConfigurationError,
    InvalidConfigError,
    InvalidPathError,
)

__all__ = [
    "SuiteInsightError",
    "AnalysisError",
    "AnalysisCancelledError",
    "DocumentReadError",
    "InvalidPatternError",
    "ParsingError",
    "PatternNotFoundError",
    "SensitiveDataError",
    "ConfigurationError",
    "InvalidPathError",
    "InvalidConfigError",
]
