"""Checks over captured controller output: logs and Prometheus metrics text."""

from __future__ import annotations

import re
from typing import Iterable

from .exceptions import InvalidPatternError, PatternNotFoundError, SensitiveDataError

SENSITIVE_PATTERNS = (
    r"(?i)password\s*[:=]\s*\S+",
    r"(?i)token\s*[:=]\s*[A-Za-z0-9+/]{20,}",
    r"(?i)secret\s*[:=]\s*\S+",
    r"(?i)key\s*[:=]\s*[A-Za-z0-9+/]{20,}",
)

METRIC_LINE = re.compile(r"^[a-zA-Z_:][a-zA-Z0-9_:]*(\{.*\})?\s+[0-9.eE+-]+(\s+[0-9]+)?$")
LOG_LINE = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d+)?(Z|[+-]\d{2}:?\d{2})\s+\w+\s+")

_SENSITIVE = tuple(re.compile(p) for p in SENSITIVE_PATTERNS)


def _compile(pattern: str) -> re.Pattern[str]:
    try:
        return re.compile(pattern)
    except re.error as e:
        raise InvalidPatternError(pattern, str(e)) from e


def validate_content(text: str, patterns: Iterable[str], source: str | None = None) -> None:
    """Require every pattern to match somewhere in ``text``.

    Raises:
        InvalidPatternError: If a pattern does not compile
        PatternNotFoundError: For the first pattern without a match
    """
    for pattern in patterns:
        if not _compile(pattern).search(text):
            raise PatternNotFoundError(pattern, source)


def check_sensitive_information(text: str) -> None:
    """Raise :class:`SensitiveDataError` if ``text`` leaks a credential."""
    for line_number, line in enumerate(text.splitlines(), start=1):
        for compiled in _SENSITIVE:
            if compiled.search(line):
                raise SensitiveDataError(compiled.pattern, line_number)


def check_metric_lines(text: str) -> list[str]:
    """Lines that are not valid Prometheus exposition samples.

    Blank lines and ``#`` comments (HELP/TYPE) are skipped.
    """
    bad = []
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        if not METRIC_LINE.match(line):
            bad.append(line)
    return bad


def check_log_lines(text: str) -> list[str]:
    """Non-blank lines lacking an RFC3339 timestamp and level prefix."""
    return [
        line.strip()
        for line in text.splitlines()
        if line.strip() and not LOG_LINE.match(line.strip())
    ]
