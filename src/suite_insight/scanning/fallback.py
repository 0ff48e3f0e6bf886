"""Regex-based fallback for languages without a bundled grammar.

Produces the same ``FunctionSpan`` contract as the tree-sitter path, with
character offsets. Results are approximate: braces inside strings and
comments are not special-cased.
"""

from __future__ import annotations

from dataclasses import dataclass

from .languages import FALLBACK_LANGUAGES
from .models import FunctionSpan


class UnbalancedSourceError(ValueError):
    """The fallback could not find the end of a function body."""


@dataclass
class RegexSymbolIndex:
    """Regex-based top-level function finder."""

    def supports(self, language: str) -> bool:
        return language in FALLBACK_LANGUAGES

    def function_spans(self, content: str, language: str) -> list[FunctionSpan]:
        """Return every top-level function in ``content``.

        Raises:
            UnbalancedSourceError: If a function body never closes
        """
        pattern = FALLBACK_LANGUAGES[language].function_pattern
        spans: list[FunctionSpan] = []
        for match in pattern.finditer(content):
            start = match.start()
            end = _brace_end(content, match.end())
            spans.append(
                FunctionSpan(name=match.group(1), start=start, end=end, text=content[start:end])
            )
        return spans


def _brace_end(content: str, offset: int) -> int:
    open_at = content.find("{", offset)
    if open_at == -1:
        raise UnbalancedSourceError(f"no body after offset {offset}")
    depth = 0
    for pos in range(open_at, len(content)):
        char = content[pos]
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return pos + 1
    raise UnbalancedSourceError(f"unclosed body starting at offset {open_at}")
