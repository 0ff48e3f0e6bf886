"""Scanning data models."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class FunctionSpan:
    """A top-level function in a test source file.

    ``start`` and ``end`` are offsets into the file (``[start, end)``): byte
    offsets when the file was parsed with tree-sitter, character offsets for
    the regex fallback. ``text`` is the raw source of the function.
    """

    name: str
    start: int
    end: int
    text: str
