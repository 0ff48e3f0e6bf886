"""Test Artifact Index: test source enumeration and lazy function lookup.

Usage:
    index = TestArtifactIndex("test/e2e", suffix="_test.go", entry_prefix="Test")
    for path in index.files():
        spans = index.function_spans(path)   # None when the file failed to parse

Parsing strategy:
    1. Languages with a bundled tree-sitter grammar (Go, Python) are parsed
       structurally. A tree containing syntax errors is a parse failure.
    2. Other recognized languages use the regex fallback.
    3. Unrecognized languages have no function-level lookup.

Parse failures are soft: the file stays in ``files()`` and its raw text is
still searchable, but ``function_spans()`` returns ``None`` for it.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from threading import Lock
from typing import Optional, Protocol

from ..exceptions import InvalidPathError, ParsingError
from .fallback import RegexSymbolIndex, UnbalancedSourceError
from .languages import detect_language
from .models import FunctionSpan
from .treesitter_parser import TreeSitterParser

logger = logging.getLogger(__name__)

_SKIP_DIRS = frozenset({"vendor", "node_modules", ".git", "__pycache__", ".venv", "venv"})


class SourceSymbolIndex(Protocol):
    """Anything that can list the test functions of a file."""

    def function_spans(self, path: str) -> Optional[list[FunctionSpan]]: ...


class TestArtifact:
    """One test source file; text and function spans load on first access."""

    __test__ = False  # not a pytest class

    def __init__(self, path: str, index: "TestArtifactIndex") -> None:
        self.path = path
        self._index = index

    @property
    def text(self) -> str:
        return self._index.read_text(self.path)

    @property
    def functions(self) -> Optional[list[FunctionSpan]]:
        return self._index.function_spans(self.path)

    def __repr__(self) -> str:
        return f"TestArtifact({self.path!r})"


class TestArtifactIndex:
    """Enumerates test files under ``root`` and caches per-file lookups.

    One index lives for one analysis run. Caches are guarded by a lock so
    probes on worker threads can share the index.

    Attributes:
        parse_failures: Maps file path to the reason it could not be parsed
    """

    __test__ = False  # not a pytest class

    def __init__(
        self,
        root: str | Path,
        suffix: str = "_test.go",
        entry_prefix: str = "Test",
        parser: Optional[TreeSitterParser] = None,
        fallback: Optional[RegexSymbolIndex] = None,
    ) -> None:
        self.root = Path(root)
        self.suffix = suffix
        self.entry_prefix = entry_prefix
        self._parser = parser or TreeSitterParser()
        self._fallback = fallback or RegexSymbolIndex()
        self._lock = Lock()
        self._files: Optional[list[str]] = None
        self._text: dict[str, str] = {}
        self._spans: dict[str, Optional[list[FunctionSpan]]] = {}
        self.parse_failures: dict[str, str] = {}

    def files(self) -> list[str]:
        """All test files under the root, in sorted walk order.

        Raises:
            InvalidPathError: If the root is not a directory
        """
        with self._lock:
            if self._files is None:
                self._files = self._scan()
            return list(self._files)

    def artifacts(self) -> list[TestArtifact]:
        return [TestArtifact(path, self) for path in self.files()]

    def _scan(self) -> list[str]:
        if not self.root.is_dir():
            raise InvalidPathError(self.root, "test directory does not exist")

        found: list[str] = []
        for dirpath, dirnames, filenames in os.walk(self.root):
            dirnames[:] = sorted(d for d in dirnames if d not in _SKIP_DIRS)
            for name in sorted(filenames):
                if name.endswith(self.suffix):
                    found.append(str(Path(dirpath) / name))
        logger.debug("Found %d test files under %s", len(found), self.root)
        return found

    def read_text(self, path: str) -> str:
        """Raw file text, cached. Unreadable files read as empty."""
        with self._lock:
            cached = self._text.get(path)
        if cached is not None:
            return cached

        try:
            text = Path(path).read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            logger.warning("Cannot read test file %s: %s", path, e)
            text = ""

        with self._lock:
            self._text[path] = text
        return text

    def function_spans(self, path: str) -> Optional[list[FunctionSpan]]:
        """Top-level test entry points of ``path``, or ``None`` on parse failure."""
        with self._lock:
            if path in self._spans:
                return self._spans[path]

        try:
            spans = self._extract(path)
        except ParsingError as e:
            logger.debug("Skipping function lookup for %s: %s", path, e)
            spans = None
            with self._lock:
                self.parse_failures[path] = e.reason
        except (RecursionError, ValueError) as e:
            logger.debug("Parser gave up on %s: %s", path, e)
            spans = None
            with self._lock:
                self.parse_failures[path] = f"{e.__class__.__name__}: {e}"

        if spans is not None:
            spans = [s for s in spans if s.name.startswith(self.entry_prefix)]

        with self._lock:
            self._spans[path] = spans
        return spans

    def _extract(self, path: str) -> list[FunctionSpan]:
        language = detect_language(path)

        if self._parser.is_language_supported(language):
            # Raw bytes so span offsets index the file as stored on disk
            try:
                code = Path(path).read_bytes()
            except OSError as e:
                raise ParsingError(Path(path), language, str(e)) from e
            tree = self._parser.parse(code, language)
            errors = self._parser.error_locations(tree)
            if errors:
                row, col = errors[0]
                raise ParsingError(Path(path), language, f"syntax error at line {row}, column {col}")
            return self._parser.top_level_functions(tree, code, language)

        if self._fallback.supports(language):
            try:
                return self._fallback.function_spans(self.read_text(path), language)
            except UnbalancedSourceError as e:
                raise ParsingError(Path(path), language, str(e)) from e

        raise ParsingError(Path(path), language, "no parser for this language")
