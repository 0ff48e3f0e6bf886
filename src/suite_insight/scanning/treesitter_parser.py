"""Tree-sitter parser wrapper.

Provides a unified interface for tree-sitter parsing of test sources and the
top-level function extraction the coverage correlator needs.

Usage:
    parser = TreeSitterParser()
    tree = parser.parse(code_bytes, "go")
    spans = parser.top_level_functions(tree, code_bytes, "go")
"""

from __future__ import annotations

from typing import Any, Iterator

import tree_sitter
import tree_sitter_go
import tree_sitter_python

from .models import FunctionSpan


_LANGUAGE_MODULES: dict[str, Any] = {
    "go": tree_sitter_go,
    "python": tree_sitter_python,
}

# Node types that count as top-level functions, per language.
# Go's FuncDecl covers both plain functions and methods.
_FUNCTION_NODE_TYPES: dict[str, tuple[str, ...]] = {
    "go": ("function_declaration", "method_declaration"),
    "python": ("function_definition", "decorated_definition"),
}


def get_supported_languages() -> list[str]:
    """Get list of languages with bundled grammars."""
    return list(_LANGUAGE_MODULES.keys())


class TreeSitterParser:
    """Wrapper around tree-sitter for the bundled test-source grammars."""

    def __init__(self) -> None:
        self._parsers: dict[str, tree_sitter.Parser] = {}
        self._languages: dict[str, tree_sitter.Language] = {}

        for lang_name, lang_module in _LANGUAGE_MODULES.items():
            lang_obj = tree_sitter.Language(lang_module.language())
            self._parsers[lang_name] = tree_sitter.Parser(lang_obj)
            self._languages[lang_name] = lang_obj

    def is_language_supported(self, language: str) -> bool:
        """Check if a language is supported."""
        return language in self._parsers

    def parse(self, code: bytes, language: str) -> tree_sitter.Tree | None:
        """Parse code and return syntax tree.

        Args:
            code: Source code as bytes
            language: Language name (e.g., "go")

        Returns:
            Tree object, or None if the language is not supported
        """
        parser = self._parsers.get(language)
        if parser is None:
            return None
        return parser.parse(code)

    def top_level_functions(
        self, tree: tree_sitter.Tree, code: bytes, language: str
    ) -> list[FunctionSpan]:
        """Return every top-level function of ``tree`` as a byte span.

        Nested functions and closures are not reported; only direct children
        of the root node are considered.
        """
        node_types = _FUNCTION_NODE_TYPES.get(language, ())
        spans: list[FunctionSpan] = []
        for node in tree.root_node.children:
            if node.type not in node_types:
                continue
            name = _function_name(node)
            if not name:
                continue
            spans.append(
                FunctionSpan(
                    name=name,
                    start=node.start_byte,
                    end=node.end_byte,
                    text=code[node.start_byte:node.end_byte].decode("utf-8", errors="replace"),
                )
            )
        return spans

    def error_locations(self, tree: tree_sitter.Tree) -> list[tuple[int, int]]:
        """(row, column) of each ERROR/MISSING node, 1-based rows."""
        if not tree.root_node.has_error:
            return []
        return [
            (node.start_point[0] + 1, node.start_point[1])
            for node in _walk(tree.root_node)
            if node.type == "ERROR" or node.is_missing
        ]


def _function_name(node: tree_sitter.Node) -> str:
    if node.type == "decorated_definition":
        definition = node.child_by_field_name("definition")
        if definition is None or definition.type != "function_definition":
            return ""
        node = definition
    name_node = node.child_by_field_name("name")
    if name_node is None or name_node.text is None:
        return ""
    return name_node.text.decode("utf-8", errors="replace")


def _walk(node: tree_sitter.Node) -> Iterator[tree_sitter.Node]:
    # Explicit stack: deeply nested blocks would exhaust the recursion limit
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))
