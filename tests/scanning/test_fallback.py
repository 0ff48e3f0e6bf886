"""Tests for the regex fallback symbol index."""

import pytest

from suite_insight.scanning.fallback import RegexSymbolIndex, UnbalancedSourceError
from suite_insight.scanning.languages import detect_language


class TestDetectLanguage:
    @pytest.mark.parametrize(
        "path,language",
        [
            ("a/b/policy_test.go", "go"),
            ("test_policy.py", "python"),
            ("policy.test.ts", "typescript"),
            ("policy.spec.JS", "javascript"),
            ("lib.rs", "rust"),
            ("Suite.kt", "kotlin"),
            ("README.md", "unknown"),
        ],
    )
    def test_extension_mapping(self, path, language):
        assert detect_language(path) == language


class TestRegexSymbolIndex:
    """Brace-delimited languages without a bundled grammar."""

    def test_supports_fallback_languages_only(self):
        index = RegexSymbolIndex()
        assert index.supports("javascript")
        assert not index.supports("go")

    def test_javascript_functions(self):
        code = (
            "export async function TestScale() {\n"
            "  if (x) { y(); }\n"
            "}\n"
            "function helper() { return {a: 1}; }\n"
        )
        spans = RegexSymbolIndex().function_spans(code, "javascript")
        assert [s.name for s in spans] == ["TestScale", "helper"]
        assert spans[0].text.endswith("}")
        assert "helper" not in spans[0].text

    def test_rust_functions(self):
        code = "pub fn test_bounds() {\n    assert!(true);\n}\n\nfn other() {}\n"
        spans = RegexSymbolIndex().function_spans(code, "rust")
        assert [s.name for s in spans] == ["test_bounds", "other"]

    def test_offsets_are_character_offsets(self):
        code = "// é\nfunction TestA() { }\n"
        span = RegexSymbolIndex().function_spans(code, "javascript")[0]
        assert code[span.start:span.end] == span.text

    def test_indented_functions_are_not_top_level(self):
        code = "class A {\n  function inner() {}\n}\n"
        assert RegexSymbolIndex().function_spans(code, "javascript") == []

    def test_unclosed_body_raises(self):
        with pytest.raises(UnbalancedSourceError):
            RegexSymbolIndex().function_spans("function TestA() {\n  if (x) {\n}\n", "javascript")
