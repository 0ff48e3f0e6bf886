"""Tests for the test artifact index."""

from pathlib import Path

import pytest

from suite_insight.exceptions import InvalidPathError
from suite_insight.scanning import TestArtifactIndex


@pytest.fixture
def tree(write_file, tmp_path):
    write_file("e2e/b_test.go", "package e2e\n\nfunc TestB(t *testing.T) {}\n")
    write_file("e2e/a_test.go", "package e2e\n\nfunc TestA(t *testing.T) {}\n\nfunc helper() {}\n")
    write_file("e2e/sub/c_test.go", "package sub\n\nfunc TestC(t *testing.T) {}\n")
    write_file("e2e/vendor/v_test.go", "package v\n")
    write_file("e2e/helpers/policy_helpers.go", "package helpers\n")
    return tmp_path / "e2e"


class TestFiles:
    def test_sorted_walk_with_suffix_filter(self, tree):
        files = TestArtifactIndex(tree).files()
        assert [Path(f).relative_to(tree).as_posix() for f in files] == [
            "a_test.go",
            "b_test.go",
            "sub/c_test.go",
        ]

    def test_missing_root_raises(self, tmp_path):
        with pytest.raises(InvalidPathError):
            TestArtifactIndex(tmp_path / "missing").files()

    def test_files_returns_copy(self, tree):
        index = TestArtifactIndex(tree)
        index.files().clear()
        assert len(index.files()) == 3

    def test_custom_suffix(self, write_file, tmp_path):
        write_file("py/test_policy.py", "def test_x():\n    pass\n")
        write_file("py/conftest.py", "")
        index = TestArtifactIndex(tmp_path / "py", suffix=".py")
        assert len(index.files()) == 2


class TestFunctionSpans:
    def test_only_entry_points_are_returned(self, tree):
        index = TestArtifactIndex(tree)
        spans = index.function_spans(str(tree / "a_test.go"))
        assert [s.name for s in spans] == ["TestA"]

    def test_parse_failure_is_soft(self, write_file, tmp_path):
        write_file("e2e/broken_test.go", "package e2e\n\nfunc TestBroken(t *testing.T {\n")
        index = TestArtifactIndex(tmp_path / "e2e")
        path = str(tmp_path / "e2e" / "broken_test.go")

        assert path in index.files()
        assert index.function_spans(path) is None
        assert path in index.parse_failures
        assert "TestBroken" in index.read_text(path)

    def test_unknown_language_has_no_functions(self, write_file, tmp_path):
        write_file("docs/spec_test.txt", "Property 1")
        index = TestArtifactIndex(tmp_path / "docs", suffix="_test.txt")
        path = index.files()[0]
        assert index.function_spans(path) is None
        assert "no parser" in index.parse_failures[path]

    def test_deeply_nested_source_does_not_abort(self, write_file, tmp_path):
        """A thousand nested blocks stay within the interpreter's recursion limit."""
        pytest.importorskip("tree_sitter_go")
        depth = 1200
        body = "{" * depth + "}" * depth
        write_file(
            "e2e/nested_test.go",
            f"package e2e\n\nfunc TestA(t *testing.T) {{\n\t// Property 1\n\t{body}\n}}\n",
        )
        index = TestArtifactIndex(tmp_path / "e2e")
        path = index.files()[0]

        spans = index.function_spans(path)
        assert spans is None or [s.name for s in spans] == ["TestA"]

    def test_parser_recursion_error_is_soft(self, tree, monkeypatch):
        index = TestArtifactIndex(tree)

        def explode(*args, **kwargs):
            raise RecursionError("maximum recursion depth exceeded")

        monkeypatch.setattr(index._parser, "parse", explode)
        path = str(tree / "a_test.go")
        assert index.function_spans(path) is None
        assert index.parse_failures[path].startswith("RecursionError")

    def test_spans_are_byte_offsets_into_the_file(self, tmp_path):
        """Invalid UTF-8 ahead of a function does not shift its span."""
        pytest.importorskip("tree_sitter_go")
        path = tmp_path / "e2e" / "latin_test.go"
        path.parent.mkdir()
        raw = b"package e2e\n\n// caf\xe9 \xff\xfe\xfd\n\nfunc TestA(t *testing.T) {\n}\n"
        path.write_bytes(raw)

        [span] = TestArtifactIndex(tmp_path / "e2e").function_spans(str(path))
        assert raw[span.start : span.end] == b"func TestA(t *testing.T) {\n}"
        assert span.text == "func TestA(t *testing.T) {\n}"

    def test_results_are_cached(self, tree):
        index = TestArtifactIndex(tree)
        path = str(tree / "a_test.go")
        assert index.function_spans(path) is index.function_spans(path)


class TestReadText:
    def test_unreadable_file_reads_empty(self, tmp_path):
        index = TestArtifactIndex(tmp_path)
        assert index.read_text(str(tmp_path / "gone_test.go")) == ""

    def test_artifacts_expose_text(self, tree):
        artifacts = TestArtifactIndex(tree).artifacts()
        assert "TestA" in artifacts[0].text
