"""Tests for the Suite Insight exception hierarchy."""

from pathlib import Path

import pytest

from suite_insight.exceptions import (
    AnalysisCancelledError,
    AnalysisError,
    ConfigurationError,
    DocumentReadError,
    InvalidConfigError,
    InvalidPathError,
    InvalidPatternError,
    ParsingError,
    PatternNotFoundError,
    SensitiveDataError,
    SuiteInsightError,
)


class TestHierarchy:
    """Every error is catchable as SuiteInsightError."""

    @pytest.mark.parametrize(
        "error",
        [
            DocumentReadError(Path("requirements.md"), "requirements", "missing"),
            ParsingError(Path("a_test.go"), "go", "bad syntax"),
            InvalidPatternError("(", "unbalanced"),
            PatternNotFoundError("reconcile"),
            SensitiveDataError("password", 3),
            AnalysisCancelledError(),
        ],
    )
    def test_analysis_errors(self, error):
        assert isinstance(error, AnalysisError)
        assert isinstance(error, SuiteInsightError)

    @pytest.mark.parametrize(
        "error",
        [
            InvalidPathError(Path("/nope"), "does not exist"),
            InvalidConfigError("workers", 0, "must be at least 1"),
        ],
    )
    def test_configuration_errors(self, error):
        assert isinstance(error, ConfigurationError)
        assert isinstance(error, SuiteInsightError)


class TestMessages:
    """Messages carry their details in a stable form."""

    def test_plain_message(self):
        assert str(SuiteInsightError("boom")) == "boom"

    def test_details_are_appended(self):
        error = DocumentReadError(Path("design.md"), "design", "permission denied")
        assert str(error) == (
            "Cannot read design document: design.md "
            "(filepath=design.md, kind=design, reason=permission denied)"
        )

    def test_pattern_not_found_with_source(self):
        error = PatternNotFoundError("Reconciling", source="controller.log")
        assert error.details == {"pattern": "Reconciling", "source": "controller.log"}

    def test_pattern_not_found_without_source(self):
        assert "source" not in PatternNotFoundError("Reconciling").details

    def test_sensitive_data_line(self):
        error = SensitiveDataError("password", 12)
        assert error.line_number == 12
        assert error.details["line"] == "12"

    def test_cancelled_lists_pending(self):
        error = AnalysisCancelledError(pending=["cluster-connectivity", "quality-metrics"])
        assert error.pending == ["cluster-connectivity", "quality-metrics"]
        assert "cluster-connectivity, quality-metrics" in str(error)

    def test_cancelled_without_pending(self):
        error = AnalysisCancelledError()
        assert error.pending == []
        assert error.details == {}
