"""Plain, deterministic line-oriented rendering of a report.

Component health is listed in name order and every other section in the
order the engine produced it, so equal reports render to equal text.
"""

from __future__ import annotations

from ..models import CoverageReport, HealthStatus, IssueSeverity, Report
from .base import BaseFormatter

STATUS_MARKS = {
    HealthStatus.HEALTHY: "✅",
    HealthStatus.DEGRADED: "⚠️",
    HealthStatus.UNHEALTHY: "❌",
}

SEVERITY_MARKS = {
    IssueSeverity.CRITICAL: "🔴",
    IssueSeverity.MAJOR: "🟠",
    IssueSeverity.MINOR: "🟡",
    IssueSeverity.INFO: "ℹ️",
}

METRIC_LABELS = (
    ("test_coverage", "Test Coverage"),
    ("property_coverage", "Property Coverage"),
    ("helper_utilization", "Helper Utilization"),
    ("cleanup_effectiveness", "Cleanup Effectiveness"),
    ("execution_stability", "Execution Stability"),
    ("performance_score", "Performance Score"),
)


def _mark(ok: bool) -> str:
    return "✅" if ok else "❌"


def format_coverage(coverage: CoverageReport) -> list[str]:
    lines = ["=== E2E Test Coverage Report ===", ""]
    lines.append(f"Overall Coverage: {coverage.coverage_percent:.1f}%")
    lines.append("")

    lines.append(f"Requirements Coverage ({len(coverage.requirements)} total):")
    for req in coverage.requirements:
        lines.append(
            f"  {_mark(req.covered)} Requirement {req.id}: {len(req.evidence)} test files"
        )

    lines.append("")
    lines.append(f"Properties Coverage ({len(coverage.properties)} total):")
    for prop in coverage.properties:
        if prop.evidence is None:
            where = ""
        elif prop.evidence.test_function:
            where = f"{prop.evidence.source_file} ({prop.evidence.test_function})"
        else:
            where = prop.evidence.source_file
        lines.append(f"  {_mark(prop.implemented)} Property {prop.id}: {where}".rstrip())

    if coverage.missing_coverage:
        lines.append("")
        lines.append("Missing Coverage:")
        lines.extend(f"  - {missing}" for missing in coverage.missing_coverage)

    if coverage.recommendations:
        lines.append("")
        lines.append("Recommendations:")
        lines.extend(f"  - {rec}" for rec in coverage.recommendations)

    lines.append("")
    lines.append(f"Test Files ({len(coverage.test_files)} total):")
    lines.extend(f"  - {path}" for path in coverage.test_files)
    return lines


def format_health(report: Report) -> list[str]:
    lines = ["=== Test Suite Validation Report ==="]
    lines.append(f"Timestamp: {report.timestamp.isoformat(timespec='seconds')}")
    lines.append(f"Overall Health: {report.overall_health}")
    lines.append("")

    lines.append("Component Health:")
    for component in sorted(report.component_health):
        status = report.component_health[component]
        lines.append(f"  {STATUS_MARKS[status]} {component}: {status}")

    lines.append("")
    lines.append("Quality Metrics:")
    for field_name, label in METRIC_LABELS:
        value = getattr(report.quality_metrics, field_name)
        lines.append(f"  {label}: {value * 100:.1f}%")

    if report.issues:
        lines.append("")
        lines.append("Issues Found:")
        for i, issue in enumerate(report.issues, start=1):
            lines.append(
                f"  {i}. {SEVERITY_MARKS[issue.severity]} [{issue.component}] {issue.description}"
            )
            lines.append(f"     Impact: {issue.impact}")
            lines.append(f"     Suggestion: {issue.suggestion}")

    if report.recommendations:
        lines.append("")
        lines.append("Recommendations:")
        for i, rec in enumerate(report.recommendations, start=1):
            lines.append(f"  {i}. {rec}")

    lines.append("")
    lines.append("=== End of Report ===")
    return lines


class TextFormatter(BaseFormatter):
    """Plain text for logs, CI output and files."""

    def format(self, report: Report) -> str:
        lines: list[str] = []
        if report.coverage is not None:
            lines.extend(format_coverage(report.coverage))
            lines.append("")
        lines.extend(format_health(report))
        return "\n".join(lines) + "\n"

    def format_coverage(self, coverage: CoverageReport) -> str:
        return "\n".join(format_coverage(coverage)) + "\n"
