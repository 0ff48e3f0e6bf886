"""Health Aggregator: one verdict and a merged recommendation list."""

from __future__ import annotations

from typing import Mapping, Optional, Sequence

from ..config import DEFAULT_THRESHOLDS, ThresholdConfig
from ..models import (
    CoverageReport,
    HealthStatus,
    IssueSeverity,
    QualityMetrics,
    ValidationIssue,
)

HEADLINES = {
    HealthStatus.UNHEALTHY: "Address critical issues immediately before running tests",
    HealthStatus.DEGRADED: "Resolve major issues to improve test reliability",
    HealthStatus.HEALTHY: "Test suite is healthy - consider optimizations for better performance",
}


def overall_health(
    component_health: Mapping[str, HealthStatus],
    issues: Sequence[ValidationIssue],
    thresholds: ThresholdConfig = DEFAULT_THRESHOLDS,
) -> HealthStatus:
    """Severity-weighted verdict over all probe results.

    Any critical issue, or at least ``unhealthy_fraction`` of components
    unhealthy, is unhealthy. Otherwise at least ``degraded_fraction``
    degraded components or ``major_issue_limit`` major issues is degraded.
    """
    if any(issue.severity == IssueSeverity.CRITICAL for issue in issues):
        return HealthStatus.UNHEALTHY

    total = len(component_health)
    unhealthy = sum(1 for s in component_health.values() if s == HealthStatus.UNHEALTHY)
    degraded = sum(1 for s in component_health.values() if s == HealthStatus.DEGRADED)
    majors = sum(1 for issue in issues if issue.severity == IssueSeverity.MAJOR)

    unhealthy_fraction = unhealthy / total if total else 0.0
    degraded_fraction = degraded / total if total else 0.0

    if unhealthy_fraction >= thresholds.unhealthy_fraction:
        return HealthStatus.UNHEALTHY
    if degraded_fraction >= thresholds.degraded_fraction or majors >= thresholds.major_issue_limit:
        return HealthStatus.DEGRADED
    return HealthStatus.HEALTHY


def health_recommendations(
    verdict: HealthStatus,
    component_health: Mapping[str, HealthStatus],
    metrics: QualityMetrics,
    issues: Sequence[ValidationIssue],
    coverage: Optional[CoverageReport] = None,
    thresholds: ThresholdConfig = DEFAULT_THRESHOLDS,
) -> list[str]:
    """Ordered, de-duplicated remediation advice.

    Headline for the verdict first, then coverage advice, metric advice,
    per-issue fixes and finally per-component fixes.
    """
    candidates = [HEADLINES[verdict]]

    if coverage is not None:
        candidates.extend(coverage.recommendations)

    target = thresholds.metric_target
    if metrics.test_coverage < target:
        candidates.append("Increase test coverage by adding more test cases")
    if metrics.property_coverage < target:
        candidates.append("Add more property-based tests to raise property coverage")
    if metrics.performance_score < target:
        candidates.append("Optimize test performance with parallel execution and caching")

    for issue in issues:
        if issue.severity in (IssueSeverity.CRITICAL, IssueSeverity.MAJOR) and issue.suggestion:
            candidates.append(f"Fix {issue.component}: {issue.suggestion}")

    for component in sorted(component_health):
        if component_health[component] == HealthStatus.UNHEALTHY:
            candidates.append(f"Fix {component} component issues")

    # dict preserves first-seen order
    return list(dict.fromkeys(candidates))
