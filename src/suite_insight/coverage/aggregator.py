"""Coverage Aggregator: percentage, missing coverage and first-pass advice."""

from __future__ import annotations

from typing import Sequence

from ..config import DEFAULT_THRESHOLDS, ThresholdConfig
from ..models import PropertyCoverage, RequirementCoverage


def coverage_percent(
    requirements: Sequence[RequirementCoverage], properties: Sequence[PropertyCoverage]
) -> float:
    """Share of covered requirements and implemented properties, 0-100.

    Zero items is a valid input and yields 0.0.
    """
    total = len(requirements) + len(properties)
    if total == 0:
        return 0.0
    covered = sum(1 for r in requirements if r.covered) + sum(1 for p in properties if p.implemented)
    return covered / total * 100


def missing_coverage(
    requirements: Sequence[RequirementCoverage], properties: Sequence[PropertyCoverage]
) -> list[str]:
    missing = [
        f"Requirement {r.id}: {r.requirement.text}" for r in requirements if not r.covered
    ]
    missing.extend(
        f"Property {p.id}: {p.property.text}" for p in properties if not p.implemented
    )
    return missing


def coverage_recommendations(
    requirements: Sequence[RequirementCoverage],
    properties: Sequence[PropertyCoverage],
    test_file_count: int,
    thresholds: ThresholdConfig = DEFAULT_THRESHOLDS,
) -> list[str]:
    recommendations: list[str] = []

    percent = coverage_percent(requirements, properties)
    if percent < thresholds.coverage_target_percent:
        recommendations.append(
            f"Overall test coverage is below {thresholds.coverage_target_percent:g}%. "
            "Consider adding more comprehensive tests."
        )

    uncovered = sum(1 for r in requirements if not r.covered)
    if uncovered > 0:
        recommendations.append(
            f"{uncovered} requirements lack test coverage. "
            "Add tests that reference these requirements."
        )

    unimplemented = sum(1 for p in properties if not p.implemented)
    if unimplemented > 0:
        recommendations.append(
            f"{unimplemented} correctness properties are not implemented as tests. "
            "Add property-based tests for these."
        )

    if test_file_count < thresholds.min_test_files:
        recommendations.append(
            "Consider organizing tests into more focused test files for better maintainability."
        )

    return recommendations
