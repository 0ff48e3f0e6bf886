"""Data models shared by the coverage and health halves of the engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


# ── Document records ───────────────────────────────────────────────────


@dataclass(frozen=True)
class Requirement:
    """One normative WHEN/THE/SHALL acceptance criterion.

    ``id`` is the leading dotted-numeric prefix ("1", "2.3") or ``""`` when
    the line carries none; such a requirement is never correlated.
    """

    id: str
    text: str


@dataclass(frozen=True)
class Property:
    """One correctness property ("Property <n>: ... *For any* ...")."""

    id: str
    text: str


# ── Coverage ───────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Evidence:
    """A test file (and optionally the test function) exercising an item."""

    source_file: str
    test_function: Optional[str] = None


@dataclass
class RequirementCoverage:
    requirement: Requirement
    evidence: list[Evidence] = field(default_factory=list)

    @property
    def id(self) -> str:
        return self.requirement.id

    @property
    def covered(self) -> bool:
        return len(self.evidence) > 0


@dataclass
class PropertyCoverage:
    property: Property
    evidence: Optional[Evidence] = None

    @property
    def id(self) -> str:
        return self.property.id

    @property
    def implemented(self) -> bool:
        return self.evidence is not None


@dataclass
class CoverageReport:
    """Coverage verdicts for one run plus the derived summary."""

    requirements: list[RequirementCoverage] = field(default_factory=list)
    properties: list[PropertyCoverage] = field(default_factory=list)
    test_files: list[str] = field(default_factory=list)
    coverage_percent: float = 0.0
    missing_coverage: list[str] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)

    @property
    def uncovered_requirements(self) -> list[RequirementCoverage]:
        return [r for r in self.requirements if not r.covered]

    @property
    def unimplemented_properties(self) -> list[PropertyCoverage]:
        return [p for p in self.properties if not p.implemented]


# ── Health ─────────────────────────────────────────────────────────────


class HealthStatus(str, Enum):
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"

    def __str__(self) -> str:
        return self.value


class IssueSeverity(str, Enum):
    CRITICAL = "critical"
    MAJOR = "major"
    MINOR = "minor"
    INFO = "info"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class HealthCheckResult:
    """Verdict for one probed component."""

    component: str
    status: HealthStatus
    detail: str = ""


@dataclass(frozen=True)
class ValidationIssue:
    """A problem discovered by a probe."""

    severity: IssueSeverity
    component: str
    description: str
    impact: str = ""
    suggestion: str = ""


def _clamp(value: float) -> float:
    return min(max(float(value), 0.0), 1.0)


@dataclass(frozen=True)
class QualityMetrics:
    """Six normalized test-suite scores, each clamped to [0, 1]."""

    test_coverage: float = 0.0
    property_coverage: float = 0.0
    helper_utilization: float = 0.0
    cleanup_effectiveness: float = 0.0
    execution_stability: float = 0.0
    performance_score: float = 0.0

    def __post_init__(self) -> None:
        for name in self.__dataclass_fields__:
            object.__setattr__(self, name, _clamp(getattr(self, name)))

    def as_dict(self) -> dict[str, float]:
        return {name: getattr(self, name) for name in self.__dataclass_fields__}


# ── Report ─────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Report:
    """Immutable snapshot of one analysis run.

    Built once by :class:`~suite_insight.engine.SuiteAnalyzer`, rendered by a
    formatter, then discarded.
    """

    overall_health: HealthStatus
    component_health: dict[str, HealthStatus]
    quality_metrics: QualityMetrics
    issues: tuple[ValidationIssue, ...] = ()
    recommendations: tuple[str, ...] = ()
    coverage: Optional[CoverageReport] = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
