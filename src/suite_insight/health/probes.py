"""Component health probes.

Each probe is a plain function ``probe(context) -> ProbeOutcome``. Probes do
not read each other's results and may run in any order or concurrently; the
runner merges their outcomes.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, NamedTuple, Optional

from ..config import AnalysisConfig
from ..models import (
    HealthCheckResult,
    HealthStatus,
    IssueSeverity,
    QualityMetrics,
    ValidationIssue,
)
from ..scanning import TestArtifactIndex
from .cluster import ClusterClient

logger = logging.getLogger(__name__)

PROPERTY_TEST_MARKERS = re.compile(r"Property \d+:|DescribeTable|Entry\(|gopter|rapid\.Check")
_SNAKE_CASE_STEM = re.compile(r"^[a-z0-9]+(?:_[a-z0-9]+)*$")


@dataclass
class ProbeContext:
    """Everything a probe may look at during one run.

    Attributes:
        config: Run configuration
        index: Shared test artifact index
        cluster: Cluster client, or None when none could be configured
        cluster_error: Why ``cluster`` is None, if it is
    """

    config: AnalysisConfig
    index: TestArtifactIndex
    cluster: Optional[ClusterClient] = None
    cluster_error: str = ""

    @property
    def test_dir(self) -> Path:
        return self.config.test_path


@dataclass
class ProbeOutcome:
    results: list[HealthCheckResult] = field(default_factory=list)
    issues: list[ValidationIssue] = field(default_factory=list)
    metrics: Optional[QualityMetrics] = None

    def record(self, component: str, status: HealthStatus, detail: str = "") -> None:
        self.results.append(HealthCheckResult(component, status, detail))

    def issue(
        self,
        severity: IssueSeverity,
        component: str,
        description: str,
        impact: str,
        suggestion: str,
    ) -> None:
        self.issues.append(ValidationIssue(severity, component, description, impact, suggestion))


class HealthProbe(NamedTuple):
    """A probe and the component name it reports under when it fails outright."""

    component: str
    check: Callable[[ProbeContext], ProbeOutcome]


# ── Cluster probes ─────────────────────────────────────────────────────


def check_cluster_connectivity(ctx: ProbeContext) -> ProbeOutcome:
    """Cheap read against the control plane: list nodes."""
    outcome = ProbeOutcome()
    component = "cluster-connectivity"

    if ctx.cluster is None:
        nodes = None
        error = ctx.cluster_error or "no cluster client configured"
    else:
        try:
            nodes = ctx.cluster.list_nodes()
            error = ""
        except Exception as e:
            nodes = None
            error = str(e)

    if nodes is None:
        logger.warning("Cluster connectivity check failed: %s", error)
        outcome.record(component, HealthStatus.UNHEALTHY, error)
        outcome.issue(
            IssueSeverity.CRITICAL,
            component,
            "Cannot connect to Kubernetes cluster",
            "Tests cannot run without cluster connectivity",
            "Check KUBECONFIG and cluster status",
        )
    elif not nodes:
        outcome.record(component, HealthStatus.DEGRADED)
        outcome.issue(
            IssueSeverity.MAJOR,
            component,
            "No nodes found in cluster",
            "Tests may fail due to lack of compute resources",
            "Ensure cluster has at least one ready node",
        )
    else:
        outcome.record(component, HealthStatus.HEALTHY, f"{len(nodes)} nodes")
    return outcome


def check_required_components(ctx: ProbeContext) -> ProbeOutcome:
    """Pods of supporting components (cert-manager, metrics-server) are running."""
    outcome = ProbeOutcome()

    for component, namespace in sorted(ctx.config.required_components.items()):
        try:
            pods = ctx.cluster.list_pods(namespace, f"app.kubernetes.io/name={component}") if ctx.cluster else []
        except Exception as e:
            logger.debug("Listing %s pods failed: %s", component, e)
            pods = []

        if not pods:
            outcome.record(component, HealthStatus.DEGRADED)
            outcome.issue(
                IssueSeverity.MINOR,
                component,
                f"{component} not found or not running",
                "Some tests may be skipped or fail",
                f"Install {component} or set skip environment variable",
            )
            continue

        ready = sum(1 for pod in pods if pod.ready)
        if ready == 0:
            outcome.record(component, HealthStatus.UNHEALTHY)
            outcome.issue(
                IssueSeverity.MAJOR,
                component,
                f"{component} pods are not ready",
                "Tests may fail due to component unavailability",
                f"Check {component} pod logs and status",
            )
        elif ready < len(pods):
            outcome.record(component, HealthStatus.DEGRADED, f"{ready}/{len(pods)} pods ready")
        else:
            outcome.record(component, HealthStatus.HEALTHY)
    return outcome


def check_resource_availability(ctx: ProbeContext) -> ProbeOutcome:
    """Expected namespaces and CRDs exist and the cluster has room to run tests.

    Never reports unhealthy: missing resources degrade the suite, they do
    not stop it.
    """
    outcome = ProbeOutcome()
    component = "resource-availability"
    thresholds = ctx.config.thresholds

    if ctx.cluster is None:
        outcome.record(component, HealthStatus.DEGRADED, "cluster unavailable")
        outcome.issue(
            IssueSeverity.MINOR,
            component,
            "Resource availability could not be checked",
            "Missing namespaces or CRDs will only surface during the test run",
            "Restore cluster connectivity and re-run the health check",
        )
        return outcome

    checks = (
        ("namespace", ctx.config.required_namespaces, True, ctx.cluster.namespace_exists),
        ("namespace", ctx.config.optional_namespaces, False, ctx.cluster.namespace_exists),
        ("CRD", ctx.config.required_crds, True, ctx.cluster.crd_exists),
        ("CRD", ctx.config.optional_crds, False, ctx.cluster.crd_exists),
    )
    for kind, names, required, exists in checks:
        missing = []
        for name in names:
            try:
                if not exists(name):
                    missing.append(name)
            except Exception as e:
                logger.debug("Lookup of %s %s failed: %s", kind, name, e)
                missing.append(name)
        if not missing:
            continue
        label = "required" if required else "optional"
        outcome.issue(
            IssueSeverity.MAJOR if required else IssueSeverity.MINOR,
            component,
            f"Missing {label} {kind}s: {', '.join(missing)}",
            "Tests that depend on them will fail" if required else "Some tests may be skipped",
            f"Install the operator manifests that provide the {kind}s",
        )

    try:
        nodes = ctx.cluster.list_nodes()
    except Exception as e:
        logger.debug("Listing nodes for capacity failed: %s", e)
        nodes = None

    if nodes is not None:
        cpu = sum(n.allocatable_cpu_millis for n in nodes)
        memory = sum(n.allocatable_memory_bytes for n in nodes)
        if cpu < thresholds.min_allocatable_cpu_millis:
            outcome.issue(
                IssueSeverity.MINOR,
                component,
                f"Low CPU availability: {cpu}m available, "
                f"{thresholds.min_allocatable_cpu_millis}m recommended",
                "Tests may run slowly or timeout",
                "Consider increasing cluster CPU resources or reducing parallel test execution",
            )
        if memory < thresholds.min_allocatable_memory_bytes:
            outcome.issue(
                IssueSeverity.MINOR,
                component,
                f"Low memory availability: {memory // (1024 * 1024)}Mi available, "
                f"{thresholds.min_allocatable_memory_bytes // (1024 * 1024)}Mi recommended",
                "Tests may fail due to memory constraints",
                "Consider increasing cluster memory or reducing test parallelism",
            )

    outcome.record(component, HealthStatus.DEGRADED if outcome.issues else HealthStatus.HEALTHY)
    return outcome


# ── Static probes ──────────────────────────────────────────────────────


def check_test_structure(ctx: ProbeContext) -> ProbeOutcome:
    """Canonical scaffolding files, documentation and file naming."""
    outcome = ProbeOutcome()
    component = "test-structure"

    missing = [f for f in ctx.config.required_files if not (ctx.test_dir / f).exists()]
    if missing:
        outcome.record(component, HealthStatus.DEGRADED)
        outcome.issue(
            IssueSeverity.MAJOR,
            component,
            f"Missing required test files: {', '.join(missing)}",
            "Test suite may not function correctly",
            "Ensure all required test files are present",
        )
    else:
        outcome.record(component, HealthStatus.HEALTHY)

    missing_docs = [f for f in ctx.config.doc_files if not (ctx.test_dir / f).exists()]
    if missing_docs:
        outcome.issue(
            IssueSeverity.MINOR,
            "documentation",
            f"Missing documentation files: {', '.join(missing_docs)}",
            "Developers may lack guidance for using the test suite",
            "Create missing documentation files",
        )

    suffix = ctx.config.test_suffix
    misnamed = [
        Path(path).name
        for path in ctx.index.files()
        if not _SNAKE_CASE_STEM.match(Path(path).name[: -len(suffix)])
    ]
    if misnamed:
        outcome.issue(
            IssueSeverity.MINOR,
            component,
            f"Test files not in snake_case: {', '.join(misnamed)}",
            "Inconsistent naming makes tests harder to find",
            f"Rename to lower_snake_case{suffix}",
        )
    return outcome


def check_helper_components(ctx: ProbeContext) -> ProbeOutcome:
    """One health entry per helper category."""
    outcome = ProbeOutcome()
    min_bytes = ctx.config.thresholds.min_helper_bytes

    for component, relpath in ctx.config.helper_files.items():
        path = ctx.test_dir / relpath
        try:
            size = path.stat().st_size
        except OSError:
            outcome.record(component, HealthStatus.UNHEALTHY)
            outcome.issue(
                IssueSeverity.MAJOR,
                component,
                f"Helper file {relpath} not found",
                "Tests may not have access to required helper functions",
                f"Create or restore {relpath}",
            )
            continue

        if size < min_bytes:
            outcome.record(component, HealthStatus.DEGRADED, f"{size} bytes")
            outcome.issue(
                IssueSeverity.MINOR,
                component,
                f"Helper file {relpath} appears to be empty or minimal",
                "Helper functionality may be incomplete",
                f"Review and enhance {relpath}",
            )
        else:
            outcome.record(component, HealthStatus.HEALTHY)
    return outcome


def compute_quality_metrics(ctx: ProbeContext) -> QualityMetrics:
    """Six quality scores from file counts and marker density in the test tree."""
    files = ctx.index.files()

    if len(files) >= 8:
        test_coverage = 0.9
    elif len(files) >= 5:
        test_coverage = 0.7
    else:
        test_coverage = 0.5

    property_files = sum(
        1
        for path in files
        if "property" in Path(path).name.lower() or PROPERTY_TEST_MARKERS.search(ctx.index.read_text(path))
    )
    if property_files >= 3:
        property_coverage = 0.8
    elif property_files >= 1:
        property_coverage = 0.6
    else:
        property_coverage = 0.3

    helper_utilization = 0.8 if (ctx.test_dir / ctx.config.helpers_dir).is_dir() else 0.3

    cleanup_file = ctx.config.helper_files.get("cleanup-helpers")
    cleanup_effectiveness = 0.9 if cleanup_file and (ctx.test_dir / cleanup_file).exists() else 0.5

    execution_stability = 0.8 if test_coverage > 0.7 and helper_utilization > 0.7 else 0.6

    performance_score = 0.8 if (ctx.test_dir / ctx.config.parallel_config_file).exists() else 0.5

    return QualityMetrics(
        test_coverage=test_coverage,
        property_coverage=property_coverage,
        helper_utilization=helper_utilization,
        cleanup_effectiveness=cleanup_effectiveness,
        execution_stability=execution_stability,
        performance_score=performance_score,
    )


def check_quality_metrics(ctx: ProbeContext) -> ProbeOutcome:
    metrics = compute_quality_metrics(ctx)
    outcome = ProbeOutcome(metrics=metrics)

    if metrics.test_coverage < 0.7:
        outcome.issue(
            IssueSeverity.MAJOR,
            "test-coverage",
            f"Low test coverage: {metrics.test_coverage * 100:.1f}%",
            "Important functionality may not be tested",
            "Add more comprehensive test cases",
        )
    if metrics.property_coverage < 0.6:
        outcome.issue(
            IssueSeverity.MINOR,
            "property-coverage",
            f"Low property-based test coverage: {metrics.property_coverage * 100:.1f}%",
            "Universal properties may not be validated",
            "Add more property-based tests",
        )

    outcome.record(
        "quality-metrics", HealthStatus.DEGRADED if outcome.issues else HealthStatus.HEALTHY
    )
    return outcome


CLUSTER_PROBES = (
    HealthProbe("cluster-connectivity", check_cluster_connectivity),
    HealthProbe("required-components", check_required_components),
    HealthProbe("resource-availability", check_resource_availability),
)

STATIC_PROBES = (
    HealthProbe("test-structure", check_test_structure),
    HealthProbe("helper-components", check_helper_components),
    HealthProbe("quality-metrics", check_quality_metrics),
)


def default_probes(config: AnalysisConfig) -> list[HealthProbe]:
    probes = list(STATIC_PROBES)
    if config.cluster_probes:
        probes = list(CLUSTER_PROBES) + probes
    return probes
