"""SuiteAnalyzer: coverage validation and health probing for one run."""

from __future__ import annotations

import threading
from typing import Optional

from .config import AnalysisConfig
from .coverage import CoverageValidator
from .exceptions import AnalysisCancelledError, ConfigurationError
from .health import (
    ClusterClient,
    HealthCollector,
    KubernetesClusterClient,
    ProbeContext,
    ProbeRunner,
    default_probes,
    health_recommendations,
    overall_health,
)
from .logging_config import get_logger
from .models import CoverageReport, QualityMetrics, Report
from .scanning import TestArtifactIndex

logger = get_logger(__name__)


class SuiteAnalyzer:
    """Orchestrate analysis: mine -> correlate -> probe -> aggregate.

    One instance per run. The test artifact index is shared between the
    coverage and health halves so each file is read and parsed once.
    """

    def __init__(self, config: AnalysisConfig, cluster_client: Optional[ClusterClient] = None):
        self.config = config
        self.index = TestArtifactIndex(
            config.test_dir, suffix=config.test_suffix, entry_prefix=config.test_entry_prefix
        )
        self._cluster = cluster_client
        self._cluster_error = ""

    def analyze(
        self, deadline: Optional[float] = None, cancel: Optional[threading.Event] = None
    ) -> Report:
        """Run both halves and return one immutable :class:`Report`.

        Args:
            deadline: Seconds allowed for the health probes; defaults to
                ``config.probe_timeout_seconds``. Document mining and test
                file parsing are not bounded by it.
            cancel: Event that aborts the run when set. It is checked between
                coverage stages and while probes run.

        Raises:
            SuiteInsightError: Any fatal error; no partial report is returned
        """
        _check_cancelled(cancel)
        coverage = self.analyze_coverage(cancel=cancel)
        _check_cancelled(cancel)
        return self.analyze_health(deadline=deadline, cancel=cancel, coverage=coverage)

    def analyze_coverage(self, cancel: Optional[threading.Event] = None) -> CoverageReport:
        return CoverageValidator(self.config, index=self.index).validate(cancel=cancel)

    def analyze_health(
        self,
        deadline: Optional[float] = None,
        cancel: Optional[threading.Event] = None,
        coverage: Optional[CoverageReport] = None,
    ) -> Report:
        """Probe component health and aggregate it into a :class:`Report`.

        ``coverage``, when given, is attached to the report and its
        recommendations merged in.
        """
        context = ProbeContext(
            config=self.config,
            index=self.index,
            cluster=self._cluster_client(),
            cluster_error=self._cluster_error,
        )
        if deadline is None:
            deadline = self.config.probe_timeout_seconds

        probes = default_probes(self.config)
        logger.info("Running %d health probes", len(probes))
        collected = ProbeRunner(self.config.workers).run(probes, context, deadline=deadline, cancel=cancel)
        return self._build_report(collected, coverage)

    def _cluster_client(self) -> Optional[ClusterClient]:
        if self._cluster is None and self.config.cluster_probes and not self._cluster_error:
            try:
                self._cluster = KubernetesClusterClient.from_kubeconfig(
                    self.config.kubeconfig, self.config.kube_context
                )
            except ConfigurationError as e:
                logger.warning("Cluster unavailable: %s", e)
                self._cluster_error = str(e)
        return self._cluster

    def _build_report(
        self, collected: HealthCollector, coverage: Optional[CoverageReport]
    ) -> Report:
        thresholds = self.config.thresholds
        metrics = collected.metrics or QualityMetrics()
        verdict = overall_health(collected.component_health, collected.issues, thresholds)
        recommendations = health_recommendations(
            verdict,
            collected.component_health,
            metrics,
            collected.issues,
            coverage=coverage,
            thresholds=thresholds,
        )
        logger.info(
            "Overall health %s across %d components, %d issues",
            verdict, len(collected.component_health), len(collected.issues),
        )
        return Report(
            overall_health=verdict,
            component_health=dict(collected.component_health),
            quality_metrics=metrics,
            issues=tuple(collected.issues),
            recommendations=tuple(recommendations),
            coverage=coverage,
        )


def _check_cancelled(cancel: Optional[threading.Event]) -> None:
    if cancel is not None and cancel.is_set():
        raise AnalysisCancelledError()
