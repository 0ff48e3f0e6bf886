"""Integration tests for SuiteAnalyzer and the public analyze() entry point."""

import threading
from dataclasses import replace

import pytest

from suite_insight import analyze
from suite_insight.engine import SuiteAnalyzer
from suite_insight.exceptions import AnalysisCancelledError, ConfigurationError, DocumentReadError
from suite_insight.health.cluster import KubernetesClusterClient
from suite_insight.models import HealthStatus, IssueSeverity

HELPER_BODY = "package helpers\n\n" + "// shared helper functions for e2e scenarios\n" * 5


@pytest.fixture
def complete_suite(suite, build, write_file):
    """A well-formed suite: every structure file present, full coverage."""
    tests = {
        "e2e_suite_test.go": build.go_file(build.go_func("TestE2E", "Requirement 1")),
        "e2e_test.go": build.go_file(build.go_func("TestPolicy", "Requirement 2")),
        "bounds_test.go": build.go_file(build.go_func("TestBounds", "Property 1: bounds")),
        "helpers/policy_helpers.go": HELPER_BODY,
        "helpers/workload_helpers.go": HELPER_BODY,
        "helpers/validation_helpers.go": HELPER_BODY,
        "helpers/cleanup_helpers.go": HELPER_BODY,
        "fixtures/generators.go": "package fixtures\n",
        "parallel_config.go": "package e2e\n",
    }
    for doc in ("README.md", "TESTING_GUIDE.md", "TROUBLESHOOTING.md", "DEVELOPER_ONBOARDING.md"):
        tests[doc] = "# doc\n"
    return suite(
        requirements=[build.requirement("1"), build.requirement("2")],
        properties=[build.property(1)],
        tests=tests,
    )


class TestAnalyze:
    def test_offline_report(self, complete_suite):
        report = SuiteAnalyzer(complete_suite).analyze()

        assert report.coverage is not None
        assert report.coverage.coverage_percent == 100.0
        assert report.overall_health == HealthStatus.HEALTHY
        assert "cluster-connectivity" not in report.component_health
        assert report.component_health["test-structure"] == HealthStatus.HEALTHY

    def test_coverage_recommendations_are_merged(self, complete_suite):
        report = SuiteAnalyzer(complete_suite).analyze()
        # three test files is below the eight-file organizational threshold
        assert any("organizing tests" in r for r in report.recommendations)
        assert report.recommendations[0].startswith("Test suite is healthy")

    def test_with_healthy_cluster(self, complete_suite, healthy_cluster):
        config = replace(complete_suite, cluster_probes=True)
        report = SuiteAnalyzer(config, cluster_client=healthy_cluster).analyze()
        assert report.component_health["cluster-connectivity"] == HealthStatus.HEALTHY
        assert report.component_health["cert-manager"] == HealthStatus.HEALTHY
        assert report.overall_health == HealthStatus.HEALTHY

    def test_unreachable_cluster_is_unhealthy(self, complete_suite, fake_cluster):
        config = replace(complete_suite, cluster_probes=True)
        cluster = fake_cluster(fail=ConnectionError("connection refused"))
        report = SuiteAnalyzer(config, cluster_client=cluster).analyze()

        assert report.overall_health == HealthStatus.UNHEALTHY
        critical = [i for i in report.issues if i.severity == IssueSeverity.CRITICAL]
        assert critical[0].component == "cluster-connectivity"
        assert "Fix cluster-connectivity: Check KUBECONFIG and cluster status" in report.recommendations

    def test_missing_kubeconfig_is_unhealthy(self, complete_suite, monkeypatch):
        def no_config(*args, **kwargs):
            raise ConfigurationError("No usable Kubernetes configuration")

        monkeypatch.setattr(KubernetesClusterClient, "from_kubeconfig", classmethod(no_config))
        config = replace(complete_suite, cluster_probes=True)
        report = SuiteAnalyzer(config).analyze()
        assert report.component_health["cluster-connectivity"] == HealthStatus.UNHEALTHY

    def test_missing_document_is_fatal(self, complete_suite, tmp_path):
        (tmp_path / "design.md").unlink()
        with pytest.raises(DocumentReadError):
            SuiteAnalyzer(complete_suite).analyze()

    def test_cancelled_before_start(self, complete_suite):
        cancel = threading.Event()
        cancel.set()
        with pytest.raises(AnalysisCancelledError):
            SuiteAnalyzer(complete_suite).analyze(cancel=cancel)

    def test_analyze_health_without_coverage(self, complete_suite):
        report = SuiteAnalyzer(complete_suite).analyze_health()
        assert report.coverage is None
        assert report.quality_metrics.helper_utilization == 0.8


class TestPublicApi:
    def test_analyze_with_overrides(self, complete_suite):
        report = analyze(
            requirements_file=complete_suite.requirements_file,
            design_file=complete_suite.design_file,
            test_dir=complete_suite.test_dir,
            cluster_probes=False,
        )
        assert report.coverage.coverage_percent == 100.0
