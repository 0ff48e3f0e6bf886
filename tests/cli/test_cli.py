"""Tests for the suite-insight command line."""

import json

import pytest
from typer.testing import CliRunner

from suite_insight import __version__
from suite_insight.cli import app

HELPER_BODY = "package helpers\n\n" + "// shared helper functions for e2e scenarios\n" * 5


@pytest.fixture
def runner(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return CliRunner()


@pytest.fixture
def partial_suite(suite, build):
    """Two requirements and two properties, half of each covered, no helpers."""
    return suite(
        requirements=[build.requirement("1"), build.requirement("2")],
        properties=[build.property(1), build.property(2)],
        tests={
            "policy_test.go": build.go_file(build.go_func("TestPolicy", "Requirement 1")),
            "bounds_test.go": build.go_file(build.go_func("TestBounds", "Property 1")),
        },
    )


@pytest.fixture
def healthy_suite(suite, build):
    tests = {
        "e2e_suite_test.go": build.go_file(build.go_func("TestE2E", "Requirement 1")),
        "e2e_test.go": build.go_file(build.go_func("TestPolicy", "Property 1")),
        "fixtures/generators.go": "package fixtures\n",
    }
    for name in ("policy", "workload", "validation", "cleanup"):
        tests[f"helpers/{name}_helpers.go"] = HELPER_BODY
    for doc in ("README.md", "TESTING_GUIDE.md", "TROUBLESHOOTING.md", "DEVELOPER_ONBOARDING.md"):
        tests[doc] = "# doc\n"
    return suite(
        requirements=[build.requirement("1")],
        properties=[build.property(1)],
        tests=tests,
    )


def _paths(config):
    return ["-r", config.requirements_file, "-d", config.design_file, "-t", config.test_dir]


class TestGlobalOptions:
    def test_version(self, runner):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help_lists_commands(self, runner):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        for command in ("coverage", "health", "report", "check-logs"):
            assert command in result.output


class TestCoverageCommand:
    def test_text_output(self, runner, partial_suite):
        result = runner.invoke(app, ["coverage", *_paths(partial_suite), "-f", "text"])
        assert result.exit_code == 0
        assert "=== E2E Test Coverage Report ===" in result.output
        assert "Overall Coverage: 50.0%" in result.output

    def test_json_output(self, runner, partial_suite):
        result = runner.invoke(app, ["coverage", *_paths(partial_suite), "-f", "json"])
        assert result.exit_code == 0
        assert '"coverage_percent": 50.0' in result.output

    def test_fail_under(self, runner, partial_suite):
        result = runner.invoke(
            app, ["coverage", *_paths(partial_suite), "-f", "text", "--fail-under", "80"]
        )
        assert result.exit_code == 1
        assert "below 80%" in result.output

    def test_missing_document(self, runner, tmp_path):
        result = runner.invoke(app, ["coverage", "-r", str(tmp_path / "nope.md")])
        assert result.exit_code == 1
        assert "Error:" in result.output
        assert "Cannot read requirements document" in result.output


class TestHealthCommand:
    def test_healthy_offline(self, runner, healthy_suite):
        result = runner.invoke(
            app, ["health", "--offline", "-t", healthy_suite.test_dir, "-f", "text"]
        )
        assert result.exit_code == 0
        assert "=== Test Suite Validation Report ===" in result.output
        assert "Overall Health: " in result.output

    def test_unhealthy_exits_one(self, runner, partial_suite):
        result = runner.invoke(
            app, ["health", "--offline", "-t", partial_suite.test_dir, "-f", "text"]
        )
        assert result.exit_code == 1
        assert "Overall Health: unhealthy" in result.output


class TestReportCommand:
    def test_full_report_text(self, runner, healthy_suite):
        result = runner.invoke(app, ["report", "--offline", *_paths(healthy_suite), "-f", "text"])
        assert result.exit_code == 0
        assert "E2E Test Coverage Report" in result.output
        assert "Test Suite Validation Report" in result.output

    def test_fail_under(self, runner, healthy_suite, write_file):
        write_file("requirements.md", "1. WHEN a THE b SHALL c\n9. WHEN x THE y SHALL z\n")
        result = runner.invoke(
            app,
            ["report", "--offline", *_paths(healthy_suite), "-f", "text", "--fail-under", "90"],
        )
        assert result.exit_code == 1

    def test_config_file(self, runner, healthy_suite, tmp_path):
        config_file = tmp_path / "custom.toml"
        config_file.write_text(
            f'requirements_file = "{healthy_suite.requirements_file}"\n'
            f'design_file = "{healthy_suite.design_file}"\n'
            f'test_dir = "{healthy_suite.test_dir}"\n'
            "cluster_probes = false\n"
        )
        result = runner.invoke(app, ["-c", str(config_file), "report", "-f", "json"])
        assert result.exit_code == 0
        start = result.output.index("{")
        data = json.loads(result.output[start:])
        assert data["coverage"]["coverage_percent"] == 100.0


class TestCheckLogsCommand:
    LOG = "2024-05-01T12:00:00Z INFO Reconciling OptimizationPolicy\n"

    def test_clean_log(self, runner, write_file):
        path = write_file("controller.log", self.LOG)
        result = runner.invoke(app, ["check-logs", str(path), "-e", "Reconciling"])
        assert result.exit_code == 0
        assert "OK" in result.output

    def test_missing_expected_pattern(self, runner, write_file):
        path = write_file("controller.log", self.LOG)
        result = runner.invoke(app, ["check-logs", str(path), "-e", "Deleted"])
        assert result.exit_code == 1
        assert "Expected pattern not found: Deleted" in result.output

    def test_leaked_password(self, runner, write_file):
        path = write_file("controller.log", self.LOG + "2024-05-01T12:00:01Z DEBUG password=hunter2\n")
        result = runner.invoke(app, ["check-logs", str(path)])
        assert result.exit_code == 1
        assert "Sensitive information" in result.output

    def test_strict_shape(self, runner, write_file):
        path = write_file("metrics.txt", "optipod_up 1\nnot a sample\n")
        relaxed = runner.invoke(app, ["check-logs", str(path), "--metrics"])
        strict = runner.invoke(app, ["check-logs", str(path), "--metrics", "--strict"])
        assert relaxed.exit_code == 0
        assert "1 lines do not look like metric lines" in relaxed.output
        assert strict.exit_code == 1
