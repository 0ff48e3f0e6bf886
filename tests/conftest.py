"""Shared test fixtures for Suite Insight tests."""

from pathlib import Path
from types import SimpleNamespace
from typing import Optional

import pytest

from suite_insight.config import AnalysisConfig
from suite_insight.health.cluster import NodeInfo, PodInfo


def pytest_addoption(parser):
    """Add --run-slow option for slow tests."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="run slow tests",
    )


def pytest_configure(config):
    """Configure slow marker."""
    config.addinivalue_line("markers", "slow: mark test as slow to run")


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless --run-slow is given."""
    if config.getoption("--run-slow"):
        return
    skip_slow = pytest.mark.skip(reason="need --run-slow option to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


# ── Document builders ──────────────────────────────────────────────────


def requirement_line(number: str, subject: str = "a policy is created") -> str:
    return f"{number}. WHEN {subject} THEN THE controller SHALL reconcile it"


def property_block(number: int, title: str = "Bounds are respected") -> str:
    return (
        f"Property {number}: {title}\n"
        f"*For any* workload and policy, the recommendation stays within bounds\n"
        f"**Validates: Requirements {number}.1**\n"
    )


def go_test_file(*functions: str, package: str = "e2e") -> str:
    return f"package {package}\n\n" + "\n\n".join(functions) + "\n"


def go_func(name: str, body: str = "") -> str:
    return f"func {name}(t *testing.T) {{\n\t// {body}\n}}"


@pytest.fixture
def write_file(tmp_path):
    """Write ``content`` to ``tmp_path / relpath`` and return the path."""

    def _write(relpath: str, content: str) -> Path:
        path = tmp_path / relpath
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def make_config(tmp_path):
    """Config rooted at ``tmp_path`` with documents and test dir inside it."""

    def _make(**overrides) -> AnalysisConfig:
        values = dict(
            requirements_file=str(tmp_path / "requirements.md"),
            design_file=str(tmp_path / "design.md"),
            test_dir=str(tmp_path / "test" / "e2e"),
            cluster_probes=False,
        )
        values.update(overrides)
        return AnalysisConfig(**values)

    return _make


@pytest.fixture
def suite(tmp_path, write_file, make_config):
    """Writes a requirements doc, a design doc and test files; returns a config."""

    def _suite(
        requirements: list[str],
        properties: list[str],
        tests: dict[str, str],
        **overrides,
    ) -> AnalysisConfig:
        write_file("requirements.md", "# Requirements\n\n" + "\n".join(requirements) + "\n")
        write_file("design.md", "# Design\n\n" + "\n".join(properties) + "\n")
        (tmp_path / "test" / "e2e").mkdir(parents=True, exist_ok=True)
        for relpath, content in tests.items():
            write_file(f"test/e2e/{relpath}", content)
        return make_config(**overrides)

    return _suite


# ── Cluster fakes ──────────────────────────────────────────────────────


class FakeClusterClient:
    """In-memory ClusterClient. Set ``fail`` to make every call raise."""

    def __init__(
        self,
        nodes: Optional[list[NodeInfo]] = None,
        pods: Optional[dict[str, list[PodInfo]]] = None,
        namespaces: Optional[set[str]] = None,
        crds: Optional[set[str]] = None,
        fail: Optional[Exception] = None,
    ):
        self.nodes = nodes if nodes is not None else []
        self.pods = pods or {}
        self.namespaces = namespaces or set()
        self.crds = crds or set()
        self.fail = fail

    def _check(self):
        if self.fail is not None:
            raise self.fail

    def list_nodes(self):
        self._check()
        return list(self.nodes)

    def list_pods(self, namespace, label_selector):
        self._check()
        component = label_selector.split("=", 1)[-1]
        return list(self.pods.get(component, []))

    def namespace_exists(self, name):
        self._check()
        return name in self.namespaces

    def crd_exists(self, name):
        self._check()
        return name in self.crds


@pytest.fixture
def healthy_cluster():
    """A cluster with one roomy node and every default dependency in place."""
    return FakeClusterClient(
        nodes=[NodeInfo("node-1", allocatable_cpu_millis=4000, allocatable_memory_bytes=8 * 1024**3)],
        pods={
            "cert-manager": [PodInfo("cert-manager-0", ready=True)],
            "metrics-server": [PodInfo("metrics-server-0", ready=True)],
        },
        namespaces={"optipod-system"},
        crds={"optimizationpolicies.optipod.io"},
    )


@pytest.fixture
def fake_cluster():
    """The FakeClusterClient class, for tests that build their own cluster."""
    return FakeClusterClient


@pytest.fixture
def build():
    """Document and Go source builders."""
    return SimpleNamespace(
        requirement=requirement_line,
        property=property_block,
        go_file=go_test_file,
        go_func=go_func,
    )
