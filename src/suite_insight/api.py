"""Public API for Suite Insight.

Example:
    >>> from suite_insight import analyze
    >>>
    >>> report = analyze(test_dir="test/e2e", cluster_probes=False)
    >>> print(report.overall_health)
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Optional

from .config import load_config
from .engine import SuiteAnalyzer
from .health import ClusterClient
from .logging_config import get_logger
from .models import Report

logger = get_logger(__name__)


def analyze(
    config_file: Optional[Path] = None,
    cluster_client: Optional[ClusterClient] = None,
    deadline: Optional[float] = None,
    cancel: Optional[threading.Event] = None,
    **overrides,
) -> Report:
    """Run coverage validation and health probes and return the report.

    Args:
        config_file: Optional explicit config file path
        cluster_client: Cluster access to use instead of kubeconfig
        deadline: Seconds allowed for the health probes
        cancel: Event that aborts the run when set
        **overrides: Configuration overrides (e.g. ``test_dir="e2e"``)

    Raises:
        SuiteInsightError: If configuration is invalid or the run fails
    """
    config = load_config(config_file=config_file, **overrides)
    logger.debug(f"Analyzing {config.test_dir} with {config.requirements_file} and {config.design_file}")
    return SuiteAnalyzer(config, cluster_client=cluster_client).analyze(deadline=deadline, cancel=cancel)
