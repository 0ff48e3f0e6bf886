"""
Suite Insight - E2E Test-Suite Coverage and Health Diagnostics

Mines requirements and correctness properties from design documents,
correlates them with the tests that exercise them and folds independent
health probes into one verdict with prioritized recommendations.
"""

__version__ = "0.1.0"

from .api import analyze
from .config import AnalysisConfig, ThresholdConfig, load_config
from .engine import SuiteAnalyzer
from .models import CoverageReport, HealthStatus, IssueSeverity, Report

__all__ = [
    "analyze",  # Main entry point
    "SuiteAnalyzer",  # Advanced usage (per-half analysis)
    "AnalysisConfig",
    "ThresholdConfig",
    "load_config",
    "CoverageReport",
    "HealthStatus",
    "IssueSeverity",
    "Report",
]
