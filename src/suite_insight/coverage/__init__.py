"""Requirement/property coverage: correlation and aggregation."""

from .aggregator import coverage_percent, coverage_recommendations, missing_coverage
from .correlator import (
    CoverageCorrelator,
    PropertyEvidencePolicy,
    RequirementEvidencePolicy,
)
from .validator import CoverageValidator

__all__ = [
    "CoverageCorrelator",
    "CoverageValidator",
    "PropertyEvidencePolicy",
    "RequirementEvidencePolicy",
    "coverage_percent",
    "coverage_recommendations",
    "missing_coverage",
]
