"""JSON formatter for Suite Insight."""

import json
from dataclasses import asdict
from enum import Enum

from ..models import CoverageReport, Report
from .base import BaseFormatter


def _default(value):
    if isinstance(value, Enum):
        return value.value
    if hasattr(value, "isoformat"):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _coverage_dict(coverage: CoverageReport) -> dict:
    data = asdict(coverage)
    data["covered_requirements"] = len(coverage.requirements) - len(coverage.uncovered_requirements)
    data["implemented_properties"] = len(coverage.properties) - len(coverage.unimplemented_properties)
    return data


class JsonFormatter(BaseFormatter):
    """Render reports as JSON."""

    def format(self, report: Report) -> str:
        data = asdict(report)
        if report.coverage is not None:
            data["coverage"] = _coverage_dict(report.coverage)
        return json.dumps(data, indent=2, default=_default) + "\n"

    def format_coverage(self, coverage: CoverageReport) -> str:
        return json.dumps(_coverage_dict(coverage), indent=2, default=_default) + "\n"
