"""CoverageValidator: document mining through coverage report, in one call."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Optional

from ..config import AnalysisConfig
from ..exceptions import AnalysisCancelledError
from ..mining import DocumentMiner, property_rules, requirement_rules
from ..models import CoverageReport
from ..scanning import TestArtifactIndex
from .aggregator import coverage_percent, coverage_recommendations, missing_coverage
from .correlator import CoverageCorrelator

logger = logging.getLogger(__name__)


class CoverageValidator:
    """Builds a :class:`CoverageReport` for one configuration.

    Raises from :meth:`validate` rather than returning a partial report:
    an unreadable document or a missing test directory fails the run.
    """

    def __init__(self, config: AnalysisConfig, index: Optional[TestArtifactIndex] = None) -> None:
        self.config = config
        self.index = index or TestArtifactIndex(
            config.test_dir, suffix=config.test_suffix, entry_prefix=config.test_entry_prefix
        )
        self.miner = DocumentMiner(
            requirement_rules(config.requirement_rules),
            property_rules(config.property_rules),
        )

    def validate(self, cancel: Optional[threading.Event] = None) -> CoverageReport:
        """Mine, index, correlate and aggregate.

        ``cancel`` is checked between stages; a stage already running
        completes before the run stops.

        Raises:
            DocumentReadError: If a document cannot be read
            InvalidPathError: If the test directory does not exist
            AnalysisCancelledError: If ``cancel`` is set
        """
        mined = self.miner.mine(Path(self.config.requirements_file), Path(self.config.design_file))
        _check_cancelled(cancel)
        test_files = self.index.files()
        _check_cancelled(cancel)

        correlator = CoverageCorrelator(self.index)
        requirements = correlator.correlate_requirements(mined.requirements)
        _check_cancelled(cancel)
        properties = correlator.correlate_properties(mined.properties)

        report = CoverageReport(
            requirements=requirements,
            properties=properties,
            test_files=test_files,
            coverage_percent=coverage_percent(requirements, properties),
            missing_coverage=missing_coverage(requirements, properties),
            recommendations=coverage_recommendations(
                requirements, properties, len(test_files), self.config.thresholds
            ),
        )

        if self.index.parse_failures:
            logger.warning(
                "%d test files could not be parsed; their functions were not inspected",
                len(self.index.parse_failures),
            )
        logger.info(
            "Coverage %.1f%% over %d requirements and %d properties in %d test files",
            report.coverage_percent, len(requirements), len(properties), len(test_files),
        )
        return report


def _check_cancelled(cancel: Optional[threading.Event]) -> None:
    if cancel is not None and cancel.is_set():
        raise AnalysisCancelledError()
