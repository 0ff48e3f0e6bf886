"""Coverage Correlator: decides which requirements and properties are exercised.

Two evidence policies, intentionally different:

* Requirements (traceability): any mention is enough. Every test file whose
  text matches ``(requirement|req).*?<id>`` is recorded as evidence.
* Properties (correctness): a single, non-stub test function is required.
  Files are scanned in order; the first top-level test function mentioning
  ``property <id>`` wins unless it carries a stub marker, in which case the
  search moves on to the next file.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, Optional

from ..models import Evidence, Property, PropertyCoverage, Requirement, RequirementCoverage
from ..scanning import TestArtifact, TestArtifactIndex

logger = logging.getLogger(__name__)

STUB_MARKER = re.compile(r"(not implemented|todo|placeholder|not.*yet)", re.IGNORECASE)


def requirement_pattern(requirement_id: str) -> re.Pattern[str]:
    return re.compile(rf"(requirement|req).*?{re.escape(requirement_id)}", re.IGNORECASE)


def property_pattern(property_id: str) -> re.Pattern[str]:
    # \b keeps "Property 1" from matching "Property 10"
    return re.compile(rf"property\s+{re.escape(property_id)}\b", re.IGNORECASE)


class RequirementEvidencePolicy:
    """All-matches policy: every referencing file is evidence."""

    def collect(self, requirement: Requirement, artifacts: Iterable[TestArtifact]) -> list[Evidence]:
        if not requirement.id:
            return []
        pattern = requirement_pattern(requirement.id)
        return [Evidence(source_file=a.path) for a in artifacts if pattern.search(a.text)]


class PropertyEvidencePolicy:
    """First-match-wins policy with stub rejection."""

    def collect(self, prop: Property, artifacts: Iterable[TestArtifact]) -> Optional[Evidence]:
        if not prop.id:
            return None
        pattern = property_pattern(prop.id)
        for artifact in artifacts:
            if not pattern.search(artifact.text):
                continue
            witness = self._witness(artifact, pattern)
            if witness is not None:
                return Evidence(source_file=artifact.path, test_function=witness)
        return None

    @staticmethod
    def _witness(artifact: TestArtifact, pattern: re.Pattern[str]) -> Optional[str]:
        """Name of the implementing test function in ``artifact``, if any.

        Only the first test function mentioning the property is considered;
        a stub marker in it disqualifies the whole file.
        """
        functions = artifact.functions
        if functions is None:
            return None
        for span in functions:
            if not pattern.search(span.text):
                continue
            if STUB_MARKER.search(span.text):
                logger.debug("%s in %s is a stub", span.name, artifact.path)
                return None
            return span.name
        return None


class CoverageCorrelator:
    """Matches mined records against a Test Artifact Index."""

    def __init__(
        self,
        index: TestArtifactIndex,
        requirement_policy: Optional[RequirementEvidencePolicy] = None,
        property_policy: Optional[PropertyEvidencePolicy] = None,
    ) -> None:
        self.index = index
        self.requirement_policy = requirement_policy or RequirementEvidencePolicy()
        self.property_policy = property_policy or PropertyEvidencePolicy()

    def correlate_requirements(self, requirements: Iterable[Requirement]) -> list[RequirementCoverage]:
        artifacts = self.index.artifacts()
        return [
            RequirementCoverage(requirement=req, evidence=self.requirement_policy.collect(req, artifacts))
            for req in requirements
        ]

    def correlate_properties(self, properties: Iterable[Property]) -> list[PropertyCoverage]:
        artifacts = self.index.artifacts()
        return [
            PropertyCoverage(property=prop, evidence=self.property_policy.collect(prop, artifacts))
            for prop in properties
        ]
