"""Document Miner: Requirement and Property records from Markdown documents."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Sequence

from ..exceptions import DocumentReadError
from ..models import Property, Requirement
from .rules import ExtractionRule, property_rules, requirement_rules

logger = logging.getLogger(__name__)


@dataclass
class MinedDocuments:
    requirements: list[Requirement] = field(default_factory=list)
    properties: list[Property] = field(default_factory=list)


class DocumentMiner:
    """Applies extraction rules to requirements and design documents.

    Records come back in document order. When several rules are configured
    for one kind, their matches are merged by offset; a span claimed by an
    earlier rule is not reported twice.
    """

    def __init__(
        self,
        requirement_rules_: Optional[Sequence[ExtractionRule]] = None,
        property_rules_: Optional[Sequence[ExtractionRule]] = None,
    ) -> None:
        self.requirement_rules = list(requirement_rules_ or requirement_rules())
        self.property_rules = list(property_rules_ or property_rules())
        # Surface bad patterns at construction, not halfway through a run
        for rule in (*self.requirement_rules, *self.property_rules):
            rule.compile()

    def mine(self, requirements_path: Path, design_path: Path) -> MinedDocuments:
        """Read both documents and extract their records.

        Raises:
            DocumentReadError: If either document cannot be read
        """
        requirements_text = _read_document(requirements_path, "requirements")
        design_text = _read_document(design_path, "design")

        mined = MinedDocuments(
            requirements=self.extract_requirements(requirements_text),
            properties=self.extract_properties(design_text),
        )
        logger.info(
            "Mined %d requirements from %s and %d properties from %s",
            len(mined.requirements), requirements_path,
            len(mined.properties), design_path,
        )
        return mined

    def extract_requirements(self, content: str) -> list[Requirement]:
        return [Requirement(id=rid, text=text) for rid, text in _apply(self.requirement_rules, content)]

    def extract_properties(self, content: str) -> list[Property]:
        return [Property(id=pid, text=text) for pid, text in _apply(self.property_rules, content)]


def _apply(rules: Sequence[ExtractionRule], content: str) -> list[tuple[str, str]]:
    seen: set[int] = set()
    hits: list[tuple[int, str, str]] = []
    for rule in rules:
        for offset, record_id, text in rule.finditer(content):
            if offset in seen:
                continue
            seen.add(offset)
            hits.append((offset, record_id, text))
    hits.sort(key=lambda hit: hit[0])
    return [(record_id, text) for _offset, record_id, text in hits]


def _read_document(path: Path, kind: str) -> str:
    try:
        return Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise DocumentReadError(Path(path), kind, str(e)) from e
