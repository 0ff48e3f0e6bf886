"""Declarative extraction rules for design and requirements documents.

A rule pairs a record pattern with an id pattern. Retargeting the miner to a
new document convention means supplying new rules, not new code.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Iterator

from ..config import DEFAULT_PROPERTY_RULES, DEFAULT_REQUIREMENT_RULES, RulePair
from ..exceptions import InvalidPatternError

REQUIREMENT = "requirement"
PROPERTY = "property"


@dataclass(frozen=True)
class ExtractionRule:
    """One (pattern, id-pattern) rule for a document kind.

    Attributes:
        kind: ``"requirement"`` or ``"property"``
        pattern: Regex matching one record
        id_pattern: Regex whose first group is the record id, searched in the
            stripped record text
        flags: ``re`` flags for ``pattern``
    """

    kind: str
    pattern: str
    id_pattern: str
    flags: int = 0

    def compile(self) -> tuple[re.Pattern[str], re.Pattern[str]]:
        return _compile(self.pattern, self.flags), _compile(self.id_pattern, 0)

    def finditer(self, content: str) -> Iterator[tuple[int, str, str]]:
        """Yield ``(offset, id, text)`` for every record in ``content``."""
        pattern, id_pattern = self.compile()
        for match in pattern.finditer(content):
            text = match.group(0).strip()
            id_match = id_pattern.search(text)
            record_id = id_match.group(1) if id_match and id_match.groups() else ""
            yield match.start(), record_id, text


def _compile(pattern: str, flags: int) -> re.Pattern[str]:
    try:
        return re.compile(pattern, flags)
    except re.error as e:
        raise InvalidPatternError(pattern, str(e)) from e


def requirement_rules(pairs: Iterable[RulePair] = DEFAULT_REQUIREMENT_RULES) -> list[ExtractionRule]:
    # WHEN/THE/SHALL are matched case-insensitively, one physical line per record
    return [
        ExtractionRule(REQUIREMENT, pattern, id_pattern, re.IGNORECASE | re.MULTILINE)
        for pattern, id_pattern in pairs
    ]


def property_rules(pairs: Iterable[RulePair] = DEFAULT_PROPERTY_RULES) -> list[ExtractionRule]:
    return [ExtractionRule(PROPERTY, pattern, id_pattern) for pattern, id_pattern in pairs]
