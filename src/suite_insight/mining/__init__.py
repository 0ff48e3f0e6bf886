"""Document mining: requirement and property extraction."""

from .miner import DocumentMiner, MinedDocuments
from .rules import ExtractionRule, property_rules, requirement_rules

__all__ = [
    "DocumentMiner",
    "MinedDocuments",
    "ExtractionRule",
    "property_rules",
    "requirement_rules",
]
