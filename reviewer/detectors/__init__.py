"""Issue detectors.

Rule-based (synchronous, run in worker threads):
- cross_reference: mentions of sections that are never declared
- numbering: ordered lists that skip a marker
- pattern_detector: the declarative regex rule table (pattern_rules)

Model-based (async):
- model_detector: analysis prompt against an LLM, strict JSON contract
"""

from reviewer.detectors.base import Detector, RuleDetector
from reviewer.detectors.section_index import (
    SECTION_LABEL_RE,
    SectionIndex,
    build_section_index,
    is_declaration,
)
from reviewer.detectors.cross_reference import CrossReferenceDetector, find_missing_references
from reviewer.detectors.numbering import NumberingDetector, LIST_MARKER_RE
from reviewer.detectors.pattern_rules import (
    DEFAULT_RULES,
    TYPO_CORRECTIONS,
    PatternRule,
    PatternRuleSet,
)
from reviewer.detectors.pattern_detector import PatternDetector
from reviewer.detectors.model_detector import ModelDetector, parse_model_response

__all__ = [
    "Detector",
    "RuleDetector",
    # Sections
    "SECTION_LABEL_RE",
    "SectionIndex",
    "build_section_index",
    "is_declaration",
    "CrossReferenceDetector",
    "find_missing_references",
    # Lists
    "NumberingDetector",
    "LIST_MARKER_RE",
    # Pattern rules
    "DEFAULT_RULES",
    "TYPO_CORRECTIONS",
    "PatternRule",
    "PatternRuleSet",
    "PatternDetector",
    # Model
    "ModelDetector",
    "parse_model_response",
]
