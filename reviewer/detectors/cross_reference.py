"""Cross-reference validation.

Every mention of a section label that is never declared anywhere in the
document is reported, once per mention. A label that is declared somewhere
is never reported, whichever page mentions it.
"""

import re

from reviewer.core.config import ContextWindows
from reviewer.detectors.base import RuleDetector
from reviewer.detectors.section_index import (
    SECTION_LABEL_RE,
    SectionIndex,
    build_section_index,
    canonical_label,
)
from reviewer.pydantic_models.issues import Issue, IssueType

_WHITESPACE_RE = re.compile(r"\s+")


def mention_context(text: str, start: int, end: int, window: int = ContextWindows.CROSS_REFERENCE) -> str:
    """``window`` characters either side of a span, whitespace collapsed."""
    snippet = text[max(0, start - window):min(len(text), end + window)]
    return _WHITESPACE_RE.sub(" ", snippet).strip()


def find_missing_references(pages: list[str], index: SectionIndex) -> list[Issue]:
    """Issues for mentions of undeclared labels, page ascending then text order."""
    declared = ", ".join(index) or "none"
    issues = []
    for page_num, text in enumerate(pages, start=1):
        for match in SECTION_LABEL_RE.finditer(text):
            label = canonical_label(match.group(0))
            if label in index:
                continue
            context = mention_context(text, match.start(), match.end())
            issues.append(Issue(
                page=page_num,
                type=IssueType.CROSS_REFERENCE,
                message=f"Reference to missing section: {label}",
                original=context,
                suggestion=f"Remove/update the reference; declared sections: {declared}.",
                location_hint=context,
            ))
    return issues


class CrossReferenceDetector(RuleDetector):
    """Flags mentions of sections the document never declares.

    Usage:
        detector = CrossReferenceDetector(logger=run_logger)
        issues = detector.detect(pages)                # builds its own index
        issues = detector.detect(pages, index=index)   # reuses a shared one
    """

    name = "cross_reference"

    def detect(self, pages: list[str], index: SectionIndex | None = None) -> list[Issue]:
        if index is None:
            index = build_section_index(pages, logger=self.logger)
        issues = find_missing_references(pages, index)
        self.log(f"{len(issues)} missing references", level="debug", declared=len(index))
        return issues
