"""Section declaration index.

Finds where each ``Section X`` / ``Appendix X`` is declared (as a heading),
as opposed to merely mentioned. Labels use roman numerals, arabic numbers, or
a single capital letter.
"""

import re

from reviewer.core.pipeline_logger import PipelineLogger

SECTION_LABEL_RE = re.compile(r"\b(?:Section|Appendix)\s+(?:[IVXLCDM]+|\d+|[A-Z])\b")
"""A section or appendix label anywhere in text."""

_WHITESPACE_RE = re.compile(r"\s+")

SectionIndex = dict[str, set[int]]
"""Label -> pages where it is declared. Insertion order is discovery order."""


def canonical_label(token: str) -> str:
    """'Section\\n 4' -> 'Section 4'."""
    return _WHITESPACE_RE.sub(" ", token.strip())


def is_declaration(line: str, match: re.Match) -> bool:
    """True when the label found by ``match`` heads ``line``.

    Only whitespace may precede the label, so "Section 12 supersedes Section 1"
    declares Section 12 and merely mentions Section 1. A separator after the
    label (``:``, ``-``, en dash, em dash) is allowed but not required.
    """
    return not line[:match.start()].strip()


def build_section_index(pages: list[str], logger: PipelineLogger | None = None) -> SectionIndex:
    """Index every declared section label by the pages declaring it.

    Mentions inside body text ("as described in Section 4") are not
    declarations and are not indexed.
    """
    index: SectionIndex = {}
    for page_num, text in enumerate(pages, start=1):
        for line in text.split("\n"):
            for match in SECTION_LABEL_RE.finditer(line):
                if is_declaration(line, match):
                    index.setdefault(canonical_label(match.group(0)), set()).add(page_num)
    if logger:
        logger.debug("Section index built", declared=len(index), labels=list(index))
    return index
