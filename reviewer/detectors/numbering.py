"""Ordered-list numbering validation.

Consecutive marker lines (``a.``, ``b)``, ``1.``, ``2)``...) form a run. Each
run is checked on its own: a restarted list is a new run, not a gap.
"""

import re
from dataclasses import dataclass

from reviewer.detectors.base import RuleDetector
from reviewer.pydantic_models.issues import Issue, IssueType

LIST_MARKER_RE = re.compile(r"^\s*([a-zA-Z]|\d+)[.)]\s+")


@dataclass(frozen=True)
class ListItem:
    label: str
    line: str


def list_runs(text: str) -> list[list[ListItem]]:
    """Maximal runs of consecutive marker lines with at least two items."""
    runs: list[list[ListItem]] = []
    current: list[ListItem] = []
    for line in text.split("\n"):
        match = LIST_MARKER_RE.match(line)
        if match:
            current.append(ListItem(label=match.group(1), line=line))
            continue
        if len(current) >= 2:
            runs.append(current)
        current = []
    if len(current) >= 2:
        runs.append(current)
    return runs


def _gap_issue(page: int, prev_label: str, item: ListItem, expected: str) -> Issue:
    return Issue(
        page=page,
        type=IssueType.NUMBERING,
        message=f'List jumps from "{prev_label}" to "{item.label}"',
        original=item.line,
        suggestion=f'Insert "{expected}." or renumber.',
        location_hint=item.line.strip(),
    )


def check_run(run: list[ListItem], page: int) -> list[Issue]:
    """Gaps in one run.

    Alphabetic runs (first label is a letter) compare lowercase code points;
    numeric runs compare integers and skip items that are not numbers.
    """
    issues = []
    if run[0].label.isalpha():
        for prev, item in zip(run, run[1:]):
            prev_code = ord(prev.label.lower()[0])
            if ord(item.label.lower()[0]) != prev_code + 1:
                issues.append(_gap_issue(page, prev.label, item, chr(prev_code + 1)))
    else:
        for prev, item in zip(run, run[1:]):
            if not (prev.label.isdecimal() and item.label.isdecimal()):
                continue
            p, c = int(prev.label), int(item.label)
            if c != p + 1:
                issues.append(_gap_issue(page, str(p), ListItem(str(c), item.line), str(p + 1)))
    return issues


class NumberingDetector(RuleDetector):
    """Flags ordered lists that skip or repeat a marker."""

    name = "numbering"

    def detect(self, pages: list[str]) -> list[Issue]:
        issues = []
        for page_num, text in enumerate(pages, start=1):
            for run in list_runs(text):
                issues.extend(check_run(run, page_num))
        self.log(f"{len(issues)} numbering gaps", level="debug")
        return issues
