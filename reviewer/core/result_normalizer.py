"""Coerce raw detector output into the closed Issue / AnalysisResult schema.

Model output is untrusted: pages may be strings, floats or missing, types may
fall outside the vocabulary, text fields may be null. Everything here is
total (never raises on malformed values) and idempotent.
"""

import math
import re
from typing import Any, Iterable

from reviewer.pydantic_models.issues import ISSUE_TYPES, AnalysisResult, Issue, IssueType

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")

# Wire name -> attribute name, for text fields.
_TEXT_FIELDS = {
    "message": "message",
    "original": "original",
    "suggestion": "suggestion",
    "locationHint": "location_hint",
}


def coerce_page(value: Any) -> int:
    """Leading-integer parse of a page value, clamped to >= 1 (default 1).

    ``"3"`` -> 3, ``"12abc"`` -> 12, ``2.7`` -> 2, ``None`` -> 1, ``-4`` -> 1.
    """
    if isinstance(value, bool):
        return 1
    if isinstance(value, int):
        return max(1, value)
    if isinstance(value, float):
        return max(1, int(value)) if math.isfinite(value) else 1
    match = _LEADING_INT.match(str(value)) if value is not None else None
    if not match:
        return 1
    return max(1, int(match.group(1)))


def coerce_type(value: Any) -> IssueType:
    """Map a raw type to the vocabulary, anything unknown becomes OTHER."""
    if isinstance(value, IssueType):
        return value
    if isinstance(value, str) and value in ISSUE_TYPES:
        return IssueType(value)
    return IssueType.OTHER


def _coerce_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def normalize_issue(raw: Issue | dict[str, Any]) -> Issue:
    """Normalize one raw issue.

    Accepts an Issue or a dict with camelCase or snake_case keys.
    """
    if isinstance(raw, Issue):
        return raw
    if not isinstance(raw, dict):
        raw = {}

    fields = {}
    for wire_name, attr in _TEXT_FIELDS.items():
        fields[attr] = _coerce_text(raw.get(wire_name, raw.get(attr)))

    screenshot = raw.get("screenshotUrl", raw.get("screenshot_url"))

    return Issue(
        page=coerce_page(raw.get("page")),
        type=coerce_type(raw.get("type")),
        screenshot_url=screenshot if isinstance(screenshot, str) and screenshot else None,
        **fields,
    )


def normalize_issues(raw_issues: Any) -> list[Issue]:
    """Normalize a raw issue list. Anything that isn't a list yields []."""
    if not isinstance(raw_issues, list):
        return []
    return [normalize_issue(raw) for raw in raw_issues]


def normalize_result(raw: AnalysisResult | dict[str, Any] | None, file_name: str) -> AnalysisResult:
    """Normalize a whole detector result.

    A supplied summary is ignored; it is always derived from the issues.

    Args:
        raw: Parsed detector output (dict) or an existing AnalysisResult.
        file_name: Name of the analyzed file, used when raw has none.
    """
    if isinstance(raw, AnalysisResult):
        return AnalysisResult(file_name=raw.file_name or file_name, issues=normalize_issues(raw.issues))
    if not isinstance(raw, dict):
        raw = {}
    name = raw.get("fileName", raw.get("file_name"))
    return AnalysisResult(
        file_name=name if isinstance(name, str) and name else file_name,
        issues=normalize_issues(raw.get("issues")),
    )


def merge_results(file_name: str, *issue_lists: Iterable[Issue | dict[str, Any]]) -> AnalysisResult:
    """Concatenate detector outputs, in argument order, into one result.

    Duplicates across detectors are kept.
    """
    issues: list[Issue] = []
    for issue_list in issue_lists:
        issues.extend(normalize_issue(raw) for raw in issue_list)
    return AnalysisResult(file_name=file_name, issues=issues)
