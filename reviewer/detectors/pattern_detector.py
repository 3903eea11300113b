"""Regex rule detector.

Runs every enabled PatternRule over the whole document (pages joined with
form feeds) and maps each match back to its page. A rule that raises is
logged, recorded as a detector warning, and skipped; the other rules still
run.
"""

import re

from reviewer.core.config import ContextWindows, PageSplitConfig
from reviewer.core.errors import detector_error
from reviewer.core.pdf_reader import page_for_offset
from reviewer.detectors.base import RuleDetector
from reviewer.detectors.pattern_rules import PatternRule, PatternRuleSet
from reviewer.pydantic_models.issues import Issue

_WHITESPACE_RE = re.compile(r"\s+")


def match_context(text: str, index: int, window: int = ContextWindows.PATTERN_MATCH) -> str:
    """``window`` characters either side of ``index``, whitespace collapsed."""
    snippet = text[max(0, index - window):min(len(text), index + window)]
    return _WHITESPACE_RE.sub(" ", snippet).strip()


class PatternDetector(RuleDetector):
    """Applies a PatternRuleSet to page texts.

    Usage:
        detector = PatternDetector(rule_set=PatternRuleSet(), logger=run_logger, errors=run_errors)
        issues = detector.detect(pages)
    """

    name = "patterns"

    def __init__(self, rule_set: PatternRuleSet | None = None, **kwargs):
        super().__init__(**kwargs)
        self.rule_set = rule_set if rule_set is not None else PatternRuleSet()

    def detect(self, pages: list[str]) -> list[Issue]:
        """Issues in rule declaration order, then match order within a rule."""
        separator = PageSplitConfig.PAGE_BREAK
        text = separator.join(pages)
        issues: list[Issue] = []
        failed = 0

        for rule in self.rule_set.enabled_rules():
            try:
                issues.extend(self._apply_rule(rule, text, pages, len(separator)))
            except Exception as e:
                failed += 1
                self.log(f"Rule '{rule.id}' failed: {e}", level="warning")
                self.errors.add(detector_error(
                    f"Pattern rule '{rule.id}' raised {type(e).__name__}: {e}",
                    detector=f"{self.name}:{rule.id}",
                    original=e,
                ))

        self.log(
            f"{len(issues)} pattern matches",
            level="debug",
            rules=len(self.rule_set.enabled_rules()),
            failed=failed,
        )
        return issues

    def _apply_rule(self, rule: PatternRule, text: str, pages: list[str], separator_len: int) -> list[Issue]:
        if rule.global_match:
            matches = list(rule.pattern.finditer(text))
        else:
            first = rule.pattern.search(text)
            matches = [first] if first else []

        return [
            Issue(
                page=page_for_offset(m.start(), pages, separator_len),
                type=rule.type,
                message=rule.message(m.group(0)),
                original=m.group(0),
                suggestion=rule.suggest(m.group(0)),
                location_hint=match_context(text, m.start()),
            )
            for m in matches
        ]
