"""Tests for the regex rule table and the pattern detector."""

import re
from unittest.mock import MagicMock

import pytest

from reviewer.core.errors import ErrorCategory, PipelineErrors
from reviewer.detectors.pattern_detector import PatternDetector, match_context
from reviewer.detectors.pattern_rules import DEFAULT_RULES, PatternRule, PatternRuleSet
from reviewer.pydantic_models.issues import IssueType


def _rule(rule_id: str, pattern, **kwargs) -> PatternRule:
    defaults = {
        "name": rule_id,
        "description": f"{rule_id} found",
        "type": IssueType.OTHER,
        "severity": "low",
        "suggestion": "Fix it",
    }
    defaults.update(kwargs)
    return PatternRule(id=rule_id, pattern=pattern, **defaults)


# =============================================================================
# PatternRuleSet
# =============================================================================


class TestPatternRuleSet:

    def test_defaults_loaded(self):
        rule_set = PatternRuleSet()
        assert len(rule_set) == len(DEFAULT_RULES)
        assert "common_typos" in rule_set

    def test_rule_ids_are_unique(self):
        ids = [r.id for r in DEFAULT_RULES]
        assert len(ids) == len(set(ids))

    def test_toggle_rule(self):
        rule_set = PatternRuleSet()
        assert rule_set.toggle_rule("double_spaces", False) is True
        assert "double_spaces" not in [r.id for r in rule_set.enabled_rules()]
        assert rule_set.toggle_rule("no_such_rule", False) is False

    def test_copy_is_independent(self):
        shared = PatternRuleSet()
        run_copy = shared.copy()
        run_copy.toggle_rule("double_spaces", False)

        assert len(shared.enabled_rules()) == len(DEFAULT_RULES)

    def test_add_and_remove(self):
        rule_set = PatternRuleSet([])
        rule_set.add_rule(_rule("fee_typo", re.compile(r"\bfeee\b")))
        assert "fee_typo" in rule_set

        with pytest.raises(ValueError, match="Duplicate"):
            rule_set.add_rule(_rule("fee_typo", re.compile(r"x")))

        rule_set.remove_rule("fee_typo")
        assert len(rule_set) == 0


# =============================================================================
# PatternDetector
# =============================================================================


class TestPatternDetector:

    def _detect(self, pages, rule_ids, quiet_logger, errors=None):
        rules = [r for r in DEFAULT_RULES if r.id in rule_ids]
        detector = PatternDetector(rule_set=PatternRuleSet(rules), logger=quiet_logger, errors=errors)
        return detector.detect(pages)

    def test_typo_with_known_correction(self, quiet_logger):
        issues = self._detect(["We will recieve the funds."], {"common_typos"}, quiet_logger)

        assert len(issues) == 1
        assert issues[0].type == IssueType.TYPO
        assert issues[0].message == 'Possible typo: "recieve"'
        assert issues[0].suggestion == 'Change to "receive"'

    def test_duplicate_word(self, quiet_logger):
        issues = self._detect(["Sign the the form."], {"duplicate_words"}, quiet_logger)

        assert issues[0].original == "the the"
        assert issues[0].suggestion == 'Remove duplicate "the"'

    def test_match_mapped_to_its_page(self, quiet_logger):
        pages = ["Clean first page.", "Second page has a seperate typo."]
        issues = self._detect(pages, {"common_typos"}, quiet_logger)

        assert [i.page for i in issues] == [2]

    def test_disabled_rule_is_skipped(self, quiet_logger):
        rule_set = PatternRuleSet([r for r in DEFAULT_RULES if r.id == "common_typos"])
        rule_set.toggle_rule("common_typos", False)

        issues = PatternDetector(rule_set=rule_set, logger=quiet_logger).detect(["teh end"])

        assert issues == []

    def test_non_global_rule_reports_first_match(self, quiet_logger):
        rule = _rule("fee", re.compile(r"fee"), global_match=False)
        issues = PatternDetector(rule_set=PatternRuleSet([rule]), logger=quiet_logger).detect(["fee fee fee"])

        assert len(issues) == 1
        assert issues[0].message == 'fee found: "fee"'

    def test_failing_rule_is_recorded_and_skipped(self, quiet_logger):
        broken_pattern = MagicMock()
        broken_pattern.finditer.side_effect = RuntimeError("catastrophic backtracking")
        broken = _rule("broken", broken_pattern)
        working = _rule("fee", re.compile(r"fee"))
        errors = PipelineErrors()

        detector = PatternDetector(rule_set=PatternRuleSet([broken, working]), logger=quiet_logger, errors=errors)
        issues = detector.detect(["management fee"])

        assert len(issues) == 1
        assert errors.warning_count == 1
        assert errors.warnings[0].category == ErrorCategory.DETECTOR
        assert errors.warnings[0].source == "patterns:broken"

    def test_match_context(self):
        text = "x" * 80 + "MATCH" + "y" * 80
        assert match_context(text, 80) == "x" * 50 + "MATCH" + "y" * 45
