"""Declarative regex rule table for the pattern detector.

Rules are data: adding a rule means appending a PatternRule, not writing a
detector. A rule may carry its own message and suggestion generators;
otherwise the generic ones are used.
"""

import re
from dataclasses import dataclass, replace
from typing import Callable, Literal

from reviewer.pydantic_models.issues import IssueType

Severity = Literal["low", "medium", "high"]

TextGenerator = Callable[[str], str]
"""Matched text -> message or suggestion."""


@dataclass(frozen=True)
class PatternRule:
    """One regex rule.

    Attributes:
        id: Stable identifier, used to toggle or remove the rule.
        name: Short display name.
        description: What the rule looks for; the generic message prefix.
        pattern: Compiled regex.
        type: Issue type emitted for every match.
        severity: Informational ranking, not used for filtering.
        suggestion: Generic suggestion.
        enabled: Disabled rules are skipped.
        global_match: False means only the first match is reported.
        message_for: Optional custom message generator.
        suggestion_for: Optional custom suggestion generator.
    """

    id: str
    name: str
    description: str
    pattern: re.Pattern
    type: IssueType
    severity: Severity
    suggestion: str
    enabled: bool = True
    global_match: bool = True
    message_for: TextGenerator | None = None
    suggestion_for: TextGenerator | None = None

    def message(self, matched: str) -> str:
        if self.message_for:
            return self.message_for(matched)
        return f'{self.description}: "{matched}"'

    def suggest(self, matched: str) -> str:
        if self.suggestion_for:
            return self.suggestion_for(matched)
        return self.suggestion


TYPO_CORRECTIONS: dict[str, str] = {
    "teh": "the",
    "recieve": "receive",
    "seperate": "separate",
    "occurence": "occurrence",
    "accomodate": "accommodate",
    "definately": "definitely",
    "goverment": "government",
    "buisness": "business",
    "occured": "occurred",
    "managment": "management",
}


def _typo_suggestion(matched: str) -> str:
    correction = TYPO_CORRECTIONS.get(matched.lower())
    return f'Change to "{correction}"' if correction else "Check spelling"


def _duplicate_word_suggestion(matched: str) -> str:
    return f'Remove duplicate "{matched.split()[0]}"'


def _quoted(template: str) -> TextGenerator:
    return lambda matched: template.format(matched)


def _fixed(text: str) -> TextGenerator:
    return lambda _matched: text


DEFAULT_RULES: tuple[PatternRule, ...] = (
    # Typo and spelling
    PatternRule(
        id="common_typos",
        name="Common Typos",
        description="Detects common spelling mistakes",
        pattern=re.compile(r"\b(" + "|".join(TYPO_CORRECTIONS) + r")\b", re.IGNORECASE),
        type=IssueType.TYPO,
        severity="medium",
        suggestion="Check spelling and correct typos",
        message_for=_quoted('Possible typo: "{}"'),
        suggestion_for=_typo_suggestion,
    ),
    PatternRule(
        id="duplicate_words",
        name="Duplicate Words",
        description="Finds repeated words",
        pattern=re.compile(r"\b(\w+)\s+\1\b", re.IGNORECASE),
        type=IssueType.TYPO,
        severity="medium",
        suggestion="Remove duplicate word",
        message_for=_quoted('Duplicate word found: "{}"'),
        suggestion_for=_duplicate_word_suggestion,
    ),
    # Punctuation and spacing
    PatternRule(
        id="missing_periods",
        name="Missing Periods",
        description="Sentences without ending punctuation",
        pattern=re.compile(r"[a-z]\s*\n\s*[A-Z]"),
        type=IssueType.PUNCTUATION,
        severity="low",
        suggestion="Add missing period at end of sentence",
        message_for=_fixed("Sentence appears to be missing ending punctuation"),
    ),
    PatternRule(
        id="double_spaces",
        name="Double Spaces",
        description="Multiple consecutive spaces",
        pattern=re.compile(r"  +"),
        type=IssueType.SPACING,
        severity="low",
        suggestion="Replace multiple spaces with single space",
        message_for=_fixed("Multiple consecutive spaces found"),
    ),
    PatternRule(
        id="space_before_punctuation",
        name="Space Before Punctuation",
        description="Incorrect spacing before punctuation",
        pattern=re.compile(r"\s+[,.;:!?]"),
        type=IssueType.SPACING,
        severity="medium",
        suggestion="Remove space before punctuation",
        message_for=_fixed("Unnecessary space before punctuation"),
    ),
    # Capitalization
    PatternRule(
        id="sentence_capitalization",
        name="Sentence Capitalization",
        description="Sentences not starting with capital letters",
        pattern=re.compile(r"[.!?]\s+[a-z]"),
        type=IssueType.CAPITALIZATION,
        severity="medium",
        suggestion="Capitalize first letter of sentence",
        message_for=_fixed("Sentence should start with capital letter"),
    ),
    # Financial formatting
    PatternRule(
        id="currency_formatting",
        name="Currency Formatting",
        description="Inconsistent currency formatting",
        pattern=re.compile(r"\$\s*\d+(?:\.\d{3,}|\.\d(?!\d))"),
        type=IssueType.FORMATTING,
        severity="medium",
        suggestion="Use consistent currency formatting (e.g., $1,000.00)",
        message_for=_quoted('Currency formatting may be inconsistent: "{}"'),
        suggestion_for=_fixed('Use format like "$1,000.00"'),
    ),
    PatternRule(
        id="percentage_formatting",
        name="Percentage Formatting",
        description="Inconsistent percentage formatting",
        pattern=re.compile(r"\d+\s*%|\d+\s*percent", re.IGNORECASE),
        type=IssueType.FORMATTING,
        severity="low",
        suggestion="Use consistent percentage formatting",
    ),
    # Legal references and defined terms
    PatternRule(
        id="missing_sections",
        name="Missing Section References",
        description="References to sections that may not exist",
        pattern=re.compile(
            r"(?:see|refer to|as per|according to|pursuant to)\s+"
            r"(?:section|clause|paragraph|article)\s+([A-Z0-9]+(?:\.[A-Z0-9]+)*)",
            re.IGNORECASE,
        ),
        type=IssueType.CROSS_REFERENCE,
        severity="high",
        suggestion="Verify section reference exists in document",
        message_for=_quoted('Section reference may need verification: "{}"'),
    ),
    PatternRule(
        id="undefined_terms",
        name="Undefined Terms",
        description="Terms that should be defined",
        pattern=re.compile(
            r"\b(the\s+)?(Company|Fund|Partnership|Agreement|Contract|LP|GP|LPA|PPM)\b"
            r"(?!\s+(?:shall|will|may|is|are|means|refers?))"
        ),
        type=IssueType.LOGIC_POINT,
        severity="medium",
        suggestion="Ensure capitalized terms are properly defined",
        message_for=_quoted('Capitalized term may need definition: "{}"'),
    ),
    # Dates and numbers
    PatternRule(
        id="date_formats",
        name="Inconsistent Date Formats",
        description="Mixed date formatting styles",
        pattern=re.compile(
            r"\d{1,2}[/\-]\d{1,2}[/\-]\d{2,4}"
            r"|\d{1,2}\s+(January|February|March|April|May|June|July|August|September|October|November|December)\s+\d{2,4}",
            re.IGNORECASE,
        ),
        type=IssueType.FORMATTING,
        severity="low",
        suggestion="Use consistent date formatting throughout document",
    ),
    PatternRule(
        id="number_formatting",
        name="Number Formatting",
        description="Inconsistent number formatting",
        pattern=re.compile(r"\b\d{4,}(?!\.\d{2}\b)(?![/\-]\d)"),
        type=IssueType.FORMATTING,
        severity="low",
        suggestion="Consider using comma separators for large numbers",
    ),
    # Subscription-document logic points
    PatternRule(
        id="subscription_amounts",
        name="Subscription Amount Issues",
        description="Potential subscription amount discrepancies",
        pattern=re.compile(
            r"(?:subscription|commitment|capital)\s+(?:amount|commitment)?\s*[:=]?\s*\$?[\d,]+",
            re.IGNORECASE,
        ),
        type=IssueType.LOGIC_POINT,
        severity="high",
        suggestion="Verify subscription amounts are consistent throughout document",
        message_for=_quoted('Subscription amount requires verification: "{}"'),
    ),
    PatternRule(
        id="signature_pages",
        name="Signature Requirements",
        description="Signature page requirements",
        pattern=re.compile(r"(?:signature|executed|signed).*(?:page|below|witness)", re.IGNORECASE),
        type=IssueType.LOGIC_POINT,
        severity="medium",
        suggestion="Verify signature requirements and execution instructions",
        message_for=_quoted('Signature requirement needs review: "{}"'),
    ),
    PatternRule(
        id="closing_dates",
        name="Closing Date References",
        description="Closing date mentions that need verification",
        pattern=re.compile(
            r"(?:closing|effective)\s+date.*?(?:\d{1,2}[/\-]\d{1,2}[/\-]\d{2,4}|\w+\s+\d{1,2},?\s+\d{4})",
            re.IGNORECASE,
        ),
        type=IssueType.LOGIC_POINT,
        severity="high",
        suggestion="Confirm closing dates are accurate and consistent",
        message_for=_quoted('Closing date needs verification: "{}"'),
    ),
)


class PatternRuleSet:
    """An ordered, editable collection of rules.

    Each analysis should work on its own copy (``copy()``) so toggling rules
    for one run never leaks into another.
    """

    def __init__(self, rules: tuple[PatternRule, ...] | list[PatternRule] = DEFAULT_RULES):
        self._rules: list[PatternRule] = list(rules)

    def copy(self) -> "PatternRuleSet":
        return PatternRuleSet(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __contains__(self, rule_id: str) -> bool:
        return any(r.id == rule_id for r in self._rules)

    def add_rule(self, rule: PatternRule):
        """Append a rule.

        Raises:
            ValueError: A rule with the same id already exists.
        """
        if rule.id in self:
            raise ValueError(f"Duplicate pattern rule id: {rule.id}")
        self._rules.append(rule)

    def remove_rule(self, rule_id: str):
        self._rules = [r for r in self._rules if r.id != rule_id]

    def toggle_rule(self, rule_id: str, enabled: bool) -> bool:
        """Enable or disable a rule. Returns False if no rule has this id."""
        for i, rule in enumerate(self._rules):
            if rule.id == rule_id:
                self._rules[i] = replace(rule, enabled=enabled)
                return True
        return False

    def rules(self) -> list[PatternRule]:
        return list(self._rules)

    def enabled_rules(self) -> list[PatternRule]:
        return [r for r in self._rules if r.enabled]
