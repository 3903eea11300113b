"""Redaction of sensitive values before text leaves the machine.

Applied to extracted text ahead of a CompanyLLM call when the processing
method asks for it. Each rule replaces its matches with a fixed token and the
result reports how many matches each rule found.
"""

import re
from dataclasses import dataclass, field


@dataclass(frozen=True)
class SanitizationRule:
    """One redaction pattern."""

    pattern: re.Pattern
    replacement: str
    description: str


@dataclass
class SanitizationResult:
    """Sanitized text plus per-rule match counts (rules with zero matches omitted)."""

    sanitized_content: str
    detected_patterns: list[dict] = field(default_factory=list)

    @property
    def was_sanitized(self) -> bool:
        return bool(self.detected_patterns)

    @property
    def redaction_count(self) -> int:
        return sum(p["count"] for p in self.detected_patterns)


# Applied in order; cards must run before phone and account numbers.
DEFAULT_SANITIZATION_RULES: tuple[SanitizationRule, ...] = (
    SanitizationRule(re.compile(r"\b\d{3}-\d{2}-\d{4}\b"), "[SSN-REDACTED]", "Social Security Number"),
    SanitizationRule(re.compile(r"\b\d{4}[\s-]?\d{4}[\s-]?\d{4}[\s-]?\d{4}\b"), "[CARD-REDACTED]", "Credit Card Number"),
    SanitizationRule(re.compile(r"\b\d{3}[-.]?\d{3}[-.]?\d{4}\b"), "[PHONE-REDACTED]", "Phone Number"),
    SanitizationRule(
        re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b"),
        "[EMAIL-REDACTED]",
        "Email Address",
    ),
    SanitizationRule(re.compile(r"\$[\d,]+(?:\.\d{2})?"), "[AMOUNT-REDACTED]", "Dollar Amount"),
    SanitizationRule(re.compile(r"\b\d{8,17}\b"), "[ACCOUNT-REDACTED]", "Potential Account Number"),
    SanitizationRule(re.compile(r"\b(?:\d{1,3}\.){3}\d{1,3}\b"), "[IP-REDACTED]", "IP Address"),
    SanitizationRule(re.compile(r"\b\d{1,2}[/\-]\d{1,2}[/\-]\d{4}\b"), "[DATE-REDACTED]", "Date"),
)


class DocumentSanitizer:
    """Applies an ordered table of redaction rules.

    Usage:
        result = DocumentSanitizer().sanitize(text)
        send(result.sanitized_content)
    """

    def __init__(self, rules: tuple[SanitizationRule, ...] | list[SanitizationRule] | None = None):
        self._rules = list(DEFAULT_SANITIZATION_RULES if rules is None else rules)

    def add_rule(self, rule: SanitizationRule):
        self._rules.append(rule)

    def remove_rule(self, replacement: str):
        """Remove every rule that produces ``replacement``."""
        self._rules = [r for r in self._rules if r.replacement != replacement]

    def rules(self) -> list[SanitizationRule]:
        return list(self._rules)

    def preview(self, content: str) -> list[dict]:
        """Counts that ``sanitize`` would report, without changing anything.

        Each rule is counted against the original text.
        """
        detected = []
        for rule in self._rules:
            count = len(rule.pattern.findall(content))
            if count:
                detected.append({"type": rule.replacement, "count": count, "description": rule.description})
        return detected

    def sanitize(self, content: str) -> SanitizationResult:
        """Redact every rule's matches, in rule order.

        Counts are taken against the original text, replacements are applied
        cumulatively.
        """
        sanitized = content
        detected = self.preview(content)
        for rule in self._rules:
            sanitized = rule.pattern.sub(rule.replacement, sanitized)
        return SanitizationResult(sanitized_content=sanitized, detected_patterns=detected)

    def contains_sensitive_content(self, content: str) -> bool:
        return any(rule.pattern.search(content) for rule in self._rules)


def sanitize_text(content: str) -> SanitizationResult:
    """Convenience function: sanitize with the default rules."""
    return DocumentSanitizer().sanitize(content)
