"""Deterministic checks on a model-drafted email.

Run locally after parsing and before rendering. A question without a type
is a hard failure (ValidationError); everything else becomes a flag:
- error: a question cites no section or no page
- warning: a page reference not in "p. N" form
- warning: an updated PDF is requested without saying so
- warning: more than one term used for the investor or for the fund
"""

import re

from reviewer.core.config import EmailConfig, TerminologyGroups
from reviewer.core.errors import ValidationError
from reviewer.pydantic_models.email_models import EmailDraft, PostProcessorFlag

_PAGE_REF_RE = re.compile(EmailConfig.PAGE_REF_PATTERN)


def check_completeness(draft: EmailDraft):
    """Every question must carry a type.

    Raises:
        ValidationError: A question has no (or an empty) type.
    """
    for position, question in enumerate(draft.questions, start=1):
        if not question.type:
            label = question.title or f"#{position}"
            raise ValidationError(f"Question {label} is missing a type", field_name="type")


def check_references(draft: EmailDraft) -> list[PostProcessorFlag]:
    flags = []
    for question in draft.questions:
        evidence = question.evidence
        if not evidence.section_title or not evidence.page_ref:
            flags.append(PostProcessorFlag(
                type="error",
                message=f"Missing sectionTitle or pageRef for question: {question.title}",
            ))
        if evidence.page_ref and not _PAGE_REF_RE.search(evidence.page_ref):
            flags.append(PostProcessorFlag(
                type="warning",
                message=f"Incorrect pageRef format for question: {question.title}",
            ))
    return flags


def check_updated_pdf(draft: EmailDraft) -> list[PostProcessorFlag]:
    flags = []
    for question in draft.questions:
        if not question.request_updated_pdf:
            continue
        solution = question.proposed_solution.lower()
        if not any(keyword in solution for keyword in EmailConfig.UPDATED_PDF_KEYWORDS):
            flags.append(PostProcessorFlag(
                type="warning",
                message=f"Question “{question.title}” may need to explicitly ask for an updated PDF.",
            ))
    return flags


def terms_used(text: str, terms: tuple[str, ...]) -> list[str]:
    """Terms of a group that occur in text, in group order (case-sensitive)."""
    return [term for term in terms if re.search(rf"\b{re.escape(term)}", text)]


def check_terminology(text: str) -> list[PostProcessorFlag]:
    flags = []
    investor_terms = terms_used(text, TerminologyGroups.INVESTOR)
    if len(investor_terms) > 1:
        flags.append(PostProcessorFlag(
            type="warning",
            message=f"Inconsistent terminology for investor: {', '.join(investor_terms)}",
        ))
    fund_terms = terms_used(text, TerminologyGroups.FUND)
    if len(fund_terms) > 1:
        flags.append(PostProcessorFlag(
            type="warning",
            message=f"Inconsistent terminology for fund: {', '.join(fund_terms)}",
        ))
    return flags


def draft_prose(draft: EmailDraft) -> str:
    """Opening, each question's issue and proposed solution, and closing."""
    parts = [draft.opening]
    for question in draft.questions:
        parts.append(f"{question.issue} {question.proposed_solution}")
    parts.append(draft.closing)
    return " ".join(parts)


def run_post_processor_checks(draft: EmailDraft) -> list[PostProcessorFlag]:
    """All checks, in order: references, updated PDF, terminology.

    Raises:
        ValidationError: From check_completeness, before any flag is produced.
    """
    check_completeness(draft)
    flags = check_references(draft)
    flags.extend(check_updated_pdf(draft))
    flags.extend(check_terminology(draft_prose(draft)))
    return flags


def tone_check_passed(flags: list[PostProcessorFlag]) -> bool:
    return not any(flag.type == "error" for flag in flags)


def references_check_passed(flags: list[PostProcessorFlag]) -> bool:
    return not any("pageRef" in flag.message or "sectionTitle" in flag.message for flag in flags)
