"""Document-analysis prompt for the model detector.

The model is asked to act as a QA checker for subscription documents: index
section headers, verify cross-references, flag typos and formatting, and
raise the logic points a reviewer must confirm with the customer. The reply
must be a bare JSON object; the detector applies no repair.
"""

from reviewer.pydantic_models.issues import IssueType

LOGIC_POINT_CATEGORIES: tuple[str, ...] = (
    "Funds exclusiveness issues - multiple funds mentioned without clear exclusiveness",
    "Missing pages or mismatched table of contents",
    "LPA/PA/PPM references that may be incorrect or outdated",
    "Subscription amount or percentage discrepancies",
    "Date inconsistencies (closing dates, commitment periods)",
    "Signature page issues or missing signatures",
    "Capital call timing or process unclear",
    "Management fee calculation errors",
    "Carried interest terms unclear",
    "Investment period definitions inconsistent",
    "Key person provisions unclear",
    "Transfer restrictions not properly defined",
    "Advisory committee composition unclear",
    "Indemnification terms inconsistent",
    "Tax election procedures unclear",
    "Reporting frequency or format unclear",
    "Termination or withdrawal provisions inconsistent",
)
"""Subscription-document points that need customer confirmation (type 'logic_point')."""

SANITIZED_NOTE = "NOTE: This document has been sanitized to remove sensitive information."

PAGE_BREAK_NOTE = (
    "Pages are separated by form feed characters (\\f). Page 1 is the text before the first "
    "form feed; count form feeds to give each issue its page number."
)

_TYPE_CHOICES = "|".join(t.value for t in IssueType)

_LOGIC_POINTS = "\n".join(f"{i}. {category}" for i, category in enumerate(LOGIC_POINT_CATEGORIES, start=1))

ANALYSIS_SYSTEM_PROMPT = f"""Act as a PDF QA checker for a data science team specializing in subscription documents.
{{sanitized_note}}
Your task is to analyze the document content and identify issues that need attention.

## Cross-references

First, extract all section headers (e.g., "Section 1", "Section I", "Appendix A").
Then, for each cross-reference found in the text (e.g., "see Section 1"), check if the referenced section header actually exists.
If a cross-reference points to a non-existent section, emit an issue object with the type 'cross_reference'.

## Typos and formatting

Also detect standard typos and formatting issues:
- Spelling errors and typos
- Inconsistent spacing
- Punctuation errors
- Capitalization issues
- Alignment and font inconsistencies
- Numbering/bullet formatting problems

## Logic points

ADDITIONALLY, detect the following logic points that require customer confirmation and emit them as type 'logic_point':
{_LOGIC_POINTS}

For logic_point issues, the message should describe what needs customer confirmation, original should contain the problematic text, and suggestion should indicate what clarification is needed.

## Output

Return STRICT JSON ONLY (no prose, no code fences) matching this schema:
{{{{
  "fileName": "string",
  "issues": [
    {{{{
      "page": 1,
      "type": "{_TYPE_CHOICES}",
      "message": "string",
      "original": "string",
      "suggestion": "string",
      "locationHint": "paragraph/line context or short snippet"
    }}}}
  ],
  "summary": {{{{ "issueCount": 0, "pagesAffected": [1, 2] }}}}
}}}}
"""


def build_analysis_prompt(was_sanitized: bool = False) -> str:
    """System prompt for one analysis call."""
    note = f"{SANITIZED_NOTE}\n" if was_sanitized else ""
    return ANALYSIS_SYSTEM_PROMPT.format(sanitized_note=note)


def build_analysis_user_prompt(file_name: str, document_text: str | None = None) -> str:
    """User message: the extracted text, or a pointer to the attached PDF."""
    if document_text is None:
        return f"Analyze the attached PDF document ({file_name})."
    return f"File: {file_name}\n{PAGE_BREAK_NOTE}\n\nDocument content to analyze:\n{document_text}"
