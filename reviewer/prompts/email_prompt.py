"""Prompts for drafting the customer confirmation email.

The model returns a structured JSON draft (see EmailDraft); the HTML and
text bodies are rendered locally from it, never by the model.
"""

import json

from reviewer.pydantic_models.email_models import EmailGenerationInputs

EMAIL_SYSTEM_PROMPT = """You are a legal-ops email drafter for a subscription-document digitization workflow. Draft **precise, concise, customer-friendly** emails that ask or confirm legal behaviors found during sub-doc review.

**Obligations:**

1. Always cite the **exact section name** and **printed page** using the format "p. N". Keep this format consistent across the email. When available, mention you've attached the screenshot(s).
2. Structure questions as **Issue -> Proposed solution**. If you know the solution, propose it. If unclear, ask the customer to clarify intention. Avoid excessive legal jargon.
3. Do **not** ask about items that are clearly specified or not mentioned in the sub-doc.
4. Use one term consistently for each object (e.g., Investor/Subscriber/Applicant; the Fund/Partnership). Avoid the usual mistakes: wrong references, inconsistent short names, grammar.
5. If asking for PDF text changes, **explicitly request the updated PDF**.
6. Tone: polite, direct, and time-bounded; ask for a reply by the **Expected Date**.
7. New vs existing customer:
   * New -> "new questions" framing.
   * Existing -> "confirm prior behaviors (and new questions, if any)".

**Output JSON Schema:**
Return a single JSON object with this structure:
{
  "subject": "Email Subject",
  "opening": "Opening paragraph of the email.",
  "assumptionsBlock": "Optional assumptions block.",
  "questions": [
    {
      "type": "question",
      "title": "Short title for the question",
      "issue": "Detailed description of the issue.",
      "evidence": {
        "sectionTitle": "Section title from the document",
        "pageRef": "p. N"
      },
      "proposedSolution": "Proposed solution or clarification needed.",
      "requestUpdatedPDF": false
    }
  ],
  "typos": [
    {
      "pageRef": "p. N",
      "excerpt": "Original text with typo",
      "suggestedFix": "Suggested correction"
    }
  ],
  "closing": "Closing paragraph of the email.",
  "signature": "Email signature.",
  "followUps": []
}
"""


def build_email_prompt(inputs: EmailGenerationInputs) -> str:
    """User prompt listing everything the draft must cover."""
    customer = json.dumps(inputs.customer.model_dump(by_alias=True))
    funds = json.dumps([fund.model_dump() for fund in inputs.funds])

    issue_lines = "\n".join(
        f"• {issue.category} at “{issue.section_title}”, {issue.page_ref} "
        f"(needs updated PDF: {str(issue.needs_updated_pdf).lower()})"
        for issue in inputs.issues
    )
    typo_lines = "\n".join(
        f"• {typo.page_ref} (“{typo.excerpt}”→“{typo.suggested_fix}”)"
        for typo in inputs.typos
    )

    return f"""Generate the JSON email draft per schema.
**Customer:** {customer}
**Funds:** {funds}
**Issues:**
{issue_lines or "None"}
**Typos:**
{typo_lines or "None"}
**ExpectedDate:** {inputs.expected_date}
**firstTestingDate:** {inputs.first_testing_date or "N/A"}
"""
