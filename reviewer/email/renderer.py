"""Render HTML and plain-text email bodies from a validated draft.

Every value from the draft is HTML-escaped in the HTML body.
"""

from html import escape

from reviewer.pydantic_models.email_models import DraftTypo, EmailDraft

ASSUMPTIONS_HEADING = "Assumptions based on previous responses:"


def _typo_sentence(typo: DraftTypo) -> str:
    return f"On {typo.page_ref}, we found “{typo.excerpt}” which we believe should be “{typo.suggested_fix}”."


def render_html(draft: EmailDraft) -> str:
    parts = [f"<p>{escape(draft.opening)}</p>"]
    if draft.assumptions_block:
        parts.append(f"<p><strong>{ASSUMPTIONS_HEADING}</strong><br/>{escape(draft.assumptions_block)}</p>")

    parts.append("<ul>")
    for q in draft.questions:
        parts.append(
            f"<li><strong>{escape(q.title)}:</strong> {escape(q.issue)} "
            f"(<em>{escape(q.evidence.section_title)}, {escape(q.evidence.page_ref)}</em>)."
            f"<br/>{escape(q.proposed_solution)}</li>"
        )
    parts.append("</ul>")

    if draft.typos:
        parts.append("<p><strong>Typos:</strong></p><ul>")
        for typo in draft.typos:
            parts.append(f"<li>{escape(_typo_sentence(typo))}</li>")
        parts.append("</ul>")

    parts.append(f"<p>{escape(draft.closing)}</p><p>{escape(draft.signature)}</p>")
    return "".join(parts)


def render_text(draft: EmailDraft) -> str:
    text = f"{draft.opening}\n\n"
    if draft.assumptions_block:
        text += f"{ASSUMPTIONS_HEADING}\n{draft.assumptions_block}\n\n"
    for q in draft.questions:
        text += (
            f"• {q.title}: {q.issue} ({q.evidence.section_title}, {q.evidence.page_ref}).\n"
            f"{q.proposed_solution}\n"
        )
    if draft.typos:
        text += "\nTypos:\n"
        for typo in draft.typos:
            text += f"• {_typo_sentence(typo)}\n"
    text += f"\n{draft.closing}\n{draft.signature}"
    return text


def render_email_body(draft: EmailDraft) -> tuple[str, str]:
    """(body_html, body_text) for a draft."""
    return render_html(draft), render_text(draft)
