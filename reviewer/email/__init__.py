"""Confirmation-email drafting: model draft, local checks, rendering."""

from reviewer.email.composer import EmailComposer, default_follow_ups, next_business_day
from reviewer.email.post_processor import (
    check_completeness,
    check_references,
    check_terminology,
    check_updated_pdf,
    run_post_processor_checks,
)
from reviewer.email.renderer import render_email_body

__all__ = [
    "EmailComposer",
    "default_follow_ups",
    "next_business_day",
    "check_completeness",
    "check_references",
    "check_terminology",
    "check_updated_pdf",
    "run_post_processor_checks",
    "render_email_body",
]
