"""Confirmation-email composer.

One model call produces a structured draft; everything after that is local:
validation, post-processor checks, rendering, and metadata. The model is
never asked to fix its own draft.
"""

from datetime import date, timedelta

import pydantic

from reviewer.core.config import DEFAULT_MODELS, EmailConfig
from reviewer.core.errors import ModelResponseError, ValidationError
from reviewer.core.llm_client import LLMClient
from reviewer.core.pipeline_logger import PipelineLogger
from reviewer.email.post_processor import (
    references_check_passed,
    run_post_processor_checks,
    tone_check_passed,
)
from reviewer.email.renderer import render_email_body
from reviewer.prompts.email_prompt import EMAIL_SYSTEM_PROMPT, build_email_prompt
from reviewer.pydantic_models.email_models import (
    EmailDraft,
    EmailGenerationInputs,
    EmailGenerationResult,
    EmailMetadata,
    GeneratedEmail,
)


def next_business_day(day: date, business_days: int = 1) -> date:
    """Add business days, skipping Saturdays and Sundays (no holiday calendar)."""
    current = day
    remaining = business_days
    while remaining > 0:
        current += timedelta(days=1)
        if current.weekday() < 5:
            remaining -= 1
    return current


def default_follow_ups(expected_date: str) -> list[dict]:
    """A single reminder the business day after the expected reply date.

    Returns [] when the expected date is not an ISO date.
    """
    try:
        expected = date.fromisoformat(expected_date[:10])
    except ValueError:
        return []
    reminder = next_business_day(expected, EmailConfig.FOLLOW_UP_BUSINESS_DAYS)
    return [{
        "date": reminder.isoformat(),
        "type": "reminder",
        "note": f"Follow up if no reply was received by {expected.isoformat()}",
    }]


class EmailComposer:
    """Drafts, checks, and renders a confirmation email.

    Usage:
        composer = EmailComposer(LLMClient(cost_tracker=tracker))
        result = await composer.generate(inputs)
        if not result.metadata.references_check_passed:
            ...
    """

    def __init__(
        self,
        client: LLMClient,
        model: str = DEFAULT_MODELS["email"],
        logger: PipelineLogger | None = None,
    ):
        self.client = client
        self.model = model
        self.logger = logger or PipelineLogger()

    async def draft(self, inputs: EmailGenerationInputs) -> EmailDraft:
        """Ask the model for a structured draft.

        Raises:
            ModelResponseError: The reply is not a JSON object.
            ValidationError: The JSON does not fit the draft schema.
        """
        response = await self.client.complete(
            system_prompt=EMAIL_SYSTEM_PROMPT,
            user_prompt=build_email_prompt(inputs),
            model=self.model,
            component="email_composer",
        )
        if not response.content:
            raise ModelResponseError("Email draft is not a JSON object", raw_response=response.raw_content)
        try:
            return EmailDraft.model_validate(response.content)
        except pydantic.ValidationError as e:
            raise ValidationError(f"Email draft does not match the expected schema: {e}") from e

    def finalize(self, draft: EmailDraft, inputs: EmailGenerationInputs) -> EmailGenerationResult:
        """Checks, rendering and metadata for an already-parsed draft."""
        flags = run_post_processor_checks(draft)
        body_html, body_text = render_email_body(draft)

        for flag in flags:
            if flag.type == "error":
                self.logger.error(f"[email] {flag.message}")
            else:
                self.logger.warning(f"[email] {flag.message}")

        return EmailGenerationResult(
            email=GeneratedEmail(subject=draft.subject, body_html=body_html, body_text=body_text),
            metadata=EmailMetadata(
                tone_check_passed=tone_check_passed(flags),
                references_check_passed=references_check_passed(flags),
                follow_up_schedule=draft.follow_ups or default_follow_ups(inputs.expected_date),
            ),
            flags=flags,
        )

    async def generate(self, inputs: EmailGenerationInputs) -> EmailGenerationResult:
        """Draft with the model, then check and render locally.

        Raises:
            ModelResponseError: The reply is not a JSON object.
            ValidationError: The draft is structurally incomplete.
        """
        self.logger.start_stage("email", detail=inputs.customer.name)
        draft = await self.draft(inputs)
        result = self.finalize(draft, inputs)
        self.logger.stage_result(
            "Email drafted",
            questions=len(draft.questions),
            typos=len(draft.typos),
            flags=len(result.flags),
        )
        return result
