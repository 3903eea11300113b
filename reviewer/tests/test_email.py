"""Tests for email drafting: post-processor checks, rendering and composer."""

import json
from datetime import date

import pytest

from reviewer.core.cost_tracker import CostTracker
from reviewer.core.errors import ModelResponseError, ValidationError
from reviewer.core.llm_client import LLMClient
from reviewer.email.composer import EmailComposer, default_follow_ups, next_business_day
from reviewer.email.post_processor import (
    check_terminology,
    references_check_passed,
    run_post_processor_checks,
    tone_check_passed,
)
from reviewer.email.renderer import ASSUMPTIONS_HEADING, render_html, render_text
from reviewer.prompts.email_prompt import build_email_prompt
from reviewer.pydantic_models.email_models import EmailDraft


# =============================================================================
# Post-processor checks
# =============================================================================


class TestPostProcessor:

    def test_clean_draft_has_no_flags(self, draft_payload):
        flags = run_post_processor_checks(EmailDraft.model_validate(draft_payload))

        assert flags == []
        assert tone_check_passed(flags)
        assert references_check_passed(flags)

    def test_wrong_page_ref_format_is_warning(self, draft_payload):
        draft_payload["questions"][0]["evidence"]["pageRef"] = "page 3"
        flags = run_post_processor_checks(EmailDraft.model_validate(draft_payload))

        assert [f.type for f in flags] == ["warning"]
        assert flags[0].message == "Incorrect pageRef format for question: Capital call timing"
        assert tone_check_passed(flags) is True
        assert references_check_passed(flags) is False

    def test_missing_section_is_error(self, draft_payload):
        draft_payload["questions"][0]["evidence"] = {"pageRef": "p. 12"}
        flags = run_post_processor_checks(EmailDraft.model_validate(draft_payload))

        assert flags[0].type == "error"
        assert tone_check_passed(flags) is False
        assert references_check_passed(flags) is False

    def test_missing_type_raises(self, draft_payload):
        del draft_payload["questions"][0]["type"]

        with pytest.raises(ValidationError) as exc_info:
            run_post_processor_checks(EmailDraft.model_validate(draft_payload))
        assert exc_info.value.field_name == "type"

    def test_updated_pdf_must_be_requested(self, draft_payload):
        draft_payload["questions"][0]["proposedSolution"] = "Please confirm the notice period."
        flags = run_post_processor_checks(EmailDraft.model_validate(draft_payload))

        assert len(flags) == 1
        assert flags[0].type == "warning"
        assert "updated PDF" in flags[0].message

    def test_mixed_investor_terms(self):
        flags = check_terminology("The Investor agrees that each Subscriber will sign.")

        assert len(flags) == 1
        assert flags[0].message == "Inconsistent terminology for investor: Investor, Subscriber"

    def test_mixed_fund_terms(self):
        flags = check_terminology("The Fund and the Partnership are the same vehicle.")
        assert flags[0].message == "Inconsistent terminology for fund: Fund, Partnership"

    def test_single_term_is_fine(self):
        assert check_terminology("The Investor and the Investor's adviser.") == []


# =============================================================================
# Rendering
# =============================================================================


class TestRenderer:

    def test_html_escapes_draft_values(self, draft_payload):
        draft_payload["questions"][0]["title"] = "<script>alert(1)</script>"
        html = render_html(EmailDraft.model_validate(draft_payload))

        assert "<script>" not in html
        assert "&lt;script&gt;" in html

    def test_typo_sentence(self, draft_payload):
        text = render_text(EmailDraft.model_validate(draft_payload))

        assert "On p. 4, we found “recieve” which we believe should be “receive”." in text
        assert "• Capital call timing:" in text

    def test_assumptions_block_only_when_present(self, draft_payload):
        assert ASSUMPTIONS_HEADING not in render_text(EmailDraft.model_validate(draft_payload))

        draft_payload["assumptionsBlock"] = "You confirmed the fund is closed-ended."
        text = render_text(EmailDraft.model_validate(draft_payload))
        assert ASSUMPTIONS_HEADING in text


# =============================================================================
# Follow-ups and prompt
# =============================================================================


class TestFollowUps:

    def test_next_business_day_skips_weekend(self):
        assert next_business_day(date(2026, 10, 16)) == date(2026, 10, 19)  # Friday -> Monday
        assert next_business_day(date(2026, 10, 14)) == date(2026, 10, 15)

    def test_default_follow_up(self):
        follow_ups = default_follow_ups("2026-10-16")
        assert follow_ups[0]["date"] == "2026-10-19"
        assert follow_ups[0]["type"] == "reminder"

    def test_unparseable_date(self):
        assert default_follow_ups("next Friday") == []


class TestEmailPrompt:

    def test_prompt_lists_inputs(self, email_inputs):
        prompt = build_email_prompt(email_inputs)

        assert "Acme Pension Trust" in prompt
        assert "Capital call timing at “Capital Contributions”, p. 12 (needs updated PDF: true)" in prompt
        assert "**firstTestingDate:** N/A" in prompt


# =============================================================================
# EmailComposer
# =============================================================================


class TestEmailComposer:

    @pytest.mark.asyncio
    async def test_generate(self, mock_router, make_reply, email_inputs, draft_json, quiet_logger):
        mock_router.acompletion.return_value = make_reply(draft_json)
        tracker = CostTracker()
        composer = EmailComposer(LLMClient(cost_tracker=tracker), model="m", logger=quiet_logger)

        result = await composer.generate(email_inputs)

        assert result.email.subject.startswith("Northwind Growth Fund III")
        assert "Capital call timing" in result.email.body_text
        assert result.metadata.tone_check_passed
        assert result.metadata.references_check_passed
        assert result.metadata.follow_up_schedule[0]["date"] == "2026-10-19"
        assert tracker.calls[0].component == "email_composer"

        wire = result.to_wire()
        assert set(wire["email"]) == {"subject", "bodyHtml", "bodyText"}
        assert "followUpSchedule" in wire["metadata"]

    @pytest.mark.asyncio
    async def test_model_follow_ups_are_kept(self, mock_router, make_reply, email_inputs, draft_payload, quiet_logger):
        draft_payload["followUps"] = [{"date": "2026-10-20", "type": "call"}]
        mock_router.acompletion.return_value = make_reply(json.dumps(draft_payload))

        result = await EmailComposer(LLMClient(), model="m", logger=quiet_logger).generate(email_inputs)

        assert result.metadata.follow_up_schedule == [{"date": "2026-10-20", "type": "call"}]

    @pytest.mark.asyncio
    async def test_non_json_reply(self, mock_router, make_reply, email_inputs, quiet_logger):
        mock_router.acompletion.return_value = make_reply("I cannot help with that.")

        with pytest.raises(ModelResponseError):
            await EmailComposer(LLMClient(), model="m", logger=quiet_logger).generate(email_inputs)

    @pytest.mark.asyncio
    async def test_missing_type_fails_generation(self, mock_router, make_reply, email_inputs, draft_payload, quiet_logger):
        del draft_payload["questions"][0]["type"]
        mock_router.acompletion.return_value = make_reply(json.dumps(draft_payload))

        with pytest.raises(ValidationError):
            await EmailComposer(LLMClient(), model="m", logger=quiet_logger).generate(email_inputs)

    @pytest.mark.asyncio
    async def test_null_section_title_is_error_flag(self, mock_router, make_reply, email_inputs, draft_payload, quiet_logger):
        draft_payload["questions"][0]["evidence"]["sectionTitle"] = None
        mock_router.acompletion.return_value = make_reply(json.dumps(draft_payload))

        result = await EmailComposer(LLMClient(), model="m", logger=quiet_logger).generate(email_inputs)

        assert [f.type for f in result.flags] == ["error"]
        assert result.flags[0].message == "Missing sectionTitle or pageRef for question: Capital call timing"
        assert result.metadata.references_check_passed is False
        assert result.to_wire()["metadata"]["referencesCheckPassed"] is False

    @pytest.mark.asyncio
    async def test_null_lists_and_text(self, mock_router, make_reply, email_inputs, draft_payload, quiet_logger):
        draft_payload["typos"] = None
        draft_payload["followUps"] = None
        draft_payload["questions"][0]["proposedSolution"] = None
        draft_payload["questions"][0]["requestUpdatedPDF"] = None
        mock_router.acompletion.return_value = make_reply(json.dumps(draft_payload))

        result = await EmailComposer(LLMClient(), model="m", logger=quiet_logger).generate(email_inputs)

        assert result.flags == []
        assert result.metadata.follow_up_schedule[0]["date"] == "2026-10-19"


class TestDraftParsing:

    def test_non_list_questions_read_as_empty(self, draft_payload):
        draft_payload["questions"] = "none"
        draft_payload["subject"] = None

        draft = EmailDraft.model_validate(draft_payload)

        assert draft.questions == []
        assert draft.subject == ""

    def test_null_evidence(self, draft_payload):
        draft_payload["questions"][0]["evidence"] = None

        draft = EmailDraft.model_validate(draft_payload)

        assert draft.questions[0].evidence.section_title == ""
        assert run_post_processor_checks(draft)[0].type == "error"
