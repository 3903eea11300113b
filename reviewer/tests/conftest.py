"""Pytest configuration and shared fixtures.

Provides reusable test fixtures for:
- Real in-memory PDFs built with PyMuPDF
- A patched litellm Router for model calls
- A quiet run logger
- Sample email inputs and drafts
"""

import json

import fitz  # PyMuPDF
import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from reviewer.core.pipeline_logger import PipelineLogger
from reviewer.pydantic_models.email_models import EmailGenerationInputs


# =============================================================================
# PDFs
# =============================================================================


def build_pdf(pages: list[str]) -> bytes:
    """One PDF page per string, text placed top-left."""
    doc = fitz.open()
    for text in pages:
        page = doc.new_page()
        page.insert_text((72, 72), text, fontsize=11)
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture
def make_pdf():
    """Factory fixture: make_pdf(["page 1 text", "page 2 text"]) -> bytes."""
    return build_pdf


@pytest.fixture
def two_page_pdf():
    """Page 1 declares Section 1 and mentions Section 2; page 2 mentions Section 3."""
    return build_pdf([
        "Section 1: Introduction\nThe terms are described in Section 2 below.",
        "Subscription Terms\nThe fees are described in Section 3.",
    ])


# =============================================================================
# LLM
# =============================================================================


def router_reply(content: str, prompt_tokens: int = 100, completion_tokens: int = 50) -> MagicMock:
    """A litellm-shaped completion response."""
    return MagicMock(
        choices=[MagicMock(message=MagicMock(content=content))],
        usage=MagicMock(prompt_tokens=prompt_tokens, completion_tokens=completion_tokens),
    )


@pytest.fixture
def make_reply():
    """Factory fixture: make_reply(content) -> router response."""
    return router_reply


@pytest.fixture
def mock_router():
    """Patch the module-level Router used by LLMClient."""
    with patch("reviewer.core.llm_client.router") as mock:
        mock.acompletion = AsyncMock()
        mock.acompletion.return_value = router_reply('{"issues": []}')
        yield mock


# =============================================================================
# Logging
# =============================================================================


@pytest.fixture
def quiet_logger():
    """A run logger writing to its own named logger (no log directory)."""
    return PipelineLogger(name="reviewer.tests")


# =============================================================================
# Email
# =============================================================================


@pytest.fixture
def email_inputs():
    """Inputs for one customer with one issue and one typo."""
    return EmailGenerationInputs.model_validate({
        "customer": {"name": "Acme Pension Trust", "timezone": "Europe/London", "isExistingCustomer": True},
        "funds": [{"name": "Northwind Growth Fund III"}],
        "issues": [{
            "category": "Capital call timing",
            "sectionTitle": "Capital Contributions",
            "pageRef": "p. 12",
            "needsUpdatedPDF": True,
        }],
        "typos": [{"pageRef": "p. 4", "excerpt": "recieve", "suggestedFix": "receive"}],
        "expectedDate": "2026-10-16",
    })


@pytest.fixture
def draft_payload():
    """A well-formed draft as the model would return it."""
    return {
        "subject": "Northwind Growth Fund III - subscription document review",
        "opening": "Dear Acme team, thank you for sending the subscription documents.",
        "assumptionsBlock": None,
        "questions": [{
            "type": "logic_point",
            "title": "Capital call timing",
            "issue": "The notice period for capital calls is not stated.",
            "evidence": {"sectionTitle": "Capital Contributions", "pageRef": "p. 12"},
            "proposedSolution": "Please confirm the notice period and send an updated PDF.",
            "requestUpdatedPDF": True,
        }],
        "typos": [{"pageRef": "p. 4", "excerpt": "recieve", "suggestedFix": "receive"}],
        "closing": "We look forward to your reply.",
        "signature": "Legal Operations",
        "followUps": [],
    }


@pytest.fixture
def draft_json(draft_payload):
    return json.dumps(draft_payload)
