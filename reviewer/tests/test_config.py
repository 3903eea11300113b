"""Tests for reviewer.core.config module."""

import re

from reviewer.core.config import (
    DEFAULT_MODELS,
    ContextWindows,
    EmailConfig,
    FileLimits,
    LLMConfig,
    ModelConfig,
    LLM_PROVIDER,
    PageSplitConfig,
    TerminologyGroups,
)
from reviewer.core.llm_router import PROVIDER_WILDCARDS, _build_model_list


class TestModelDefaults:

    def test_every_model_method_has_a_default(self):
        for key in ("company_llm", "external_ai", "email"):
            assert DEFAULT_MODELS[key]

    def test_timeout_is_positive(self):
        assert ModelConfig.TIMEOUT_SECONDS > 0

    def test_json_mode_is_default(self):
        assert LLMConfig.RESPONSE_FORMAT == {"type": "json_object"}


class TestRouterModels:

    def test_configured_models_are_deployed(self):
        names = [entry["model_name"] for entry in _build_model_list()]
        for model in DEFAULT_MODELS.values():
            assert model in names

    def test_provider_wildcard_comes_last(self):
        last = _build_model_list()[-1]
        assert last["model_name"] == PROVIDER_WILDCARDS[LLM_PROVIDER]
        assert last["litellm_params"]["model"] == PROVIDER_WILDCARDS[LLM_PROVIDER]


class TestDocumentLimits:

    def test_page_break_is_form_feed(self):
        assert PageSplitConfig.PAGE_BREAK == "\f"

    def test_fallback_page_size(self):
        assert PageSplitConfig.CHARS_PER_PAGE == 3000

    def test_file_size_limit_is_ten_megabytes(self):
        assert FileLimits.MAX_FILE_SIZE == 10 * 1024 * 1024

    def test_pdf_header_checked_in_first_kilobyte(self):
        assert FileLimits.PDF_MAGIC == b"%PDF"
        assert FileLimits.MAGIC_SEARCH_BYTES == 1024

    def test_context_windows(self):
        assert ContextWindows.CROSS_REFERENCE == 40
        assert ContextWindows.PATTERN_MATCH == 50


class TestEmailConfig:

    def test_page_ref_pattern(self):
        pattern = re.compile(EmailConfig.PAGE_REF_PATTERN)
        assert pattern.search("p. 12")
        assert not pattern.search("page 12")

    def test_terminology_groups(self):
        assert "Investor" in TerminologyGroups.INVESTOR
        assert "Subscriber" in TerminologyGroups.INVESTOR
        assert "Partnership" in TerminologyGroups.FUND
