"""Tests for the sanitizer, result store, screenshots, cost tracker and run logger."""

import re
from unittest.mock import MagicMock

import pytest

from reviewer.core.cost_tracker import CostTracker
from reviewer.core.errors import ErrorCategory, PipelineErrors
from reviewer.core.pipeline_logger import PipelineLogger
from reviewer.core.result_store import JsonResultStore
from reviewer.core.sanitizer import DocumentSanitizer, SanitizationRule, sanitize_text
from reviewer.core.screenshots import PageScreenshotter
from reviewer.pydantic_models.issues import AnalysisResult, Issue, IssueType


# =============================================================================
# Sanitizer
# =============================================================================


class TestSanitizer:

    def test_redacts_email_and_ssn(self):
        result = sanitize_text("Contact jane.doe@example.com, SSN 123-45-6789.")

        assert "jane.doe@example.com" not in result.sanitized_content
        assert "[EMAIL-REDACTED]" in result.sanitized_content
        assert "[SSN-REDACTED]" in result.sanitized_content
        assert result.was_sanitized
        assert result.redaction_count == 2

    def test_counts_per_rule(self):
        result = sanitize_text("a@b.com and c@d.org")
        assert result.detected_patterns == [
            {"type": "[EMAIL-REDACTED]", "count": 2, "description": "Email Address"},
        ]

    def test_clean_text_is_untouched(self):
        result = sanitize_text("The Fund invests in listed equities.")
        assert not result.was_sanitized
        assert result.sanitized_content == "The Fund invests in listed equities."

    def test_preview_does_not_modify(self):
        sanitizer = DocumentSanitizer()
        assert sanitizer.preview("Commitment of $250,000.00")[0]["type"] == "[AMOUNT-REDACTED]"
        assert sanitizer.contains_sensitive_content("Commitment of $250,000.00")

    def test_custom_rules(self):
        sanitizer = DocumentSanitizer(rules=[])
        sanitizer.add_rule(SanitizationRule(re.compile(r"LP-\d{4}"), "[INVESTOR-ID]", "Investor id"))

        assert sanitizer.sanitize("Investor LP-1234").sanitized_content == "Investor [INVESTOR-ID]"

        sanitizer.remove_rule("[INVESTOR-ID]")
        assert sanitizer.rules() == []


# =============================================================================
# JsonResultStore
# =============================================================================


class TestJsonResultStore:

    def test_save_and_load(self, tmp_path):
        store = JsonResultStore(tmp_path / "results")
        result = AnalysisResult(file_name="sub_doc.pdf", issues=[Issue(page=2, type=IssueType.TYPO)])

        document_id = store.save(result)

        assert (tmp_path / "results" / f"sub_doc_{document_id}.json").exists()
        assert store.load(document_id) == result
        assert store.list_ids() == [document_id]

    def test_load_unknown_id(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            JsonResultStore(tmp_path).load("deadbeef0000")

    def test_unwritable_directory_raises(self, tmp_path):
        blocker = tmp_path / "results"
        blocker.write_text("a file, not a directory")

        with pytest.raises(OSError):
            JsonResultStore(blocker).save(AnalysisResult(file_name="a.pdf"))


# =============================================================================
# PageScreenshotter
# =============================================================================


class TestPageScreenshotter:

    def test_render_is_jpeg_data_url(self, make_pdf):
        with PageScreenshotter(make_pdf(["Page one"]), scale=1.0) as shots:
            url = shots.screenshot(1)

        assert url.startswith("data:image/jpeg;base64,")

    def test_missing_page_yields_none_and_warning(self, make_pdf):
        errors = PipelineErrors()
        with PageScreenshotter(make_pdf(["Page one"]), scale=1.0) as shots:
            assert shots.screenshot(5, errors) is None

        assert errors.warnings[0].category == ErrorCategory.SCREENSHOT
        assert errors.warnings[0].page == 5

    def test_enrich_keeps_issues_without_screenshot(self, make_pdf):
        issues = [Issue(page=1, type=IssueType.TYPO), Issue(page=9, type=IssueType.TYPO)]
        with PageScreenshotter(make_pdf(["Page one"]), scale=1.0) as shots:
            enriched = shots.enrich(issues)

        assert enriched[0].screenshot_url is not None
        assert enriched[1].screenshot_url is None
        assert issues[0].screenshot_url is None

    def test_page_rendered_once(self, make_pdf):
        with PageScreenshotter(make_pdf(["Page one"]), scale=1.0) as shots:
            shots.render = MagicMock(return_value="data:image/jpeg;base64,AAAA")
            shots.screenshot(1)
            shots.screenshot(1)

        shots.render.assert_called_once_with(1)


# =============================================================================
# CostTracker
# =============================================================================


class TestCostTracker:

    def test_record_and_group(self):
        tracker = CostTracker()
        tracker.record("m", MagicMock(prompt_tokens=10, completion_tokens=5), component="model_detector")
        tracker.record("m", MagicMock(prompt_tokens=20, completion_tokens=5), component="email_composer")

        breakdown = tracker.by_component()
        assert tracker.call_count == 2
        assert breakdown["model_detector"]["tokens"] == 15
        assert breakdown["email_composer"]["calls"] == 1

    def test_missing_usage_not_counted(self):
        tracker = CostTracker()
        tracker.record("m", None)
        assert tracker.call_count == 0


# =============================================================================
# PipelineLogger
# =============================================================================


class TestPipelineLogger:

    def test_run_log_file(self, tmp_path):
        logger = PipelineLogger(name="reviewer.tests.file", log_dir=tmp_path / "logs")

        logger.start_review("sub_doc.pdf", method="local_patterns")
        logger.start_stage("detection", detail="rule detectors")
        logger.stage_result("Detection complete", issues=3)
        logger.end_review(success=True, stats={"issues": 3, "by_type": {"typo": 3}})

        log_file = logger.log_file
        assert log_file.parent == tmp_path / "logs"
        assert log_file.name.startswith("sub_doc_")
        content = log_file.read_text(encoding="utf-8")
        assert "Reviewing: sub_doc.pdf (local_patterns)" in content
        assert "issues=3" in content

    def test_for_run_has_own_state(self, tmp_path):
        parent = PipelineLogger(name="reviewer.tests.parent", log_dir=tmp_path / "logs")

        first = parent.for_run()
        second = parent.for_run()

        assert first.logger.name.startswith("reviewer.tests.parent.run")
        assert first.logger is not second.logger
        assert first.logger.handlers == []
        assert first.logger.propagate

        first.start_review("a.pdf")
        assert second.log_file is None
        first.end_review()
        assert first.logger.handlers == []
