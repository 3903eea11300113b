"""Tests for reviewer.core.errors module.

Tests the error handling infrastructure:
- Pipeline-level exceptions
- ErrorRecord dataclass
- PipelineErrors accumulator
- Error factory functions
"""

from reviewer.core.errors import (
    ReviewError,
    ExtractionError,
    ModelTimeoutError,
    ModelResponseError,
    ValidationError,
    ErrorRecord,
    PipelineErrors,
    ErrorCategory,
    ErrorSeverity,
    detector_error,
    page_read_error,
    screenshot_error,
    persistence_error,
    llm_parse_error,
    timeout_error,
    page_range_error,
)


# =============================================================================
# Exception tests
# =============================================================================


class TestExceptions:
    """Tests for pipeline-level exceptions."""

    def test_all_derive_from_review_error(self):
        """Callers can catch every pipeline failure with one except clause."""
        for exc in (
            ExtractionError("bad pdf"),
            ModelTimeoutError(5.0),
            ModelResponseError("bad json", raw_response="{"),
            ValidationError("missing type", field_name="type"),
        ):
            assert isinstance(exc, ReviewError)

    def test_timeout_carries_deadline(self):
        exc = ModelTimeoutError(30.0)
        assert exc.timeout_seconds == 30.0
        assert "30.0s" in str(exc)

    def test_response_error_keeps_raw_text(self):
        exc = ModelResponseError("Model returned invalid JSON", raw_response="not json")
        assert exc.raw_response == "not json"
        assert str(exc) == "Model returned invalid JSON"

    def test_validation_error_field(self):
        exc = ValidationError("Question #1 is missing a type", field_name="type")
        assert exc.field_name == "type"


# =============================================================================
# ErrorRecord tests
# =============================================================================


class TestErrorRecord:
    """Tests for ErrorRecord dataclass."""

    def test_str_includes_context(self):
        record = ErrorRecord(
            category=ErrorCategory.DETECTOR,
            severity=ErrorSeverity.WARNING,
            message="rule raised",
            stage="detection",
            source="patterns:double_spaces",
            page=3,
        )
        text = str(record)
        assert "[WARNING] detector: rule raised" in text
        assert "source=patterns:double_spaces" in text
        assert "page=3" in text

    def test_to_dict_drops_original_exception(self):
        record = detector_error("boom", detector="numbering", original=RuntimeError("boom"))
        data = record.to_dict()
        assert data["category"] == "detector"
        assert data["severity"] == "warning"
        assert data["source"] == "numbering"
        assert "original_error" not in data


# =============================================================================
# PipelineErrors tests
# =============================================================================


class TestPipelineErrors:
    """Tests for PipelineErrors accumulator."""

    def test_warnings_and_errors_are_separated(self):
        errors = PipelineErrors()
        errors.add(detector_error("rule failed", detector="patterns"))
        errors.add(timeout_error("detection", 120.0))

        assert errors.warning_count == 1
        assert errors.error_count == 1

    def test_failed_sources_are_unique(self):
        errors = PipelineErrors()
        errors.add(screenshot_error(1))
        errors.add(screenshot_error(2))

        assert errors.failed_sources == ["screenshots"]

    def test_summary_counts_by_category(self):
        errors = PipelineErrors()
        errors.add(screenshot_error(1))
        errors.add(screenshot_error(2))
        errors.add(persistence_error("disk full"))

        summary = errors.summary()
        assert summary["total_warnings"] == 3
        assert summary["by_category"] == {"screenshot": 2, "persistence": 1}

    def test_to_dict_is_json_ready(self):
        errors = PipelineErrors()
        errors.add(llm_parse_error("invalid JSON", stage="detection", raw_response="x" * 1000))

        data = errors.to_dict()
        assert len(data["errors"]) == 1
        assert len(data["errors"][0]["context"]["raw_response"]) == 500


# =============================================================================
# Factory tests
# =============================================================================


class TestFactories:
    """Tests for error factory functions."""

    def test_page_read_error(self):
        record = page_read_error(4, "sub_doc.pdf")
        assert record.category == ErrorCategory.PDF_READ
        assert record.severity == ErrorSeverity.WARNING
        assert record.page == 4
        assert "sub_doc.pdf" in record.message

    def test_timeout_error_message(self):
        assert timeout_error("detection", 30.0).message == "Operation timed out after 30.0s"
        assert timeout_error("detection").message == "Operation timed out"

    def test_persistence_error_is_warning(self):
        record = persistence_error("Could not save", original=OSError("read-only"))
        assert record.severity == ErrorSeverity.WARNING
        assert record.stage == "persistence"

    def test_page_range_error(self):
        record = page_range_error(99, 2)
        assert record.category == ErrorCategory.LLM_PARSE
        assert record.severity == ErrorSeverity.WARNING
        assert record.page == 99
        assert record.message == "Model reported page 99 of a 2-page document, moved to page 2"
