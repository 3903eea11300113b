"""Error types for the review pipeline.

Two layers:
- Exceptions (ReviewError and subclasses) for pipeline-level failures that
  abort a run and must reach the caller distinctly from "zero issues found".
- ErrorRecord / PipelineErrors for detector-level failures that are logged,
  recorded, and excluded while the rest of the pipeline proceeds.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


# Exceptions

class ReviewError(Exception):
    """Base class for pipeline-level failures."""


class ExtractionError(ReviewError):
    """The PDF could not be read (corrupt, empty, oversized, not a PDF)."""


class ModelTimeoutError(ReviewError):
    """The model call exceeded its deadline and was cancelled.

    Retryable by the caller; never retried internally.
    """

    def __init__(self, timeout_seconds: float):
        self.timeout_seconds = timeout_seconds
        super().__init__(f"Model call timed out after {timeout_seconds}s")


class ModelResponseError(ReviewError):
    """The model returned something that is not the expected JSON object.

    Carries the raw text so the failure can be diagnosed.
    """

    def __init__(self, message: str, raw_response: str):
        self.raw_response = raw_response
        super().__init__(message)


class ValidationError(ReviewError):
    """An email draft is missing a mandatory structural field."""

    def __init__(self, message: str, field_name: str | None = None):
        self.field_name = field_name
        super().__init__(message)


# Structured records for non-fatal failures

class ErrorSeverity(Enum):
    """Severity levels for recorded errors."""
    WARNING = "warning"   # Non-fatal, the failing part was excluded
    ERROR = "error"       # Fatal for this item, pipeline continued
    CRITICAL = "critical" # Pipeline halted


class ErrorCategory(Enum):
    """Categories of recorded errors."""
    DETECTOR = "detector"         # A detector or single rule raised
    LLM_API = "llm_api"           # Router/LiteLLM errors
    LLM_PARSE = "llm_parse"       # JSON parsing errors from LLM response
    PDF_READ = "pdf_read"         # PDF reading errors
    SCREENSHOT = "screenshot"     # Page rendering failed
    PERSISTENCE = "persistence"   # Result could not be saved
    VALIDATION = "validation"     # Draft validation errors
    TIMEOUT = "timeout"           # Operation timeout
    UNKNOWN = "unknown"           # Unclassified errors


@dataclass
class ErrorRecord:
    """Structured error with context."""

    category: ErrorCategory
    severity: ErrorSeverity
    message: str
    stage: str                     # Pipeline stage where the error occurred
    source: str | None = None      # Detector, rule id, or collaborator name
    page: int | None = None
    original_error: Exception | None = None
    context: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        parts = [f"[{self.severity.value.upper()}] {self.category.value}: {self.message}"]
        if self.source:
            parts.append(f"source={self.source}")
        if self.stage:
            parts.append(f"stage={self.stage}")
        if self.page is not None:
            parts.append(f"page={self.page}")
        return " | ".join(parts)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "category": self.category.value,
            "severity": self.severity.value,
            "message": self.message,
            "stage": self.stage,
            "source": self.source,
            "page": self.page,
            "context": self.context,
        }


@dataclass
class PipelineErrors:
    """Aggregate errors across one review run."""

    errors: list[ErrorRecord] = field(default_factory=list)
    warnings: list[ErrorRecord] = field(default_factory=list)
    failed_sources: list[str] = field(default_factory=list)

    def add(self, error: ErrorRecord):
        """Add an error or warning."""
        if error.severity == ErrorSeverity.WARNING:
            self.warnings.append(error)
        else:
            self.errors.append(error)
        if error.source and error.source not in self.failed_sources:
            self.failed_sources.append(error.source)

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def warning_count(self) -> int:
        return len(self.warnings)

    def summary(self) -> dict:
        """Get summary statistics."""
        by_category = {}
        for error in self.errors + self.warnings:
            cat = error.category.value
            by_category[cat] = by_category.get(cat, 0) + 1

        return {
            "total_errors": self.error_count,
            "total_warnings": self.warning_count,
            "failed_sources": len(self.failed_sources),
            "by_category": by_category,
        }

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "errors": [e.to_dict() for e in self.errors],
            "warnings": [w.to_dict() for w in self.warnings],
            "failed_sources": self.failed_sources,
            "summary": self.summary(),
        }


# Factory functions for common records

def detector_error(
    message: str,
    detector: str,
    original: Exception | None = None,
    page: int | None = None,
) -> ErrorRecord:
    """A detector (or one of its rules) raised and was excluded."""
    return ErrorRecord(
        category=ErrorCategory.DETECTOR,
        severity=ErrorSeverity.WARNING,
        message=message,
        stage="detection",
        source=detector,
        page=page,
        original_error=original,
    )


def page_read_error(page: int, file_name: str) -> ErrorRecord:
    """One page yielded no text; the rest of the document was still read."""
    return ErrorRecord(
        category=ErrorCategory.PDF_READ,
        severity=ErrorSeverity.WARNING,
        message=f"Text extraction failed for page {page} of {file_name}",
        stage="extraction",
        source="pdf_reader",
        page=page,
    )


def screenshot_error(
    page: int,
    original: Exception | None = None,
) -> ErrorRecord:
    """A page screenshot could not be produced."""
    return ErrorRecord(
        category=ErrorCategory.SCREENSHOT,
        severity=ErrorSeverity.WARNING,
        message=f"Screenshot unavailable for page {page}",
        stage="enrichment",
        source="screenshots",
        page=page,
        original_error=original,
    )


def persistence_error(
    message: str,
    original: Exception | None = None,
) -> ErrorRecord:
    """The analysis succeeded but could not be saved."""
    return ErrorRecord(
        category=ErrorCategory.PERSISTENCE,
        severity=ErrorSeverity.WARNING,
        message=message,
        stage="persistence",
        source="result_store",
        original_error=original,
    )


def llm_parse_error(
    message: str,
    stage: str,
    raw_response: str | None = None,
) -> ErrorRecord:
    """Create an LLM parse error."""
    return ErrorRecord(
        category=ErrorCategory.LLM_PARSE,
        severity=ErrorSeverity.ERROR,
        message=message,
        stage=stage,
        context={"raw_response": raw_response[:500] if raw_response else None},
    )


def timeout_error(
    stage: str,
    timeout_seconds: float | None = None,
) -> ErrorRecord:
    """Create a timeout error."""
    return ErrorRecord(
        category=ErrorCategory.TIMEOUT,
        severity=ErrorSeverity.ERROR,
        message=f"Operation timed out after {timeout_seconds}s" if timeout_seconds else "Operation timed out",
        stage=stage,
    )


def page_range_error(reported: int, page_count: int) -> ErrorRecord:
    """The model cited a page the document does not have; the issue was kept on the last page."""
    return ErrorRecord(
        category=ErrorCategory.LLM_PARSE,
        severity=ErrorSeverity.WARNING,
        message=f"Model reported page {reported} of a {page_count}-page document, moved to page {page_count}",
        stage="detection",
        source="model",
        page=reported,
    )
