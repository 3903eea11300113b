"""Core utilities for the review pipeline."""

from reviewer.core.config import (
    LLM_PROVIDER,
    API_KEY_ENV_VAR,
    API_KEY_ENV_VARS,
    DEFAULT_MODELS,
    SMART_MODEL,
    FAST_MODEL,
    DOCUMENT_MODEL,
    ModelConfig,
    LLMConfig,
    FileLimits,
    PageSplitConfig,
    ContextWindows,
    ScreenshotConfig,
    TerminologyGroups,
    EmailConfig,
)
from reviewer.core.errors import (
    ReviewError,
    ExtractionError,
    ModelTimeoutError,
    ModelResponseError,
    ValidationError,
    ErrorSeverity,
    ErrorCategory,
    ErrorRecord,
    PipelineErrors,
    detector_error,
    page_read_error,
    screenshot_error,
    persistence_error,
    llm_parse_error,
    timeout_error,
)
from reviewer.core.pdf_reader import PageExtractor, extract_pages, split_pages, page_for_offset
from reviewer.core.pipeline_logger import PipelineLogger
from reviewer.core.cost_tracker import CostTracker, CallUsage
from reviewer.core.llm_client import LLMClient, LLMResponse
from reviewer.core.sanitizer import DocumentSanitizer, SanitizationResult, SanitizationRule, sanitize_text
from reviewer.core.result_normalizer import (
    normalize_issue,
    normalize_issues,
    normalize_result,
    merge_results,
)
from reviewer.core.screenshots import PageScreenshotter
from reviewer.core.result_store import ResultStore, JsonResultStore

__all__ = [
    # Configuration
    "LLM_PROVIDER",
    "API_KEY_ENV_VAR",
    "API_KEY_ENV_VARS",
    "DEFAULT_MODELS",
    "SMART_MODEL",
    "FAST_MODEL",
    "DOCUMENT_MODEL",
    "ModelConfig",
    "LLMConfig",
    "FileLimits",
    "PageSplitConfig",
    "ContextWindows",
    "ScreenshotConfig",
    "TerminologyGroups",
    "EmailConfig",
    # Errors
    "ReviewError",
    "ExtractionError",
    "ModelTimeoutError",
    "ModelResponseError",
    "ValidationError",
    "ErrorSeverity",
    "ErrorCategory",
    "ErrorRecord",
    "PipelineErrors",
    "detector_error",
    "page_read_error",
    "screenshot_error",
    "persistence_error",
    "llm_parse_error",
    "timeout_error",
    # PDF text
    "PageExtractor",
    "extract_pages",
    "split_pages",
    "page_for_offset",
    # Logging and cost
    "PipelineLogger",
    "CostTracker",
    "CallUsage",
    # LLM Client
    "LLMClient",
    "LLMResponse",
    # Sanitizer
    "DocumentSanitizer",
    "SanitizationResult",
    "SanitizationRule",
    "sanitize_text",
    # Normalization
    "normalize_issue",
    "normalize_issues",
    "normalize_result",
    "merge_results",
    # Collaborators
    "PageScreenshotter",
    "ResultStore",
    "JsonResultStore",
]
