"""Centralized configuration for the review pipeline.

All magic numbers, thresholds, and configuration constants are documented here.
Each constant includes:
- What it controls
- Why this value was chosen
- What changing it affects
"""

import os
from typing import Final


# =============================================================================
# LLM Provider Configuration
# =============================================================================
#
# To switch providers, set the LLM_PROVIDER environment variable:
#   - "openrouter" (default): Uses OpenRouter API gateway
#   - "azure": Uses Azure OpenAI Service (the in-house "company LLM" setup)
#
# For Azure, also set:
#   - AZURE_API_KEY: Your Azure OpenAI API key
#   - AZURE_API_BASE: Your Azure endpoint (e.g., https://your-resource.openai.azure.com/)
#   - AZURE_API_VERSION: API version (e.g., 2024-02-15-preview)
#
# =============================================================================

LLM_PROVIDER: Final[str] = os.environ.get("LLM_PROVIDER", "openrouter")
"""LLM provider to use. Set via LLM_PROVIDER env var.

Supported values:
- "openrouter": OpenRouter API gateway (default)
- "azure": Azure OpenAI Service
"""

API_KEY_ENV_VARS: Final[dict[str, str]] = {
    "openrouter": "OPENROUTER_API_KEY",
    "azure": "AZURE_API_KEY",
}

API_KEY_ENV_VAR: Final[str] = API_KEY_ENV_VARS.get(LLM_PROVIDER, "OPENROUTER_API_KEY")
"""Environment variable name for the LLM API key (provider-dependent)."""


# =============================================================================
# Model Configuration (Provider-Specific)
# =============================================================================

def _get_model_name(base_model: str, vendor: str = "openai") -> str:
    """Convert a base model name to provider-specific format.

    Args:
        base_model: Base model name (e.g., "gpt-4o", "gemini-2.0-flash-001")
        vendor: OpenRouter vendor segment (ignored for Azure).

    Returns:
        Provider-specific model identifier.
    """
    if LLM_PROVIDER == "azure":
        deployment_env = f"AZURE_DEPLOYMENT_{base_model.upper().replace('-', '_').replace('.', '_')}"
        return f"azure/{os.environ.get(deployment_env, base_model)}"
    return f"openrouter/{vendor}/{base_model}"


SMART_MODEL: Final[str] = _get_model_name("gpt-4o")
"""Model for email drafting, where tone and structure matter most."""

FAST_MODEL: Final[str] = _get_model_name("gpt-4o-mini")
"""Model for text-only document analysis (CompanyLLM processing)."""

DOCUMENT_MODEL: Final[str] = (
    _get_model_name("gpt-4o")
    if LLM_PROVIDER == "azure"
    else _get_model_name("gemini-2.0-flash-001", vendor="google")
)
"""Model that accepts a raw PDF file part (ExternalAI processing).

On OpenRouter this is a Gemini Flash model, which reads PDFs natively.
Azure deployments fall back to the smart model.
"""

DEFAULT_MODELS: Final[dict[str, str]] = {
    "company_llm": FAST_MODEL,
    "external_ai": DOCUMENT_MODEL,
    "email": SMART_MODEL,
}
"""Default LLM models per component.

Override per run through the processing method (``CompanyLLM(model=...)``)
or the ``--model`` CLI flag.
"""


# Model Call Configuration

class ModelConfig:
    """Deadline and sizing for document-analysis model calls."""

    TIMEOUT_SECONDS: Final[float] = 120.0
    """Hard deadline for a single analysis call.

    The call is cancelled when this elapses and ModelTimeoutError is raised.
    Large subscription documents take 30-60s on flash-class models.
    Used by: model_detector.py
    """

    MAX_TOKENS: Final[int] = 4000
    """Completion budget for the analysis response."""

    TEMPERATURE: Final[float] = 0.1
    """Low temperature for consistent analysis across runs."""


class LLMConfig:
    """Default parameters for LLM API calls."""

    TEMPERATURE: Final[float] = 0.0
    """Sampling temperature for JSON-mode calls (email drafting)."""

    RESPONSE_FORMAT: Final[dict[str, str]] = {"type": "json_object"}
    """Response format enforcing JSON output."""


# Text Extraction Configuration

class FileLimits:
    """Limits applied to uploaded documents."""

    MAX_FILE_SIZE: Final[int] = 10 * 1024 * 1024
    """Maximum PDF size in bytes (10 MB).

    Used by: pdf_reader.py:PageExtractor
    """

    PDF_MAGIC: Final[bytes] = b"%PDF"
    """Leading bytes of a PDF document.

    Used by: pdf_reader.py:PageExtractor, to reject non-PDF uploads before parsing
    """

    MAGIC_SEARCH_BYTES: Final[int] = 1024
    """Readers accept the header anywhere in the first 1 KB, so the check does too."""


class PageSplitConfig:
    """Fallback paging when text carries no page-break markers."""

    PAGE_BREAK: Final[str] = "\f"
    """Form feed, emitted between pages by most text extractors."""

    CHARS_PER_PAGE: Final[int] = 3000
    """Approximate characters per page when no page breaks exist.

    Page numbers derived from this fallback are approximate; downstream
    consumers must tolerate that.
    Used by: pdf_reader.py:split_pages()
    """


class ContextWindows:
    """Characters of surrounding text captured with each finding."""

    CROSS_REFERENCE: Final[int] = 40
    """Characters on each side of a section mention.
    Used by: cross_reference.py
    """

    PATTERN_MATCH: Final[int] = 50
    """Characters on each side of a rule match.
    Used by: pattern_detector.py
    """


class ScreenshotConfig:
    """Page rendering for issue screenshots."""

    SCALE: Final[float] = 2.0
    """Render zoom factor. 2x keeps small print legible."""

    JPEG_QUALITY: Final[int] = 90
    """JPEG quality for rendered pages."""


# Email Post-Processing

class TerminologyGroups:
    """Synonym groups that must not be mixed inside one email.

    Using more than one term from a group suggests the draft refers to the
    same party under different names.
    Used by: post_processor.py:check_terminology()
    """

    INVESTOR: Final[tuple[str, ...]] = ("Investor", "Subscriber", "Applicant")
    FUND: Final[tuple[str, ...]] = ("Fund", "Partnership")


class EmailConfig:
    """Email-drafting constants."""

    PAGE_REF_PATTERN: Final[str] = r"p\. \d+"
    """Required page reference format, e.g. "p. 12"."""

    UPDATED_PDF_KEYWORDS: Final[tuple[str, ...]] = ("updated", "revised")
    """Words that show a question explicitly asks for a new PDF."""

    FOLLOW_UP_BUSINESS_DAYS: Final[int] = 1
    """Business days after the expected reply date for the default follow-up."""
