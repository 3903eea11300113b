"""Processing methods: how a document gets analyzed.

A closed set of variants, each carrying only what it needs. The orchestrator
dispatches on ``method`` and every variant yields the same AnalysisResult.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter

from reviewer.core.config import DEFAULT_MODELS


class CompanyLLM(BaseModel):
    """Extracted text is sent to the in-house (OpenAI-compatible) model."""

    method: Literal["company_llm"] = "company_llm"
    model: str = DEFAULT_MODELS["company_llm"]
    include_rule_detectors: bool = Field(
        default=False,
        description="Also run the rule-based detectors and merge their issues",
    )
    sanitize: bool = Field(
        default=True,
        description="Redact sensitive values before the text leaves the process",
    )


class ExternalAI(BaseModel):
    """The original PDF is sent, base64-encoded, to an external model."""

    method: Literal["external_ai"] = "external_ai"
    model: str = DEFAULT_MODELS["external_ai"]
    include_rule_detectors: bool = False


class LocalPatterns(BaseModel):
    """Rule-based detectors only; nothing leaves the process."""

    method: Literal["local_patterns"] = "local_patterns"
    disabled_rules: list[str] = Field(
        default_factory=list,
        description="Pattern rule ids to switch off for this run",
    )


class ManualOnly(BaseModel):
    """No automated detection; the document is flagged for manual review."""

    method: Literal["manual_only"] = "manual_only"


ProcessingMethod = Annotated[
    Union[CompanyLLM, ExternalAI, LocalPatterns, ManualOnly],
    Field(discriminator="method"),
]

_METHOD_ADAPTER: TypeAdapter = TypeAdapter(ProcessingMethod)

PROCESSING_METHODS: tuple[str, ...] = ("company_llm", "external_ai", "local_patterns", "manual_only")


def parse_processing_method(value: str | dict) -> CompanyLLM | ExternalAI | LocalPatterns | ManualOnly:
    """Build a processing method from its name or a dict with a ``method`` key."""
    if isinstance(value, str):
        value = {"method": value}
    return _METHOD_ADAPTER.validate_python(value)
