"""Pydantic models for the review pipeline.

Modules:
- issues: IssueType, Issue, AnalysisResult (the analysis output schema)
- email_models: Email drafting inputs, model draft schema, and results
- processing: Processing-method variants (company LLM, external AI, local patterns, manual)
"""

from reviewer.pydantic_models.issues import (
    ISSUE_TYPES,
    AnalysisResult,
    AnalysisSummary,
    Issue,
    IssueType,
)
from reviewer.pydantic_models.email_models import (
    Customer,
    DraftQuestion,
    DraftTypo,
    EmailDraft,
    EmailGenerationInputs,
    EmailGenerationResult,
    EmailIssue,
    EmailMetadata,
    Evidence,
    Fund,
    GeneratedEmail,
    PostProcessorFlag,
    Typo,
)
from reviewer.pydantic_models.processing import (
    PROCESSING_METHODS,
    CompanyLLM,
    ExternalAI,
    LocalPatterns,
    ManualOnly,
    ProcessingMethod,
    parse_processing_method,
)

__all__ = [
    # Analysis output
    "ISSUE_TYPES",
    "AnalysisResult",
    "AnalysisSummary",
    "Issue",
    "IssueType",
    # Email inputs
    "Customer",
    "Fund",
    "EmailIssue",
    "Typo",
    "EmailGenerationInputs",
    # Email draft
    "Evidence",
    "DraftQuestion",
    "DraftTypo",
    "EmailDraft",
    # Email result
    "PostProcessorFlag",
    "GeneratedEmail",
    "EmailMetadata",
    "EmailGenerationResult",
    # Processing methods
    "PROCESSING_METHODS",
    "CompanyLLM",
    "ExternalAI",
    "LocalPatterns",
    "ManualOnly",
    "ProcessingMethod",
    "parse_processing_method",
]
