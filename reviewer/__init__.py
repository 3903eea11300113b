"""Subscription Document Review Pipeline.

Finds cross-reference, numbering, typo, formatting and logic-point issues in
subscription-document PDFs, and drafts the confirmation email that goes back
to the customer.

Architecture:
    core/             - PDF text, config, errors, logging, LLM client, collaborators
    detectors/        - Rule-based and model-based issue detectors
    prompts/          - LLM prompt templates
    email/            - Email drafting, post-processor checks, rendering
    pydantic_models/  - Pydantic models for issues, email and processing methods

Usage:
    from reviewer import ReviewOrchestrator, LocalPatterns

    orchestrator = ReviewOrchestrator()
    outcome = await orchestrator.review_file("sub_doc.pdf", LocalPatterns())

CLI:
    uv run review analyze docs/sub_doc.pdf
"""

from reviewer.orchestrator import ReviewOrchestrator, ReviewOutcome
from reviewer.email.composer import EmailComposer
from reviewer.pydantic_models import (
    # Analysis output
    AnalysisResult,
    AnalysisSummary,
    Issue,
    IssueType,
    # Email
    EmailGenerationInputs,
    EmailGenerationResult,
    # Processing methods
    CompanyLLM,
    ExternalAI,
    LocalPatterns,
    ManualOnly,
    ProcessingMethod,
)

__all__ = [
    # Main entry points
    "ReviewOrchestrator",
    "ReviewOutcome",
    "EmailComposer",
    # Analysis output
    "AnalysisResult",
    "AnalysisSummary",
    "Issue",
    "IssueType",
    # Email
    "EmailGenerationInputs",
    "EmailGenerationResult",
    # Processing methods
    "CompanyLLM",
    "ExternalAI",
    "LocalPatterns",
    "ManualOnly",
    "ProcessingMethod",
]
