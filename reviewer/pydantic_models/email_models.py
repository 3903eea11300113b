"""Models for confirmation-email drafting.

Three groups:
- Inputs: what the caller knows (customer, funds, issues, typos, dates)
- Draft: the structured JSON the model is asked to return
- Result: rendered bodies, post-processor flags, and derived metadata
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


# Inputs

class Customer(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    timezone: str = "UTC"
    is_existing_customer: bool = Field(default=False, alias="isExistingCustomer")


class Fund(BaseModel):
    name: str


class EmailIssue(BaseModel):
    """An issue to raise with the customer, as selected by the reviewer."""

    model_config = ConfigDict(populate_by_name=True)

    category: str = Field(description="Issue category, e.g. 'logic_point' or 'Capital call timing'")
    section_title: str = Field(default="", alias="sectionTitle")
    page_ref: str = Field(default="", alias="pageRef", description="Printed page, e.g. 'p. 12'")
    needs_updated_pdf: bool = Field(default=False, alias="needsUpdatedPDF")


class Typo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    page_ref: str = Field(alias="pageRef")
    excerpt: str
    suggested_fix: str = Field(alias="suggestedFix")


class EmailGenerationInputs(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    customer: Customer
    funds: list[Fund] = Field(default_factory=list)
    issues: list[EmailIssue] = Field(default_factory=list)
    typos: list[Typo] = Field(default_factory=list)
    expected_date: str = Field(alias="expectedDate", description="Reply-by date, ISO format")
    first_testing_date: str | None = Field(default=None, alias="firstTestingDate")


# Draft (model output)

def blank_if_null(value):
    return "" if value is None else value


def list_or_empty(value):
    """Anything that is not a list (null, a string, an object) reads as []."""
    return value if isinstance(value, list) else []


class Evidence(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    section_title: str = Field(default="", alias="sectionTitle")
    page_ref: str = Field(default="", alias="pageRef")

    @field_validator("section_title", "page_ref", mode="before")
    @classmethod
    def _blank_if_null(cls, value):
        return blank_if_null(value)


class DraftQuestion(BaseModel):
    """One "Issue -> Proposed solution" block.

    ``type`` is optional here so its absence can be reported as a
    ValidationError by the post-processor instead of a parse failure.
    """

    model_config = ConfigDict(populate_by_name=True)

    type: str | None = None
    title: str = ""
    issue: str = ""
    evidence: Evidence = Field(default_factory=Evidence)
    proposed_solution: str = Field(default="", alias="proposedSolution")
    request_updated_pdf: bool = Field(default=False, alias="requestUpdatedPDF")

    @field_validator("title", "issue", "proposed_solution", mode="before")
    @classmethod
    def _blank_if_null(cls, value):
        return blank_if_null(value)

    @field_validator("evidence", mode="before")
    @classmethod
    def _evidence_or_empty(cls, value):
        return {} if value is None else value

    @field_validator("request_updated_pdf", mode="before")
    @classmethod
    def _false_if_null(cls, value):
        return False if value is None else value


class DraftTypo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    page_ref: str = Field(default="", alias="pageRef")
    excerpt: str = ""
    suggested_fix: str = Field(default="", alias="suggestedFix")

    @field_validator("page_ref", "excerpt", "suggested_fix", mode="before")
    @classmethod
    def _blank_if_null(cls, value):
        return blank_if_null(value)


class EmailDraft(BaseModel):
    """Structured email as returned by the model."""

    model_config = ConfigDict(populate_by_name=True)

    subject: str = ""
    opening: str = ""
    assumptions_block: str | None = Field(default=None, alias="assumptionsBlock")
    questions: list[DraftQuestion] = Field(default_factory=list)
    typos: list[DraftTypo] = Field(default_factory=list)
    closing: str = ""
    signature: str = ""
    follow_ups: list[Any] = Field(default_factory=list, alias="followUps")

    @field_validator("subject", "opening", "closing", "signature", mode="before")
    @classmethod
    def _blank_if_null(cls, value):
        return blank_if_null(value)

    @field_validator("questions", "typos", "follow_ups", mode="before")
    @classmethod
    def _list_or_empty(cls, value):
        return list_or_empty(value)


# Result

class PostProcessorFlag(BaseModel):
    type: Literal["warning", "error"]
    message: str


class GeneratedEmail(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    subject: str
    body_html: str = Field(alias="bodyHtml")
    body_text: str = Field(alias="bodyText")


class EmailMetadata(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    tone_check_passed: bool = Field(alias="toneCheckPassed")
    references_check_passed: bool = Field(alias="referencesCheckPassed")
    follow_up_schedule: list[Any] = Field(default_factory=list, alias="followUpSchedule")


class EmailGenerationResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: GeneratedEmail
    metadata: EmailMetadata
    flags: list[PostProcessorFlag] = Field(default_factory=list)

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
