"""Issue and analysis-result models.

These are the pipeline's output schema:
- IssueType: Closed vocabulary of issue categories
- Issue: One finding on one page, produced by exactly one detector
- AnalysisResult: All findings for one document plus derived summary

JSON field names are camelCase (``locationHint``, ``fileName``) to match
the wire format consumed by the review UI; Python attributes are snake_case.
Both spellings are accepted on input.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, computed_field


class IssueType(str, Enum):
    """Closed vocabulary of issue types.

    Anything outside this set is coerced to OTHER by the normalizer.
    """

    TYPO = "typo"
    SPACING = "spacing"
    PUNCTUATION = "punctuation"
    CAPITALIZATION = "capitalization"
    ALIGNMENT = "alignment"
    FONT = "font"
    FORMATTING = "formatting"
    CROSS_REFERENCE = "cross_reference"
    NUMBERING = "numbering"
    REFERENCE = "reference"
    LOGIC_POINT = "logic_point"
    OTHER = "other"

    def __str__(self) -> str:
        return self.value


ISSUE_TYPES: frozenset[str] = frozenset(t.value for t in IssueType)
"""String values of IssueType, for fast membership checks."""


class Issue(BaseModel):
    """A single finding.

    Immutable once produced. Post-hoc changes (screenshot enrichment, moving
    a model-reported page back into range) produce copies.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, use_enum_values=False)

    page: int = Field(ge=1, description="1-indexed page the finding is on")
    type: IssueType = Field(description="Issue category")
    message: str = Field(default="", description="Human-readable description of the problem")
    original: str = Field(default="", description="Offending text as found in the document")
    suggestion: str = Field(default="", description="Proposed correction")
    location_hint: str = Field(
        default="",
        alias="locationHint",
        description="Surrounding text that helps locate the finding",
    )
    screenshot_url: str | None = Field(
        default=None,
        alias="screenshotUrl",
        description="Rendered page image, added after analysis",
    )

    def with_screenshot(self, url: str | None) -> "Issue":
        """Return a copy carrying the screenshot URL (unchanged if url is None)."""
        if url is None:
            return self
        return self.model_copy(update={"screenshot_url": url})

    def to_wire(self) -> dict:
        """Serialize with camelCase keys, omitting an absent screenshot."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class AnalysisSummary(BaseModel):
    """Summary statistics derived from an issue list."""

    model_config = ConfigDict(populate_by_name=True)

    issue_count: int = Field(alias="issueCount")
    pages_affected: list[int] = Field(
        alias="pagesAffected",
        description="Distinct pages with issues, in first-appearance order",
    )


class AnalysisResult(BaseModel):
    """All findings for one document.

    ``summary`` is computed from ``issues`` on every access, so it can never
    be set independently or go stale after ``issues`` is mutated.
    """

    model_config = ConfigDict(populate_by_name=True)

    file_name: str = Field(alias="fileName", description="Uploaded file name")
    issues: list[Issue] = Field(
        default_factory=list,
        description="Findings in detector emission order (not sorted)",
    )

    @computed_field
    @property
    def summary(self) -> AnalysisSummary:
        pages = list(dict.fromkeys(issue.page for issue in self.issues))
        return AnalysisSummary(issue_count=len(self.issues), pages_affected=pages)

    def issues_of_type(self, issue_type: IssueType | str) -> list[Issue]:
        """Get all issues of one type."""
        value = issue_type.value if isinstance(issue_type, IssueType) else issue_type
        return [i for i in self.issues if i.type.value == value]

    def to_wire(self) -> dict:
        """Serialize with camelCase keys, including the derived summary."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
