"""Validation report models - issues found while checking a document."""

from enum import Enum

from pydantic import BaseModel, Field


class IssueLevel(str, Enum):
    """Severity of a validation issue."""

    ERROR = "error"
    WARN = "warn"


class DocumentStatus(str, Enum):
    """Publish readiness computed from a report."""

    DRAFT = "draft"
    PREVIEWABLE = "previewable"
    PUBLISHABLE = "publishable"


class ValidationIssue(BaseModel):
    """A single problem located in the document tree."""

    code: str  # Machine-stable code, e.g. "E_FOOTER_TOO_MANY_BUTTONS"
    level: IssueLevel
    message: str
    path: str  # Structural path, e.g. "cards[2].section.footer[0].action.uri"


class ValidationReport(BaseModel):
    """Outcome of validating a document; status is derived, never stored separately."""

    status: DocumentStatus
    errors: list[ValidationIssue] = Field(default_factory=list)
    warnings: list[ValidationIssue] = Field(default_factory=list)

    def codes(self) -> set[str]:
        """All error and warning codes in the report."""
        return {i.code for i in self.errors} | {i.code for i in self.warnings}


class PublishGateResult(BaseModel):
    """Result of the stricter publish-time check."""

    ok: bool
    errors: list[ValidationIssue] = Field(default_factory=list)
