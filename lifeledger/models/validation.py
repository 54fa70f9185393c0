"""
Validation Models

Shapes returned by the ledger consistency checks. Validation reports issues;
it never fixes or rejects records on its own.
"""

from typing import Optional

from pydantic import BaseModel, Field


class ValidationIssue(BaseModel):
    """A single consistency issue found on a record."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing_reference', 'type_mismatch')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = Field(
        default=None,
        description="Suggested fix if available"
    )


class ValidationResult(BaseModel):
    """Result of checking one record against the rest of the ledger."""

    entity_type: str = Field(
        ...,
        description="Kind of record checked (e.g., 'transaction', 'budget')"
    )
    entity_id: Optional[int] = None
    issues: list[ValidationIssue] = Field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def is_valid(self) -> bool:
        """Warnings don't invalidate a record."""
        return not self.has_errors
