"""
Validation Models

Results of the two-stage planner input validation.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Input the issue relates to, e.g. 'budget' or 'debts[2]'"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'insufficient', 'duplicate')"
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
    """
    Result of the two-stage validation.

    Stage 1: Schema validation (required inputs present and usable)
    Stage 2: Semantic validation (the inputs make sense together)
    """

    subject: str = Field(
        ...,
        description="What was validated ('debt_plan', 'bill_month')"
    )
    validated_at: datetime = Field(
        default_factory=datetime.utcnow
    )

    schema_valid: bool
    semantic_valid: bool

    is_valid: bool = Field(
        ...,
        description="Overall validation result"
    )
    can_proceed: bool = Field(
        ...,
        description="Can the calculation still run despite the issues?"
    )

    issues: list[ValidationIssue] = Field(default_factory=list)

    # Warnings don't block but should be shown
    warnings: list[str] = Field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        return sum(1 for issue in self.issues if issue.severity == "error")
