"""
Validation Models

Results of checking user input before it reaches storage.
Validation reports problems; it never silently corrects them.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from burnrate.models.cycle import CycleParams, NewExpense


class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Input field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_value', 'out_of_range')"
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


class ValidationResult(BaseModel):
    """Outcome of validating one form submission."""

    validated_at: datetime = Field(
        default_factory=datetime.now
    )
    issues: list[ValidationIssue] = Field(
        default_factory=list,
        description="All validation issues found"
    )

    @property
    def is_valid(self) -> bool:
        """Valid when there are no error-level issues."""
        return not self.has_errors

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def warnings(self) -> list[str]:
        return [i.message for i in self.issues if i.severity == "warning"]

    @property
    def invalid_fields(self) -> list[str]:
        """Fields to highlight in the form, in the order they were found."""
        fields: list[str] = []
        for issue in self.issues:
            if issue.severity == "error" and issue.field not in fields:
                fields.append(issue.field)
        return fields

    def error_summary(self) -> str:
        """All error messages joined into one sentence block."""
        return " ".join(
            issue.message for issue in self.issues if issue.severity == "error"
        )


class SetupValidationResult(ValidationResult):
    """Result of validating the cycle setup form."""

    params: Optional[CycleParams] = Field(
        default=None,
        description="Parsed parameters, present only when valid"
    )


class ExpenseValidationResult(ValidationResult):
    """Result of validating the add-expense form."""

    expense: Optional[NewExpense] = Field(
        default=None,
        description="Parsed expense, present only when valid"
    )
