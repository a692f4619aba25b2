"""
Input Validation

DESIGN DECISION: Validation happens before anything reaches storage.
The pacing engine never re-validates; it trusts that every cycle it sees
has a sane budget and date range.

Two forms are validated:

SETUP FORM:
- Budget present, numeric, at least the minimum budget
- Start and end dates present and parseable
- End strictly after start
- Cycle no longer than the maximum length

EXPENSE FORM:
- Amount present, numeric, finite, not negative
- Category known (unknown ones are recorded as "other", with a warning)

IMPORTANT: Validation NEVER silently fixes issues.
Anything it normalises beyond whitespace is reported.
"""

import math
import re
from datetime import date, datetime
from typing import Optional, Union

from dateutil.parser import isoparse
from dateutil.relativedelta import relativedelta

from burnrate.config import get_settings
from burnrate.models.cycle import CycleParams, ExpenseCategory, NewExpense
from burnrate.models.validation import (
    ExpenseValidationResult,
    SetupValidationResult,
    ValidationIssue,
)


DateInput = Union[str, date, None]
AmountInput = Union[str, int, float, None]

MAX_COMMENT_LENGTH = 500


def default_end_for(start: date) -> date:
    """Last day of the month the cycle starts in."""
    return start + relativedelta(day=31)


def default_cycle_dates(today: date) -> tuple[date, date]:
    """First and last day of the current month, the default setup range."""
    start = today.replace(day=1)
    return start, default_end_for(start)


def _parse_amount(raw: AmountInput) -> Optional[float]:
    """Parse a user-typed amount; whitespace (e.g. "3 000") is ignored."""
    if raw is None:
        return None
    if isinstance(raw, (int, float)):
        value = float(raw)
    else:
        cleaned = re.sub(r"\s", "", raw)
        if not cleaned:
            return None
        try:
            value = float(cleaned)
        except ValueError:
            return None
    if not math.isfinite(value):
        return None
    return value


def _parse_date(raw: DateInput) -> Optional[date]:
    if raw is None:
        return None
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    cleaned = raw.strip()
    if not cleaned:
        return None
    try:
        return isoparse(cleaned).date()
    except ValueError:
        return None


class CycleSetupValidator:
    """
    Validates the setup and expense forms.

    Limits come from settings unless given explicitly.
    """

    def __init__(
        self,
        min_budget: Optional[float] = None,
        max_cycle_days: Optional[int] = None,
    ):
        settings = get_settings().app
        self._min_budget = min_budget if min_budget is not None else settings.min_budget
        self._max_cycle_days = (
            max_cycle_days if max_cycle_days is not None else settings.max_cycle_days
        )

    def validate_setup(
        self,
        monthly_budget: AmountInput,
        start_date: DateInput,
        end_date: DateInput,
    ) -> SetupValidationResult:
        """
        Validate the setup form.

        Returns:
            Result with every issue found; params is set only when valid
        """
        issues = []

        budget = _parse_amount(monthly_budget)
        if budget is None or budget < self._min_budget:
            issues.append(ValidationIssue(
                field="monthly_budget",
                issue_type="missing" if budget is None else "out_of_range",
                message="Budget must be greater than 0.",
                severity="error",
            ))

        start = _parse_date(start_date)
        if start is None:
            issues.append(ValidationIssue(
                field="start_date",
                issue_type="missing",
                message="Cycle start is required.",
                severity="error",
            ))

        end = _parse_date(end_date)
        if end is None:
            issues.append(ValidationIssue(
                field="end_date",
                issue_type="missing",
                message="Cycle end is required.",
                severity="error",
            ))

        if start and end:
            if end <= start:
                issues.append(ValidationIssue(
                    field="end_date",
                    issue_type="inconsistent",
                    message="End date must be after start date.",
                    severity="error",
                ))
            if (end - start).days + 1 > self._max_cycle_days:
                issues.append(ValidationIssue(
                    field="end_date",
                    issue_type="out_of_range",
                    message=f"Cycle cannot exceed {self._max_cycle_days} days.",
                    severity="error",
                ))

        result = SetupValidationResult(issues=issues)
        if result.is_valid:
            result.params = CycleParams(
                monthly_budget=budget,
                start_date=start,
                end_date=end,
            )
        return result

    def validate_expense(
        self,
        amount: AmountInput,
        category: Union[str, ExpenseCategory, None] = None,
        comment: Optional[str] = None,
        expense_date: DateInput = None,
    ) -> ExpenseValidationResult:
        """
        Validate the add-expense form.

        Returns:
            Result with every issue found; expense is set only when valid
        """
        issues = []

        value = _parse_amount(amount)
        if value is None:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="Amount must be a number.",
                severity="error",
            ))
        elif value < 0:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="out_of_range",
                message="Amount cannot be negative.",
                severity="error",
            ))

        resolved_category = ExpenseCategory.OTHER
        if isinstance(category, ExpenseCategory):
            resolved_category = category
        elif category and category.strip():
            try:
                resolved_category = ExpenseCategory(category.strip().lower())
            except ValueError:
                issues.append(ValidationIssue(
                    field="category",
                    issue_type="unknown_value",
                    message=f"Unknown category '{category}'; recorded as other.",
                    severity="warning",
                ))

        text = (comment or "").strip()
        if len(text) > MAX_COMMENT_LENGTH:
            issues.append(ValidationIssue(
                field="comment",
                issue_type="too_long",
                message=f"Comment cannot exceed {MAX_COMMENT_LENGTH} characters.",
                severity="error",
            ))

        day = None
        if expense_date is not None:
            day = _parse_date(expense_date)
            if day is None:
                issues.append(ValidationIssue(
                    field="expense_date",
                    issue_type="invalid_value",
                    message="Expense date is not a valid date.",
                    severity="error",
                ))

        result = ExpenseValidationResult(issues=issues)
        if result.is_valid:
            result.expense = NewExpense(
                amount=value,
                category=resolved_category,
                comment=text,
                expense_date=day,
            )
        return result
