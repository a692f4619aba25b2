"""
Tests for setup and expense form validation.
"""

import pytest
from datetime import date, datetime

from burnrate.models.cycle import ExpenseCategory
from burnrate.validation import (
    CycleSetupValidator,
    default_cycle_dates,
    default_end_for,
)


@pytest.fixture
def validator():
    return CycleSetupValidator(min_budget=1, max_cycle_days=365)


class TestSetupValidation:
    """Tests for the setup form."""

    def test_valid_setup(self, validator):
        result = validator.validate_setup("3000", "2024-01-01", "2024-01-31")

        assert result.is_valid
        assert result.params.monthly_budget == 3000
        assert result.params.start_date == date(2024, 1, 1)
        assert result.params.end_date == date(2024, 1, 31)

    def test_budget_with_spaces(self, validator):
        """Thousands typed with spaces are accepted."""
        result = validator.validate_setup("3 000", date(2024, 1, 1), date(2024, 1, 31))
        assert result.params.monthly_budget == 3000

    @pytest.mark.parametrize("budget", ["", "   ", "0", "0.5", "-100", "abc", "nan", "inf", None])
    def test_bad_budget(self, validator, budget):
        result = validator.validate_setup(budget, "2024-01-01", "2024-01-31")

        assert not result.is_valid
        assert result.params is None
        assert "monthly_budget" in result.invalid_fields
        assert "Budget must be greater than 0." in result.error_summary()

    def test_missing_dates(self, validator):
        result = validator.validate_setup("3000", "", None)

        assert result.error_count == 2
        assert "Cycle start is required." in result.error_summary()
        assert "Cycle end is required." in result.error_summary()

    def test_unparseable_date_counts_as_missing(self, validator):
        result = validator.validate_setup("3000", "first of May", "2024-05-31")
        assert result.invalid_fields == ["start_date"]

    @pytest.mark.parametrize("end", ["2024-01-01", "2023-12-31"])
    def test_end_must_follow_start(self, validator, end):
        result = validator.validate_setup("3000", "2024-01-01", end)

        assert not result.is_valid
        assert "End date must be after start date." in result.error_summary()

    def test_cycle_too_long(self, validator):
        result = validator.validate_setup("3000", "2024-01-01", "2025-01-01")

        assert not result.is_valid
        assert "Cycle cannot exceed 365 days." in result.error_summary()

    def test_longest_allowed_cycle(self, validator):
        """365 days counting both ends is still accepted."""
        result = validator.validate_setup("3000", "2024-01-01", "2024-12-30")
        assert result.is_valid

    def test_every_issue_is_reported(self, validator):
        result = validator.validate_setup("", "2024-02-01", "2024-01-01")
        assert set(result.invalid_fields) == {"monthly_budget", "end_date"}

    def test_datetime_inputs_use_their_date(self, validator):
        result = validator.validate_setup(
            500,
            datetime(2024, 3, 1, 23, 30),
            datetime(2024, 3, 31, 0, 5),
        )
        assert result.params.start_date == date(2024, 3, 1)
        assert result.params.end_date == date(2024, 3, 31)

    def test_min_budget_is_configurable(self):
        strict = CycleSetupValidator(min_budget=100, max_cycle_days=365)
        result = strict.validate_setup("50", "2024-01-01", "2024-01-31")
        assert "monthly_budget" in result.invalid_fields


class TestExpenseValidation:
    """Tests for the add-expense form."""

    def test_valid_expense(self, validator):
        result = validator.validate_expense("45.50", "food", "  lunch  ")

        assert result.is_valid
        assert result.expense.amount == 45.5
        assert result.expense.category == ExpenseCategory.FOOD
        assert result.expense.comment == "lunch"
        assert result.expense.expense_date is None

    def test_zero_amount_is_allowed(self, validator):
        assert validator.validate_expense("0").is_valid

    @pytest.mark.parametrize("amount", ["", "twelve", None, "nan"])
    def test_amount_must_be_a_number(self, validator, amount):
        result = validator.validate_expense(amount)

        assert not result.is_valid
        assert "Amount must be a number." in result.error_summary()

    def test_negative_amount(self, validator):
        result = validator.validate_expense("-5")

        assert not result.is_valid
        assert "Amount cannot be negative." in result.error_summary()

    def test_missing_category_is_other(self, validator):
        result = validator.validate_expense("10", None)
        assert result.expense.category == ExpenseCategory.OTHER
        assert result.warnings == []

    def test_category_is_case_insensitive(self, validator):
        result = validator.validate_expense("10", " Transport ")
        assert result.expense.category == ExpenseCategory.TRANSPORT

    def test_unknown_category_is_reported(self, validator):
        result = validator.validate_expense("10", "yachts")

        assert result.is_valid
        assert result.expense.category == ExpenseCategory.OTHER
        assert result.warnings == ["Unknown category 'yachts'; recorded as other."]

    def test_comment_too_long(self, validator):
        result = validator.validate_expense("10", comment="x" * 501)
        assert result.invalid_fields == ["comment"]

    def test_explicit_date(self, validator):
        result = validator.validate_expense("10", expense_date="2024-01-05")
        assert result.expense.expense_date == date(2024, 1, 5)

    def test_invalid_date(self, validator):
        result = validator.validate_expense("10", expense_date="yesterday")

        assert not result.is_valid
        assert "Expense date is not a valid date." in result.error_summary()


class TestDefaultDates:
    """Tests for the default setup range."""

    def test_default_cycle_is_current_month(self):
        assert default_cycle_dates(date(2024, 2, 14)) == (date(2024, 2, 1), date(2024, 2, 29))

    def test_default_end_in_short_month(self):
        assert default_end_for(date(2023, 2, 10)) == date(2023, 2, 28)

    def test_default_end_in_long_month(self):
        assert default_end_for(date(2024, 12, 31)) == date(2024, 12, 31)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
