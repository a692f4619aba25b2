"""
Cycle Records for Burnrate

These models define the persisted shape of a spending cycle:
1. Cycle - the budget, its date range and the expenses logged against it
2. Expense - a single logged spend
3. DefeatRecord - the archived outcome of a finished or abandoned cycle

DESIGN DECISION: Records are stored with camelCase keys (monthlyBudget,
startDate, ...) so that data exported from the browser version of the app
loads unchanged. Python code always uses the snake_case attribute names.

Amounts are plain floats. There is no currency rounding anywhere in the
records; rounding happens only when a value is displayed.
"""

from datetime import date, datetime
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    model_validator,
)
from pydantic.alias_generators import to_camel


def _new_cycle_id() -> str:
    return f"c_{uuid4().hex}"


def _new_expense_id() -> str:
    return f"e_{uuid4().hex}"


# =============================================================================
# ENUMS
# =============================================================================

class ExpenseCategory(str, Enum):
    """
    Supported expense categories.

    Anything the user does not categorise lands in OTHER.
    """
    FOOD = "food"
    TRANSPORT = "transport"
    HOUSING = "housing"
    UTILITIES = "utilities"
    HEALTH = "health"
    ENTERTAINMENT = "entertainment"
    SHOPPING = "shopping"
    SUBSCRIPTIONS = "subscriptions"
    OTHER = "other"


class EndReason(str, Enum):
    """Why a cycle was archived into the history log."""
    MANUAL_NEW_CYCLE = "manual_new_cycle"  # User started over
    BUDGET_EXHAUSTED = "budget_exhausted"  # Remaining budget hit zero


class RecordModel(BaseModel):
    """Base for every persisted record: camelCase on disk, snake_case in code."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    def to_record(self) -> dict:
        """Serialize to the JSON-compatible persisted shape."""
        return self.model_dump(mode="json", by_alias=True)


# =============================================================================
# EXPENSES
# =============================================================================

class Expense(RecordModel):
    """
    A single expense logged against a cycle.

    The expense's day is its explicit date when present, otherwise the
    date part of created_at. An expense with neither has no day: it still
    counts toward the cycle total but is skipped by day-bucketed figures.
    """

    id: str = Field(
        default_factory=_new_expense_id,
        description="Unique expense ID"
    )
    amount: float = Field(
        ...,
        ge=0,
        description="Amount spent"
    )
    category: ExpenseCategory = Field(
        default=ExpenseCategory.OTHER,
        description="Expense category"
    )
    comment: str = Field(
        default="",
        max_length=500,
        description="Free-text note"
    )
    expense_date: Optional[date] = Field(
        default=None,
        alias="date",
        description="Calendar day the money was spent"
    )
    created_at: Optional[datetime] = Field(
        default=None,
        description="When the expense was logged; stamped by storage"
    )

    @property
    def day(self) -> Optional[date]:
        """Calendar day used for all date bucketing."""
        if self.expense_date is not None:
            return self.expense_date
        if self.created_at is not None:
            return self.created_at.date()
        return None


class NewExpense(RecordModel):
    """
    Expense fields supplied by the user.

    Storage assigns the ID, timestamp and (when omitted) the date.
    """

    amount: float = Field(..., ge=0)
    category: ExpenseCategory = ExpenseCategory.OTHER
    comment: str = Field(default="", max_length=500)
    expense_date: Optional[date] = Field(default=None, alias="date")


# =============================================================================
# CYCLES
# =============================================================================

class CycleParams(RecordModel):
    """Parameters for creating a new cycle."""

    monthly_budget: float = Field(
        ...,
        ge=0,
        description="Total budget for the cycle"
    )
    start_date: date
    end_date: date

    @model_validator(mode='after')
    def validate_dates(self) -> 'CycleParams':
        if self.end_date < self.start_date:
            raise ValueError("Cycle end cannot be before start")
        return self


class Cycle(RecordModel):
    """
    A spending cycle.

    Created once at setup. Afterwards it only changes by appending
    expenses or by an emergency budget adjustment, until it is archived.
    """

    id: str = Field(
        default_factory=_new_cycle_id,
        description="Unique cycle ID"
    )
    monthly_budget: float = Field(
        ...,
        ge=0,
        description="Total budget for the cycle"
    )
    start_date: date = Field(
        ...,
        description="First day of the cycle"
    )
    end_date: date = Field(
        ...,
        description="Last day of the cycle"
    )
    expenses: list[Expense] = Field(default_factory=list)
    created_at: Optional[datetime] = None

    @model_validator(mode='after')
    def validate_dates(self) -> 'Cycle':
        """Validate the date range."""
        if self.end_date < self.start_date:
            raise ValueError("Cycle end cannot be before start")
        return self

    @classmethod
    def from_params(cls, params: CycleParams) -> 'Cycle':
        return cls(
            monthly_budget=params.monthly_budget,
            start_date=params.start_date,
            end_date=params.end_date,
            created_at=datetime.now(),
        )


# =============================================================================
# HISTORY
# =============================================================================

class DefeatRecord(RecordModel):
    """
    Archived outcome of a cycle.

    CRITICAL: History is append-only. Records are never edited or removed,
    and they do not belong to the cycle they describe.
    """

    cycle_id: str = Field(
        ...,
        description="ID of the archived cycle"
    )
    days_survived: int = Field(
        ...,
        ge=0,
        description="Whole days between cycle start and archival"
    )
    overspent_amount: float = Field(
        default=0.0,
        ge=0,
        validation_alias=AliasChoices(
            "overspentAmount", "overspent_amount", "overspent"
        ),
        description="How far spending went past the budget"
    )
    end_reason: EndReason
    at: Optional[datetime] = Field(
        default_factory=datetime.now,
        description="When the record was appended"
    )
