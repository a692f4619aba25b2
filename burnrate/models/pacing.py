"""
Computed Pacing Models

Values produced by the pacing engine for the presentation layer.
None of these are persisted; they are recomputed from a cycle and a day
on every read.
"""

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CycleState(str, Enum):
    """
    Burn state of a cycle, used by the compact dashboard.

    This is a decision tree evaluated on every read, not a state machine:
    nothing ever transitions a cycle between these values explicitly.
    """
    NORMAL = "normal"
    RISK = "risk"
    OVERSPENDING = "overspending"
    DEATH = "death"


class CycleStage(str, Enum):
    """
    Finer severity ladder used by the richer dashboard variant.

    Deliberately independent of CycleState; the thresholds differ.
    """
    STABLE = "stable"
    MILD = "mild"
    CRITICAL = "critical"
    COLLAPSE = "collapse"


class PacePoint(BaseModel):
    """One point of a pace trajectory (day 0 = cycle start)."""
    model_config = ConfigDict(frozen=True)

    day: int = Field(..., ge=0)
    amount: float


class CategoryShare(BaseModel):
    """Share of total spending taken by one category."""
    model_config = ConfigDict(frozen=True)

    name: str
    amount: float
    percent: float


class PacingSnapshot(BaseModel):
    """
    Every pacing figure for one cycle on one day.

    Presentation reads this single object instead of calling each engine
    function separately, so all values on a screen agree with each other.
    """
    model_config = ConfigDict(frozen=True)

    cycle_id: str
    today: date
    monthly_budget: float

    total_spent: float
    remaining_budget: float = Field(..., ge=0)
    remaining_percent: float
    progress_percent: float
    total_days: int
    remaining_days: int = Field(..., ge=0)
    allowed_daily: float = Field(..., ge=0)
    spent_today: float
    deviation_percent: float

    state: CycleState
    stage: CycleStage

    discipline_index: float
    run_out_day: Optional[int] = None
    days_until_run_out: Optional[int] = None

    ideal_pace: list[PacePoint] = Field(default_factory=list)
    actual_pace: list[PacePoint] = Field(default_factory=list)
    categories: list[CategoryShare] = Field(default_factory=list)

    @property
    def is_dead(self) -> bool:
        return self.state == CycleState.DEATH
