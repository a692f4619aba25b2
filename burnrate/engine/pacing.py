"""
Pacing Engine

Burn-rate and pacing calculations over a single cycle.

DESIGN DECISION: Every function here is pure.
- The cycle is a snapshot supplied by the caller
- "Today" is always passed in, never read from the clock
- Nothing is cached, logged or persisted

Calling any function twice with the same cycle and the same day returns
the same value. That is what makes these figures testable without storage.

All divisions guard their zero denominator and return a defined sentinel
(0, 100 or None). No function raises for a valid cycle.
"""

import math
from collections import defaultdict
from datetime import date
from typing import Optional

from burnrate.models.cycle import Cycle
from burnrate.models.pacing import (
    CategoryShare,
    CycleStage,
    CycleState,
    PacePoint,
    PacingSnapshot,
)


# Share of the allowed daily spend at which the state turns to RISK
RISK_RATIO = 0.8

# Stage ladder thresholds, in percent of the budget still remaining
COLLAPSE_REMAINING_PERCENT = 5
CRITICAL_REMAINING_PERCENT = 25
CRITICAL_OVERSPEND_REMAINING_PERCENT = 40

# Absorbs float noise when comparing a day's spend to the ideal pace
DISCIPLINE_TOLERANCE = 1.001


# =============================================================================
# DATE HELPERS
# =============================================================================

def _days_between(start: date, end: date) -> int:
    """Whole days from start to end (negative when end is earlier)."""
    return (end - start).days


def _spend_by_day_index(cycle: Cycle) -> dict[int, float]:
    """
    Bucket expenses by day index (0 = cycle start).

    Expenses without a day are skipped. Indexes outside the cycle are kept;
    callers only read the range they care about.
    """
    buckets: dict[int, float] = defaultdict(float)
    for expense in cycle.expenses:
        day = expense.day
        if day is None:
            continue
        buckets[_days_between(cycle.start_date, day)] += expense.amount
    return buckets


def total_days(cycle: Cycle) -> int:
    """Length of the cycle in days, both ends inclusive."""
    return _days_between(cycle.start_date, cycle.end_date) + 1


# =============================================================================
# BUDGET FIGURES
# =============================================================================

def total_spent(cycle: Cycle) -> float:
    return sum(expense.amount for expense in cycle.expenses)


def remaining_budget(cycle: Cycle) -> float:
    """Budget left to spend. Never negative."""
    return max(0.0, cycle.monthly_budget - total_spent(cycle))


def overspent_amount(cycle: Cycle) -> float:
    """How far spending has gone past the budget (0 when within it)."""
    return max(0.0, total_spent(cycle) - cycle.monthly_budget)


def progress_percent(cycle: Cycle) -> float:
    """Share of the budget already spent, capped at 100."""
    if cycle.monthly_budget <= 0:
        return 0.0
    return min(100.0, total_spent(cycle) / cycle.monthly_budget * 100)


def remaining_percent(cycle: Cycle) -> float:
    """Share of the budget still available; 0 for a zero budget."""
    if cycle.monthly_budget <= 0:
        return 0.0
    return remaining_budget(cycle) / cycle.monthly_budget * 100


def remaining_days(cycle: Cycle, today: date) -> int:
    """
    Days left in the cycle.

    0 once the end date has passed. Until then at least 1, so the last day
    of the cycle still has a day to spend in.
    """
    if today > cycle.end_date:
        return 0
    return max(1, _days_between(today, cycle.end_date))


def allowed_daily(cycle: Cycle, today: date) -> float:
    """
    How much may still be spent per day to finish the cycle on budget.

    Recomputed fresh each day as the remaining budget and days change.
    """
    days = remaining_days(cycle, today)
    if days <= 0:
        return 0.0
    return remaining_budget(cycle) / days


def spent_today(cycle: Cycle, today: date) -> float:
    """Sum of expenses dated exactly today (calendar day, not last 24h)."""
    return sum(
        expense.amount for expense in cycle.expenses
        if expense.day == today
    )


def deviation_percent(cycle: Cycle, today: date) -> float:
    """
    Today's spend relative to the allowed daily spend, in percent.

    Positive means over pace, negative under pace.
    """
    allowed = allowed_daily(cycle, today)
    spent = spent_today(cycle, today)
    if allowed <= 0:
        return 100.0 if spent > 0 else 0.0
    return (spent - allowed) / allowed * 100


# =============================================================================
# CLASSIFICATION
# =============================================================================

def classify_state(cycle: Cycle, today: date) -> CycleState:
    """Burn state; the first matching rule wins."""
    if remaining_budget(cycle) <= 0:
        return CycleState.DEATH

    allowed = allowed_daily(cycle, today)
    spent = spent_today(cycle, today)

    if spent > allowed:
        return CycleState.OVERSPENDING
    if allowed > 0 and spent / allowed >= RISK_RATIO:
        return CycleState.RISK
    return CycleState.NORMAL


def classify_stage(cycle: Cycle, today: date) -> CycleStage:
    """
    Severity stage; the first matching rule wins.

    A zero budget counts as fully remaining here, unlike remaining_percent.
    """
    remaining = remaining_budget(cycle)
    if cycle.monthly_budget > 0:
        percent_left = remaining / cycle.monthly_budget * 100
    else:
        percent_left = 100.0

    allowed = allowed_daily(cycle, today)
    is_overspending = allowed > 0 and spent_today(cycle, today) > allowed

    if remaining <= 0 or percent_left < COLLAPSE_REMAINING_PERCENT:
        return CycleStage.COLLAPSE
    if percent_left < CRITICAL_REMAINING_PERCENT or (
        is_overspending and percent_left < CRITICAL_OVERSPEND_REMAINING_PERCENT
    ):
        return CycleStage.CRITICAL
    if is_overspending:
        return CycleStage.MILD
    return CycleStage.STABLE


# =============================================================================
# TRAJECTORIES
# =============================================================================

def ideal_pace_points(cycle: Cycle) -> list[PacePoint]:
    """Linear ideal cumulative spend for day 0 through total_days."""
    days = total_days(cycle)
    per_day = cycle.monthly_budget / days
    return [PacePoint(day=i, amount=per_day * i) for i in range(days + 1)]


def actual_pace_points(cycle: Cycle) -> list[PacePoint]:
    """Cumulative actual spend for day 0 through total_days."""
    buckets = _spend_by_day_index(cycle)
    points = []
    cumulative = 0.0
    for i in range(total_days(cycle) + 1):
        cumulative += buckets.get(i, 0.0)
        points.append(PacePoint(day=i, amount=cumulative))
    return points


def category_distribution(cycle: Cycle) -> list[CategoryShare]:
    """
    Spending per category, in order of first appearance.

    Categories without expenses are omitted rather than zero-filled.
    """
    totals: dict[str, float] = {}
    for expense in cycle.expenses:
        name = expense.category.value
        totals[name] = totals.get(name, 0.0) + expense.amount

    total = sum(totals.values())
    return [
        CategoryShare(
            name=name,
            amount=amount,
            percent=(amount / total * 100) if total else 0.0,
        )
        for name, amount in totals.items()
    ]


def discipline_index(cycle: Cycle, today: date) -> float:
    """
    Percentage of elapsed days whose spend stayed within the ideal pace.

    Elapsed days run from the cycle start to min(today, end), inclusive.
    Before the cycle starts the index is 100.
    """
    last_day = min(today, cycle.end_date)
    elapsed = _days_between(cycle.start_date, last_day) + 1
    if elapsed <= 0:
        return 100.0

    ideal_per_day = cycle.monthly_budget / total_days(cycle)
    buckets = _spend_by_day_index(cycle)
    disciplined = sum(
        1 for i in range(elapsed)
        if buckets.get(i, 0.0) <= ideal_per_day * DISCIPLINE_TOLERANCE
    )
    return disciplined / elapsed * 100


# =============================================================================
# PREDICTIONS
# =============================================================================

def run_out_day(cycle: Cycle, today: date) -> Optional[int]:
    """
    Predicted 1-based day of the cycle when the budget hits zero.

    Assumes every following day costs as much as today.
    Returns 0 when the budget is already gone, and None when no prediction
    is possible (nothing spent today) or it lands beyond the cycle.
    """
    remaining = remaining_budget(cycle)
    if remaining <= 0:
        return 0

    spent = spent_today(cycle, today)
    if spent <= 0:
        return None

    today_index = _days_between(cycle.start_date, today)
    run_out_index = today_index + math.ceil(remaining / spent)
    if run_out_index >= total_days(cycle):
        return None
    return run_out_index + 1


def days_until_run_out(cycle: Cycle, today: date) -> Optional[int]:
    """Whole days the remaining budget lasts at today's spend rate."""
    spent = spent_today(cycle, today)
    if spent <= 0:
        return None
    return math.floor(remaining_budget(cycle) / spent)


def days_survived(cycle: Cycle, today: date) -> int:
    """Whole days since the cycle started (0 before it starts)."""
    return max(0, _days_between(cycle.start_date, today))


# =============================================================================
# SNAPSHOT
# =============================================================================

def build_snapshot(cycle: Cycle, today: date) -> PacingSnapshot:
    """Compute every pacing figure for the cycle on the given day."""
    return PacingSnapshot(
        cycle_id=cycle.id,
        today=today,
        monthly_budget=cycle.monthly_budget,
        total_spent=total_spent(cycle),
        remaining_budget=remaining_budget(cycle),
        remaining_percent=remaining_percent(cycle),
        progress_percent=progress_percent(cycle),
        total_days=total_days(cycle),
        remaining_days=remaining_days(cycle, today),
        allowed_daily=allowed_daily(cycle, today),
        spent_today=spent_today(cycle, today),
        deviation_percent=deviation_percent(cycle, today),
        state=classify_state(cycle, today),
        stage=classify_stage(cycle, today),
        discipline_index=discipline_index(cycle, today),
        run_out_day=run_out_day(cycle, today),
        days_until_run_out=days_until_run_out(cycle, today),
        ideal_pace=ideal_pace_points(cycle),
        actual_pace=actual_pace_points(cycle),
        categories=category_distribution(cycle),
    )
