"""Pacing engine package."""

from burnrate.engine.pacing import (
    actual_pace_points,
    allowed_daily,
    build_snapshot,
    category_distribution,
    classify_stage,
    classify_state,
    days_survived,
    days_until_run_out,
    deviation_percent,
    discipline_index,
    ideal_pace_points,
    overspent_amount,
    progress_percent,
    remaining_budget,
    remaining_days,
    remaining_percent,
    run_out_day,
    spent_today,
    total_days,
    total_spent,
)

__all__ = [
    "actual_pace_points",
    "allowed_daily",
    "build_snapshot",
    "category_distribution",
    "classify_stage",
    "classify_state",
    "days_survived",
    "days_until_run_out",
    "deviation_percent",
    "discipline_index",
    "ideal_pace_points",
    "overspent_amount",
    "progress_percent",
    "remaining_budget",
    "remaining_days",
    "remaining_percent",
    "run_out_day",
    "spent_today",
    "total_days",
    "total_spent",
]
