"""
Presentation Helpers

Formatting and visual-treatment decisions for the dashboard.

DESIGN DECISION: Rounding happens here and only here. Values coming out
of the pacing engine are never rounded before they are compared or
stored; these helpers turn them into display strings at the last moment.
"""

import math
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Optional

from burnrate.models.pacing import CycleStage, CycleState, PacingSnapshot


class BurnWidgetTone(str, Enum):
    """Colour treatment of the burn widget."""
    STABLE = "stable"
    SAFE = "safe"
    OVERSPEND = "overspend"
    CRITICAL = "critical"


class SurvivalEffect(str, Enum):
    """Animation applied to the survival bar."""
    MELT = "melt"
    CRACK = "crack"
    GLITCH = "glitch"


def format_money(amount: float, symbol: str = "") -> str:
    """Whole units with thousands separators, e.g. 1,235."""
    rounded = Decimal(str(amount)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    if rounded == 0:
        rounded = Decimal("0")
    return f"{symbol}{rounded:,}"


def format_deviation(percent: float) -> str:
    """Signed whole percentage, e.g. +20% or -10%."""
    rounded = math.floor(percent + 0.5)
    sign = "+" if percent >= 0 else ""
    return f"{sign}{rounded}%"


def format_percent(percent: float) -> str:
    return f"{math.floor(percent + 0.5)}%"


def survival_fill(snapshot: PacingSnapshot) -> float:
    """Width of the survival bar fill, clamped to 0..100."""
    return max(0.0, min(100.0, snapshot.remaining_percent))


def prediction_message(snapshot: PacingSnapshot) -> str:
    """Sentence describing when money runs out at today's spend rate."""
    message = "At your current daily spend rate, "
    if snapshot.run_out_day is not None:
        return message + f"you will run out of money on day {snapshot.run_out_day} of the cycle."
    if snapshot.days_until_run_out is not None:
        return message + f"budget lasts {snapshot.days_until_run_out} more days."
    return message + "you are within the daily limit."


def burn_widget_tone(snapshot: PacingSnapshot) -> BurnWidgetTone:
    allowed = snapshot.allowed_daily
    spent = snapshot.spent_today

    if snapshot.remaining_budget <= 0:
        return BurnWidgetTone.CRITICAL
    if allowed > 0 and spent > allowed:
        if snapshot.stage == CycleStage.CRITICAL:
            return BurnWidgetTone.CRITICAL
        return BurnWidgetTone.OVERSPEND
    if allowed > 0 and spent >= allowed * 0.8:
        return BurnWidgetTone.SAFE
    return BurnWidgetTone.STABLE


def survival_effect(snapshot: PacingSnapshot) -> Optional[SurvivalEffect]:
    """Most severe effect wins; None when the bar should stay calm."""
    if snapshot.stage == CycleStage.COLLAPSE or snapshot.remaining_percent < 5:
        return SurvivalEffect.GLITCH
    if snapshot.stage == CycleStage.CRITICAL:
        return SurvivalEffect.CRACK
    if snapshot.state in (CycleState.OVERSPENDING, CycleState.RISK):
        return SurvivalEffect.MELT
    return None


def pace_chart_series(snapshot: PacingSnapshot) -> dict[str, list[float]]:
    """
    Ideal and actual cumulative spend, aligned by day, for charting.

    Both trajectories cover the same day range, so the lists line up.
    """
    return {
        "day": [point.day for point in snapshot.ideal_pace],
        "ideal": [point.amount for point in snapshot.ideal_pace],
        "actual": [point.amount for point in snapshot.actual_pace],
    }
