"""
Tests for display formatting and visual treatments.
"""

import pytest
from datetime import date

from burnrate.engine import build_snapshot
from burnrate.models.cycle import Cycle, Expense
from burnrate.presentation import (
    BurnWidgetTone,
    SurvivalEffect,
    burn_widget_tone,
    format_deviation,
    format_money,
    format_percent,
    pace_chart_series,
    prediction_message,
    survival_effect,
    survival_fill,
)


TODAY = date(2024, 1, 10)


def snapshot_for(budget, *expenses):
    """Snapshot on TODAY for a January cycle; expenses are (amount, day) pairs."""
    cycle = Cycle(
        monthly_budget=budget,
        start_date=date(2024, 1, 1),
        end_date=date(2024, 1, 31),
        expenses=[Expense(amount=amount, expense_date=day) for amount, day in expenses],
    )
    return build_snapshot(cycle, TODAY)


class TestFormatting:
    """Tests for number formatting."""

    @pytest.mark.parametrize("amount,expected", [
        (1234.5, "1,235"),
        (96.77, "97"),
        (0.4, "0"),
        (-0.4, "0"),
        (2.5, "3"),
        (1000000, "1,000,000"),
    ])
    def test_format_money(self, amount, expected):
        assert format_money(amount) == expected

    def test_format_money_with_symbol(self):
        assert format_money(1500, "$") == "$1,500"

    @pytest.mark.parametrize("percent,expected", [
        (-10, "-10%"),
        (20.4, "+20%"),
        (0, "+0%"),
        (-0.4, "0%"),
        (99.5, "+100%"),
    ])
    def test_format_deviation(self, percent, expected):
        assert format_deviation(percent) == expected

    def test_format_percent(self):
        assert format_percent(33.333) == "33%"
        assert format_percent(66.5) == "67%"


class TestVisualTreatment:
    """Tests for burn widget tone and survival bar effects."""

    def test_calm_day(self):
        snapshot = snapshot_for(3000)

        assert burn_widget_tone(snapshot) == BurnWidgetTone.STABLE
        assert survival_effect(snapshot) is None
        assert survival_fill(snapshot) == 100

    def test_close_to_limit(self):
        """120 of an allowed ~137 today."""
        snapshot = snapshot_for(3000, (120, TODAY))

        assert burn_widget_tone(snapshot) == BurnWidgetTone.SAFE
        assert survival_effect(snapshot) == SurvivalEffect.MELT

    def test_overspending(self):
        snapshot = snapshot_for(3000, (500, TODAY))

        assert burn_widget_tone(snapshot) == BurnWidgetTone.OVERSPEND
        assert survival_effect(snapshot) == SurvivalEffect.MELT

    def test_critical_stage(self):
        snapshot = snapshot_for(1000, (700, date(2024, 1, 2)), (100, TODAY))

        assert burn_widget_tone(snapshot) == BurnWidgetTone.CRITICAL
        assert survival_effect(snapshot) == SurvivalEffect.CRACK
        assert survival_fill(snapshot) == pytest.approx(20)

    def test_exhausted(self):
        snapshot = snapshot_for(100, (150, TODAY))

        assert burn_widget_tone(snapshot) == BurnWidgetTone.CRITICAL
        assert survival_effect(snapshot) == SurvivalEffect.GLITCH
        assert survival_fill(snapshot) == 0


class TestPrediction:
    """Tests for the run-out sentence."""

    def test_nothing_spent_today(self):
        message = prediction_message(snapshot_for(3000))
        assert message.endswith("you are within the daily limit.")

    def test_runs_out_inside_cycle(self):
        message = prediction_message(snapshot_for(3000, (500, TODAY)))
        assert message.endswith("you will run out of money on day 15 of the cycle.")

    def test_lasts_past_cycle_end(self):
        message = prediction_message(snapshot_for(3000, (120, TODAY)))
        assert message.endswith("budget lasts 24 more days.")


class TestPaceChart:
    """Tests for chart series."""

    def test_series_line_up(self):
        series = pace_chart_series(snapshot_for(3000, (100, date(2024, 1, 3))))

        assert len(series["day"]) == 32
        assert len(series["ideal"]) == len(series["actual"]) == 32
        assert series["day"][0] == 0
        assert series["ideal"][-1] == pytest.approx(3000)
        assert series["actual"][-1] == 100


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
