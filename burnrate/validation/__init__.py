"""Input validation package."""

from burnrate.validation.validator import (
    CycleSetupValidator,
    default_cycle_dates,
    default_end_for,
)

__all__ = ["CycleSetupValidator", "default_cycle_dates", "default_end_for"]
