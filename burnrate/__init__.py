"""
Burnrate - Source Package

A personal budgeting assistant that keeps one spending cycle on pace:
how much may still be spent today, and how close the budget is to
running out.

DESIGN PRINCIPLES:
1. The pacing engine is pure: same cycle + same day = same figures
2. Only the orchestrator reads the clock
3. Validation reports, never silently corrects
4. Every change to a cycle is auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Burnrate Team"
