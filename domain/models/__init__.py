"""
Domain models package - immutable Pydantic value objects.
"""

from domain.models.base import CanonicalModel
from domain.models.request import CanonicalRequest, HistoryEntry, Preferences, Profile
from domain.models.plan import DayPlan, MacroTotals, Meal, MealMacros, Overview, Plan

__all__ = [
    "CanonicalModel",
    # Request models
    "CanonicalRequest",
    "HistoryEntry",
    "Preferences",
    "Profile",
    # Plan models
    "DayPlan",
    "MacroTotals",
    "Meal",
    "MealMacros",
    "Overview",
    "Plan",
]
