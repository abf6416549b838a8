"""
Canonical meal plan models.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import Field, model_serializer

from domain.enums import Timeframe
from domain.models.base import CanonicalModel, Number
from domain.models.request import Preferences, Profile


class MealMacros(CanonicalModel):
    """Per-meal macros, serialized with the short P/C/F keys"""

    protein: Optional[Number] = Field(default=None, alias="P")
    carbs: Optional[Number] = Field(default=None, alias="C")
    fat: Optional[Number] = Field(default=None, alias="F")


class MacroTotals(CanonicalModel):
    """Macro totals for a day or a plan, serialized with long keys"""

    protein: Optional[Number] = None
    carbs: Optional[Number] = None
    fat: Optional[Number] = None


class Overview(CanonicalModel):
    """Calorie/macro summary; absent parts are left out of the serialized form."""

    calories: Optional[Number] = None
    macros: Optional[MacroTotals] = None
    notes: Optional[List[str]] = None

    @model_serializer(mode="wrap")
    def _omit_absent(self, handler):
        data = handler(self)
        return {key: value for key, value in data.items() if value is not None}


class Meal(CanonicalModel):
    name: str
    meal_type: str
    kcal: Optional[Number] = None
    macro: Optional[MealMacros] = None
    macros: Optional[MacroTotals] = None
    ingredients: List[str] = Field(default_factory=list)
    steps: List[str] = Field(default_factory=list)
    instructions: str = ""
    tips: List[str] = Field(default_factory=list)
    notes: str = ""
    tags: List[str] = Field(default_factory=list)
    cuisine: str = ""


class DayPlan(CanonicalModel):
    label: str
    summary: str = ""
    overview: Optional[Overview] = None
    meals: List[Meal] = Field(default_factory=list)
    tips: List[str] = Field(default_factory=list)


class Plan(CanonicalModel):
    """Canonical day or week plan.

    Exactly one of ``meals``/``days`` is populated, according to ``timeframe``.
    ``insights`` is None when the generator gave none, and is then left out of
    the serialized plan rather than sent as an empty list.
    """

    timeframe: Timeframe
    type: str
    title: str
    profile_summary: str = ""
    overview: Optional[Overview] = None
    tips: List[str] = Field(default_factory=list)
    insights: Optional[List[str]] = None
    meals: List[Meal] = Field(default_factory=list)
    days: List[DayPlan] = Field(default_factory=list)
    goal: Optional[str] = None
    goal_notes: Optional[str] = None
    profile: Profile = Field(default_factory=Profile)
    preferences: Preferences = Field(default_factory=Preferences)
    summary: Optional[str] = None
    generated_at: datetime

    @model_serializer(mode="wrap")
    def _omit_missing_insights(self, handler):
        data = handler(self)
        if data.get("insights") is None:
            data.pop("insights", None)
        return data

    def all_meals(self) -> List[Meal]:
        """Meals in plan order (every day's meals for week plans)."""
        if self.timeframe == Timeframe.WEEK:
            return [meal for day in self.days for meal in day.meals]
        return list(self.meals)
