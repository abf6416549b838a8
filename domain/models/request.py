"""
Canonical request models.
"""

from typing import List, Optional

from pydantic import Field

from domain.enums import GoalType, HistoryRole
from domain.models.base import CanonicalModel, Number


class Profile(CanonicalModel):
    """Body measurements and food restrictions merged from every alias source"""

    age: Optional[Number] = None
    height_cm: Optional[Number] = None
    weight_kg: Optional[Number] = None
    baby_months: Optional[Number] = None
    allergies: List[str] = Field(default_factory=list)
    avoid_foods: List[str] = Field(default_factory=list)


class Preferences(CanonicalModel):
    cuisine: Optional[str] = None
    calorie_preference: Optional[str] = None
    vegetarian: Optional[bool] = None


class HistoryEntry(CanonicalModel):
    role: HistoryRole
    content: str


class CanonicalRequest(CanonicalModel):
    """De-duplicated, alias-resolved form of a planning request"""

    goal: Optional[str] = None
    goal_notes: Optional[str] = None
    profile: Profile = Field(default_factory=Profile)
    preferences: Preferences = Field(default_factory=Preferences)
    summary: Optional[str] = None
    history: List[HistoryEntry] = Field(default_factory=list)

    @property
    def is_baby(self) -> bool:
        return self.goal == GoalType.BABY.value

    def history_messages(self) -> List[dict]:
        """History as chat messages ({role, content})."""
        return [entry.to_dict() for entry in self.history]
