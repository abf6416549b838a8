"""
Domain enums for NutriChat application.
Contains all enumeration types used across the domain models.
"""

import enum


class GoalType(str, enum.Enum):
    """Nutrition goal types"""

    LOSS = "loss"
    MUSCLE = "muscle"
    BALANCED = "balanced"
    VEGAN = "vegan"
    BABY = "baby"


class Timeframe(str, enum.Enum):
    """Plan horizon requested from the generator"""

    DAY = "day"
    WEEK = "week"


class CaloriePreference(str, enum.Enum):
    """Coarse calorie target chosen by the user"""

    LOW = "low"
    MID = "mid"
    HIGH = "high"


class HistoryRole(str, enum.Enum):
    """Speaker of a conversation history entry"""

    USER = "user"
    ASSISTANT = "assistant"
