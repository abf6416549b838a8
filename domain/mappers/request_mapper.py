"""
Request domain mapper.
Merges a raw request (with its accumulated field aliases and snapshots) into a CanonicalRequest.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from app.config import DEFAULT_HISTORY_LIMIT
from core.utils.helpers import (
    coerce_bool,
    coerce_number,
    coerce_string,
    unique_list,
)
from domain.enums import CaloriePreference, HistoryRole
from domain.models import CanonicalRequest, HistoryEntry, Preferences, Profile

logger = logging.getLogger("nutrichat.mapper.request")

# A location is (section, key); section None means the top level of the raw request.
Location = Tuple[Optional[str], str]

SECTIONS = ("profile", "preferences", "profileSnapshot", "preferenceSnapshot")

LIST_SOURCES: Dict[str, Sequence[Location]] = {
    "allergies": (
        (None, "allergies"),
        ("profile", "allergies"),
        ("profileSnapshot", "allergies"),
    ),
    "avoid_foods": (
        (None, "avoidFoods"),
        (None, "dietaryRestrictions"),
        ("profile", "avoidFoods"),
        ("profile", "dietaryRestrictions"),
        ("profileSnapshot", "avoidFoods"),
    ),
}

PROFILE_SOURCES: Dict[str, Sequence[Location]] = {
    "age": (
        ("profile", "age"),
        (None, "age"),
        ("profileSnapshot", "age"),
        (None, "rawAge"),
    ),
    "height_cm": (
        ("profile", "heightCm"),
        ("profile", "height"),
        (None, "height"),
        ("profileSnapshot", "heightCm"),
        ("profileSnapshot", "height"),
    ),
    "weight_kg": (
        ("profile", "weightKg"),
        ("profile", "weight"),
        (None, "weight"),
        ("profileSnapshot", "weightKg"),
        ("profileSnapshot", "weight"),
    ),
    "baby_months": (
        ("profile", "babyMonths"),
        (None, "babyMonths"),
        ("profileSnapshot", "babyMonths"),
        ("profile", "ageInMonths"),
        ("profileSnapshot", "ageInMonths"),
    ),
}

PREFERENCE_SOURCES: Dict[str, Sequence[Location]] = {
    "cuisine": (
        ("preferences", "cuisine"),
        (None, "cuisine"),
        ("profile", "cuisinePreference"),
        ("preferenceSnapshot", "cuisine"),
        ("profileSnapshot", "cuisinePreference"),
    ),
    "calorie_preference": (
        ("preferences", "caloriePreference"),
        (None, "caloriePref"),
        ("profile", "caloriePreference"),
        ("preferenceSnapshot", "caloriePreference"),
        ("profileSnapshot", "caloriePreference"),
    ),
    "vegetarian": (
        ("preferences", "vegetarian"),
        (None, "vegetarian"),
        ("profile", "vegetarian"),
        ("preferenceSnapshot", "vegetarian"),
        ("profileSnapshot", "vegetarian"),
    ),
}

GOAL_SOURCES: Sequence[Location] = (
    (None, "goal"),
    ("profile", "goal"),
    ("profileSnapshot", "goal"),
    ("preferenceSnapshot", "goal"),
)

GOAL_NOTES_SOURCES: Sequence[Location] = (
    (None, "goalNotes"),
    (None, "goalDescription"),
    ("profile", "goalNotes"),
    ("preferenceSnapshot", "goalNotes"),
)

SUMMARY_SOURCES: Sequence[Location] = (
    (None, "preferenceSummary"),
    (None, "summary"),
    ("preferences", "summary"),
    ("profile", "preferenceSummary"),
    ("profileSnapshot", "preferenceSummary"),
)

HISTORY_KEYS = ("history", "chatHistory", "conversationHistory")
HISTORY_ROLE_KEYS = ("role", "speaker")
HISTORY_CONTENT_KEYS = ("content", "text", "message", "value")

ROLE_ALIASES: Dict[str, HistoryRole] = {
    "assistant": HistoryRole.ASSISTANT,
    "bot": HistoryRole.ASSISTANT,
    "ai": HistoryRole.ASSISTANT,
    "system": HistoryRole.ASSISTANT,
    "user": HistoryRole.USER,
    "human": HistoryRole.USER,
    "client": HistoryRole.USER,
}


def _sections(raw: Mapping[str, Any]) -> Dict[Optional[str], Mapping[str, Any]]:
    found: Dict[Optional[str], Mapping[str, Any]] = {None: raw}
    for name in SECTIONS:
        section = raw.get(name)
        found[name] = section if isinstance(section, Mapping) else {}
    return found


def resolve_first(sections: Mapping[Optional[str], Mapping[str, Any]], locations: Sequence[Location]) -> Any:
    """First non-null value across locations, in order."""
    for section, key in locations:
        value = sections[section].get(key)
        if value is not None:
            return value
    return None


def resolve_union(sections: Mapping[Optional[str], Mapping[str, Any]], locations: Sequence[Location]) -> List[str]:
    """Order-preserving, de-duplicated union of every array found at locations."""
    merged: List[Any] = []
    for section, key in locations:
        value = sections[section].get(key)
        if isinstance(value, list):
            merged.extend(value)
    return unique_list(merged)


def normalize_history_role(role: Optional[str]) -> Optional[HistoryRole]:
    if not role:
        return None
    return ROLE_ALIASES.get(role.lower())


def _history_entry(entry: Any) -> Optional[HistoryEntry]:
    if entry is None:
        return None
    if isinstance(entry, str):
        content = coerce_string(entry)
        return HistoryEntry(role=HistoryRole.USER, content=content) if content else None
    if not isinstance(entry, Mapping):
        return None
    role = normalize_history_role(coerce_string(_first_truthy(entry, HISTORY_ROLE_KEYS)))
    content = coerce_string(_first_truthy(entry, HISTORY_CONTENT_KEYS))
    if not role or not content:
        return None
    return HistoryEntry(role=role, content=content)


def _first_truthy(source: Mapping[str, Any], keys: Sequence[str]) -> Any:
    for key in keys:
        value = source.get(key)
        if value:
            return value
    return None


def normalize_history(value: Any, limit: int = DEFAULT_HISTORY_LIMIT) -> List[HistoryEntry]:
    """Sanitize a conversation history and keep only the most recent ``limit`` entries."""
    if not isinstance(value, list):
        return []
    max_entries = limit if limit and limit > 0 else DEFAULT_HISTORY_LIMIT
    entries = []
    for raw_entry in value:
        entry = _history_entry(raw_entry)
        if entry is None:
            logger.debug("Dropping unusable history entry: %r", raw_entry)
            continue
        entries.append(entry)
    return entries[-max_entries:]


def normalize_request(raw: Any, history_limit: int = DEFAULT_HISTORY_LIMIT) -> CanonicalRequest:
    """
    Merge a raw request into a CanonicalRequest.

    Scalar fields take the first non-null value along their alias list; allergy and
    avoid-food lists are the de-duplicated union of every array that carries them.

    Args:
        raw: Request body as received (any JSON value; non-objects count as empty)
        history_limit: Maximum number of history entries to keep

    Returns:
        CanonicalRequest
    """
    if not isinstance(raw, Mapping):
        raw = {}
    sections = _sections(raw)

    profile = Profile(
        allergies=resolve_union(sections, LIST_SOURCES["allergies"]),
        avoid_foods=resolve_union(sections, LIST_SOURCES["avoid_foods"]),
        **{
            field: coerce_number(resolve_first(sections, locations))
            for field, locations in PROFILE_SOURCES.items()
        },
    )

    preferences = Preferences(
        cuisine=coerce_string(resolve_first(sections, PREFERENCE_SOURCES["cuisine"])),
        calorie_preference=_calorie_preference(
            resolve_first(sections, PREFERENCE_SOURCES["calorie_preference"])
        ),
        vegetarian=coerce_bool(resolve_first(sections, PREFERENCE_SOURCES["vegetarian"])),
    )

    goal = coerce_string(resolve_first(sections, GOAL_SOURCES))
    history_source = _first_truthy(raw, HISTORY_KEYS)

    return CanonicalRequest(
        goal=goal.lower() if goal else None,
        goal_notes=coerce_string(resolve_first(sections, GOAL_NOTES_SOURCES)),
        profile=profile,
        preferences=preferences,
        summary=coerce_string(resolve_first(sections, SUMMARY_SOURCES)),
        history=normalize_history(history_source, history_limit),
    )


def _calorie_preference(value: Any) -> Optional[str]:
    """low / mid / high, case-insensitive; anything else is None."""
    text = coerce_string(value)
    if not text:
        return None
    try:
        return CaloriePreference(text.lower()).value
    except ValueError:
        logger.debug("Ignoring unknown calorie preference: %r", value)
        return None
