"""
Plan domain mappers.
Canonicalizes the loosely-shaped plan object produced by the generator into Plan value objects.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Sequence

from app.exceptions import MalformedResponseError
from core.utils.helpers import (
    coerce_number,
    coerce_string,
    first_defined,
    normalize_steps,
    normalize_text_list,
    parse_ingredient_list,
)
from domain.enums import CaloriePreference, GoalType, Timeframe
from domain.models import (
    CanonicalRequest,
    DayPlan,
    MacroTotals,
    Meal,
    MealMacros,
    Overview,
    Plan,
)

logger = logging.getLogger("nutrichat.mapper.plan")


# ============================================================================
# Alias tables
# ============================================================================

MEAL_MACRO_ALIASES: Dict[str, Sequence[str]] = {
    "protein": ("P", "p", "protein", "proteins", "proteinGrams"),
    "carbs": ("C", "c", "carbs", "carbohydrates", "carbohydrateGrams"),
    "fat": ("F", "f", "fat", "fats", "fatGrams"),
}

MACRO_TOTAL_ALIASES: Dict[str, Sequence[str]] = {
    "protein": ("protein", "proteins", "P", "p"),
    "carbs": ("carbs", "carbohydrates", "C", "c"),
    "fat": ("fat", "fats", "F", "f"),
}

MACRO_CONTAINER_KEYS = ("macros", "macrosTotal", "macroTotals", "macro", "macronutrients", "nutrients")

OVERVIEW_CALORIE_KEYS = ("calories", "calorieTotal", "totalCalories", "kcal")
OVERVIEW_KEYS = ("overview", "meta")

MEAL_ALIASES: Dict[str, Sequence[str]] = {
    "name": ("name", "title"),
    "meal_type": ("mealType", "type"),
    "kcal": ("kcal", "calories", "energy", "kilocalories"),
    "macro": ("macro", "macros", "macronutrients", "nutrients"),
    "ingredients": ("ingredients", "ingredientList", "materials"),
    "steps": ("steps", "instructions", "method"),
    "tips": ("tips", "advice", "tipsList"),
    "notes": ("notes", "note", "comment"),
    "tags": ("tags", "labels", "focus"),
    "cuisine": ("cuisine", "origin", "style"),
}

DAY_ALIASES: Dict[str, Sequence[str]] = {
    "label": ("label", "name"),
    "summary": ("summary", "note"),
}

PLAN_SUMMARY_KEYS = ("profileSummary", "summary")

DEFAULT_MEAL_NAME = "未命名餐點"
DEFAULT_MEAL_TYPE = "餐點"
BABY_MEAL_TYPE = "寶寶餐"

BABY_DAY_TIP = "觀察寶寶對新食材的反應，出現不適徵兆請暫停並諮詢醫師。"
BABY_PLAN_TIPS = (
    "避免蜂蜜、過鹹與油炸食材，維持軟爛或泥糊質地。",
    "每次新增食材請遵循少量、單一、觀察 2-3 天的原則。",
)

PLAN_TITLES = {
    (True, Timeframe.WEEK): "客製嬰幼兒一周餐飲計畫",
    (True, Timeframe.DAY): "客製嬰幼兒一日輔食建議",
    (False, Timeframe.WEEK): "客製一周營養餐計畫",
    (False, Timeframe.DAY): "客製一日營養餐",
}

GOAL_LABELS = {
    GoalType.LOSS.value: "減脂",
    GoalType.MUSCLE.value: "增肌",
    GoalType.BALANCED.value: "均衡營養",
    GoalType.VEGAN.value: "素食",
    GoalType.BABY.value: "嬰幼兒輔食",
}

CALORIE_LABELS = {
    CaloriePreference.LOW.value: "低熱量",
    CaloriePreference.HIGH.value: "高熱量",
}
DEFAULT_CALORIE_LABEL = "中等熱量"


# ============================================================================
# Macros and overview
# ============================================================================


def _resolve_macros(source: Mapping[str, Any], aliases: Mapping[str, Sequence[str]]) -> Dict[str, Any]:
    return {
        field: coerce_number(first_defined(source, keys))
        for field, keys in aliases.items()
    }


def normalize_macros(source: Any) -> Optional[MealMacros]:
    """Per-meal {P, C, F}; None unless at least one component is a number."""
    if not source or not isinstance(source, Mapping):
        return None
    values = _resolve_macros(source, MEAL_MACRO_ALIASES)
    if all(value is None for value in values.values()):
        return None
    return MealMacros(**values)


def normalize_macro_totals(source: Any) -> Optional[MacroTotals]:
    """{protein, carbs, fat} from a nested macro object, or from source itself."""
    if not isinstance(source, Mapping):
        return None
    container = source
    for key in MACRO_CONTAINER_KEYS:
        if source.get(key):
            container = source[key]
            break
    if not isinstance(container, Mapping):
        return None
    values = _resolve_macros(container, MACRO_TOTAL_ALIASES)
    if all(value is None for value in values.values()):
        return None
    return MacroTotals(**values)


def normalize_overview(meta: Any) -> Optional[Overview]:
    if not meta or not isinstance(meta, Mapping):
        return None
    calories = coerce_number(first_defined(meta, OVERVIEW_CALORIE_KEYS))
    macros = normalize_macro_totals(meta)
    notes = normalize_text_list(meta.get("notes"))
    if calories is None and macros is None and not notes:
        return None
    return Overview(calories=calories, macros=macros, notes=notes or None)


def _overview_source(raw: Mapping[str, Any]) -> Any:
    return first_defined(raw, OVERVIEW_KEYS, skip_blank=True)


def _overview_notes(raw: Mapping[str, Any]) -> List[str]:
    """Notes of the first overview container (overview, then meta) that has any."""
    for key in OVERVIEW_KEYS:
        container = raw.get(key)
        if isinstance(container, Mapping):
            notes = normalize_text_list(container.get("notes"))
            if notes:
                return notes
    return []


# ============================================================================
# Meals and days
# ============================================================================


def render_instructions(steps: Sequence[str]) -> str:
    return "\n".join(f"{idx}. {step}" for idx, step in enumerate(steps, start=1))


def normalize_meal(meal: Any, goal: Optional[str]) -> Optional[Meal]:
    """
    Build a Meal from one raw meal value.

    Returns None for anything that is not an object; callers drop those.
    """
    if not isinstance(meal, Mapping):
        return None

    def pick(field: str, skip_blank: bool = False) -> Any:
        return first_defined(meal, MEAL_ALIASES[field], skip_blank=skip_blank)

    default_type = BABY_MEAL_TYPE if goal == GoalType.BABY.value else DEFAULT_MEAL_TYPE
    macro = normalize_macros(pick("macro"))
    steps = normalize_steps(pick("steps", skip_blank=True))

    return Meal(
        name=coerce_string(pick("name", skip_blank=True)) or DEFAULT_MEAL_NAME,
        meal_type=coerce_string(pick("meal_type", skip_blank=True)) or default_type,
        kcal=coerce_number(pick("kcal")),
        macro=macro,
        macros=MacroTotals(protein=macro.protein, carbs=macro.carbs, fat=macro.fat) if macro else None,
        ingredients=parse_ingredient_list(pick("ingredients", skip_blank=True)),
        steps=steps,
        instructions=render_instructions(steps),
        tips=normalize_text_list(pick("tips", skip_blank=True)),
        notes="\n".join(normalize_text_list(pick("notes", skip_blank=True))),
        tags=normalize_text_list(pick("tags", skip_blank=True)),
        cuisine=coerce_string(pick("cuisine", skip_blank=True)) or "",
    )


def normalize_meals(meals: Any, goal: Optional[str]) -> List[Meal]:
    if not isinstance(meals, list):
        return []
    normalized = []
    for raw_meal in meals:
        meal = normalize_meal(raw_meal, goal)
        if meal is None:
            logger.debug("Dropping non-object meal: %r", raw_meal)
            continue
        normalized.append(meal)
    return normalized


def normalize_day(day: Any, index: int, request: CanonicalRequest) -> DayPlan:
    """Canonical day; index is the 0-based position, labels are 1-based."""
    default_label = f"Day {index + 1}"
    if not isinstance(day, Mapping):
        return DayPlan(label=default_label)

    tips = normalize_text_list(day.get("tips"))
    if not tips and request.is_baby:
        tips = [BABY_DAY_TIP]

    return DayPlan(
        label=coerce_string(first_defined(day, DAY_ALIASES["label"], skip_blank=True)) or default_label,
        summary=coerce_string(first_defined(day, DAY_ALIASES["summary"], skip_blank=True)) or "",
        overview=normalize_overview(_overview_source(day)),
        meals=normalize_meals(day.get("meals"), request.goal),
        tips=tips,
    )


# ============================================================================
# Plan-level defaults
# ============================================================================


def infer_plan_type(goal: Optional[str], timeframe: Timeframe) -> str:
    bucket = "baby" if goal == GoalType.BABY.value else "adult"
    return f"{bucket}-{Timeframe(timeframe).value}"


def default_title(goal: Optional[str], timeframe: Timeframe) -> str:
    return PLAN_TITLES[(goal == GoalType.BABY.value, Timeframe(timeframe))]


def label_goal(goal: str) -> str:
    return GOAL_LABELS.get(goal, goal)


def _format_number(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def build_profile_summary(request: CanonicalRequest) -> Optional[str]:
    """Readable one-line summary of the request, or None when nothing is known."""
    parts: List[str] = []
    profile = request.profile
    preferences = request.preferences

    if request.goal:
        parts.append(f"目標：{label_goal(request.goal)}")
    if profile.age is not None:
        parts.append(f"年齡 {_format_number(profile.age)} 歲")
    if profile.height_cm is not None:
        parts.append(f"身高 {_format_number(profile.height_cm)} cm")
    if profile.weight_kg is not None:
        parts.append(f"體重 {_format_number(profile.weight_kg)} kg")
    if profile.baby_months is not None:
        parts.append(f"寶寶 {_format_number(profile.baby_months)} 月齡")
    if profile.allergies:
        parts.append(f"過敏：{'、'.join(profile.allergies)}")
    if profile.avoid_foods:
        parts.append(f"忌口：{'、'.join(profile.avoid_foods)}")
    if preferences.cuisine:
        parts.append(f"偏好菜系：{preferences.cuisine}")
    if preferences.calorie_preference:
        parts.append(CALORIE_LABELS.get(preferences.calorie_preference, DEFAULT_CALORIE_LABEL))
    if preferences.vegetarian:
        parts.append("素食偏好")

    summary = "；".join(parts)
    if request.goal_notes:
        suffix = f"目標補充：{request.goal_notes}"
        return f"{summary}。{suffix}" if summary else suffix
    return summary or None


# ============================================================================
# Plan
# ============================================================================


def canonicalize_plan(plan: Any, timeframe: Timeframe, request: CanonicalRequest) -> Plan:
    """
    Produce the canonical Plan from a parsed generator object.

    Missing or malformed sub-fields fall back to defaults; a missing or empty
    ``meals`` (day) / ``days`` (week) array is a MalformedResponseError.

    Args:
        plan: Parsed JSON value returned by the generator
        timeframe: Requested plan horizon
        request: The canonical request the plan was generated for

    Returns:
        Plan value object
    """
    if not isinstance(plan, Mapping):
        raise MalformedResponseError("DeepSeek 回傳格式不正確。")
    timeframe = Timeframe(timeframe)

    meta = _overview_source(plan)
    overview = normalize_overview(meta)

    tips = normalize_text_list(plan.get("tips"))
    if not tips and request.is_baby:
        tips = list(BABY_PLAN_TIPS)

    insights = normalize_text_list(plan.get("insights"))
    if not insights:
        insights = _overview_notes(plan)

    if timeframe == Timeframe.WEEK:
        raw_days = plan.get("days")
        if not isinstance(raw_days, list) or not raw_days:
            raise MalformedResponseError("DeepSeek 回傳缺少 days 陣列。")
        days = [normalize_day(day, idx, request) for idx, day in enumerate(raw_days)]
        meals: List[Meal] = []
    else:
        raw_meals = plan.get("meals")
        if not isinstance(raw_meals, list) or not raw_meals:
            raise MalformedResponseError("DeepSeek 回傳缺少 meals 陣列。")
        meals = normalize_meals(raw_meals, request.goal)
        if not meals:
            raise MalformedResponseError("DeepSeek 回傳的 meals 陣列沒有有效餐點。")
        days = []

    profile_summary = coerce_string(first_defined(plan, PLAN_SUMMARY_KEYS, skip_blank=True))

    return Plan(
        timeframe=timeframe,
        type=coerce_string(plan.get("type")) or infer_plan_type(request.goal, timeframe),
        title=coerce_string(plan.get("title")) or default_title(request.goal, timeframe),
        profile_summary=profile_summary or build_profile_summary(request) or "",
        overview=overview,
        tips=tips,
        insights=insights or None,
        meals=meals,
        days=days,
        goal=request.goal,
        goal_notes=request.goal_notes,
        profile=request.profile,
        preferences=request.preferences,
        summary=request.summary,
        generated_at=datetime.now(timezone.utc),
    )
