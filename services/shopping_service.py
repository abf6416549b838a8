"""Shopping list service"""

import logging
from typing import Any, Dict, List, Mapping

from app.exceptions import InvalidRequestError
from core.utils.helpers import parse_ingredient_list, strip_annotations
from domain.models import Plan

logger = logging.getLogger("nutrichat.shopping")


class ShoppingService:
    """Business logic for shopping list generation."""

    @staticmethod
    def build_list(plan: Any) -> List[str]:
        """
        Count ingredients across every meal of a plan.

        Algorithm:
        1. Flatten meals (day plans directly, week plans day by day)
        2. Split each meal's ingredients with the tolerant list parser
        3. Strip parenthesized annotations ("雞胸肉(去皮)" -> "雞胸肉")
        4. Count occurrences per name, keeping first-seen order

        Args:
            plan: Plan value object or any plan-shaped mapping exposing
                ``meals`` or ``days[].meals``

        Returns:
            Lines formatted as "- {name} ×{count}"

        Raises:
            InvalidRequestError: plan is not an object or holds no meals
        """
        if isinstance(plan, Plan):
            plan = plan.to_dict()
        if not isinstance(plan, Mapping):
            raise InvalidRequestError("購物清單請傳入有效的計畫資料。")

        meals = ShoppingService._collect_meals(plan)
        if not meals:
            raise InvalidRequestError("尚未找到任何餐點，請先生成食譜。")

        counts: Dict[str, int] = {}
        for meal in meals:
            ingredients = meal.get("ingredients") if isinstance(meal, Mapping) else None
            for ingredient in parse_ingredient_list(ingredients):
                name = strip_annotations(ingredient)
                if not name:
                    continue
                counts[name] = counts.get(name, 0) + 1

        logger.info("Shopping list built: meals=%d items=%d", len(meals), len(counts))
        return [f"- {name} ×{count}" for name, count in counts.items()]

    @staticmethod
    def _collect_meals(plan: Mapping[str, Any]) -> List[Any]:
        meals = plan.get("meals")
        if isinstance(meals, list) and meals:
            return meals
        days = plan.get("days")
        if not isinstance(days, list):
            return []
        collected: List[Any] = []
        for day in days:
            day_meals = day.get("meals") if isinstance(day, Mapping) else None
            if isinstance(day_meals, list):
                collected.extend(day_meals)
        return collected
