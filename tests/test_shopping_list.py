"""
Tests for shopping list aggregation.
"""

import pytest

from app.exceptions import InvalidRequestError
from domain.enums import Timeframe
from domain.mappers.plan_mapper import canonicalize_plan
from services.shopping_service import ShoppingService
from test_fixtures import make_day_plan, make_meal, make_week_plan


def test_counts_ingredients_across_meals():
    """Annotations are stripped before counting; first-seen order is kept"""
    plan = {
        "meals": [
            {"ingredients": ["雞胸肉(去皮)", "糙米"]},
            {"ingredients": ["雞胸肉", "花椰菜"]},
        ]
    }

    assert ShoppingService.build_list(plan) == [
        "- 雞胸肉 ×2",
        "- 糙米 ×1",
        "- 花椰菜 ×1",
    ]


def test_full_width_annotations_and_delimited_strings():
    plan = {"meals": [{"ingredients": "豆腐（板豆腐）、青蔥、青蔥"}, {"ingredients": ["豆腐"]}]}

    assert ShoppingService.build_list(plan) == ["- 豆腐 ×2", "- 青蔥 ×2"]


def test_week_plan_flattens_days():
    plan = make_week_plan(days=3)

    result = ShoppingService.build_list(plan)

    assert result == ["- 燕麥 ×3", "- 牛奶 ×3", "- 香蕉 ×3"]


def test_accepts_canonical_plan_object(loss_request):
    plan = canonicalize_plan(make_day_plan(), Timeframe.DAY, loss_request)

    assert ShoppingService.build_list(plan) == [
        "- 燕麥 ×1",
        "- 牛奶 ×1",
        "- 香蕉 ×1",
        "- 雞胸肉 ×1",
        "- 生菜 ×1",
    ]


def test_meals_without_ingredients_contribute_nothing():
    plan = {"meals": [make_meal(ingredients=None), "junk", {"ingredients": ["(適量)", "鹽"]}]}

    assert ShoppingService.build_list(plan) == ["- 鹽 ×1"]


@pytest.mark.parametrize("plan", [None, "plan", ["meals"]])
def test_non_object_plan_rejected(plan):
    with pytest.raises(InvalidRequestError) as exc_info:
        ShoppingService.build_list(plan)

    assert exc_info.value.message == "購物清單請傳入有效的計畫資料。"


@pytest.mark.parametrize(
    "plan",
    [{}, {"meals": []}, {"days": []}, {"days": [{"meals": []}, None]}],
)
def test_plan_without_meals_rejected(plan):
    with pytest.raises(InvalidRequestError) as exc_info:
        ShoppingService.build_list(plan)

    assert exc_info.value.message == "尚未找到任何餐點，請先生成食譜。"


def test_same_ingredient_with_different_annotations():
    plan = {"meals": [{"ingredients": ["雞胸肉(去皮)"]}, {"ingredients": ["雞胸肉(切塊)"]}]}

    assert ShoppingService.build_list(plan) == ["- 雞胸肉 ×2"]
