"""
Shared test fixtures and utilities for NutriChat test suite.

This module contains realistic raw requests, canned generator replies, a fake
completion function and the API test client setup that are reused across
multiple test files to ensure consistency and reduce duplication.
"""

import json
from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from app.config import PipelineConfig
from api.dependencies import get_planner_service
from services.planner_service import PlannerService
from main import app


# Realistic raw requests, shaped the way the front end has sent them over time
REALISTIC_REQUESTS = {
    "loss": {
        "goal": "loss",
        "goalNotes": "想在三個月內減五公斤",
        "profile": {"age": 30, "heightCm": 170, "weightKg": 65, "allergies": ["乳"]},
        "preferences": {"cuisine": "台式", "caloriePreference": "low", "vegetarian": False},
    },
    "muscle": {
        "goal": "muscle",
        "age": "28",
        "height": "178",
        "weight": "72.5",
        "caloriePref": "high",
        "preferenceSummary": "每週重訓四次",
    },
    "baby": {
        "goal": "baby",
        "profile": {"babyMonths": 8, "allergies": ["蛋"]},
    },
    "baby_young": {
        "goal": "baby",
        "profileSnapshot": {"babyMonths": 4},
    },
}


def make_raw_request(kind: str = "loss", **overrides) -> Dict[str, Any]:
    """
    Create a raw (alias-laden) request body for testing.

    Args:
        kind: Key into REALISTIC_REQUESTS (loss, muscle, baby, baby_young)
        **overrides: Top-level fields to add or replace

    Returns:
        dict: A fresh copy safe to mutate

    Example:
        >>> body = make_raw_request("baby", history=["寶寶對蛋過敏"])
        >>> body["goal"]
        'baby'
    """
    body = json.loads(json.dumps(REALISTIC_REQUESTS[kind]))
    body.update(overrides)
    return body


def make_meal(name: str = "燕麥粥", **fields) -> Dict[str, Any]:
    """Raw generator meal with realistic defaults."""
    meal = {
        "mealType": "早餐",
        "name": name,
        "kcal": 320,
        "macros": {"P": 12, "C": 50, "F": 8},
        "ingredients": ["燕麥", "牛奶(低脂)", "香蕉"],
        "steps": ["燕麥加牛奶煮滾", "加入香蕉片"],
        "tags": ["高纖"],
        "tips": ["可換成豆漿"],
    }
    meal.update(fields)
    return meal


def make_day_plan(meals: Optional[List[Any]] = None, **fields) -> Dict[str, Any]:
    """Raw generator reply object for a one-day plan."""
    plan = {
        "timeframe": "day",
        "title": "一日減脂餐",
        "profileSummary": "30 歲減脂需求",
        "overview": {
            "calories": 1500,
            "macros": {"protein": 110, "carbs": 150, "fat": 45},
            "notes": ["多喝水", "晚餐少澱粉"],
        },
        "meals": meals if meals is not None else [
            make_meal(),
            make_meal("雞胸沙拉", mealType="午餐", ingredients=["雞胸肉(去皮)", "生菜"]),
        ],
        "tips": ["每餐細嚼慢嚥"],
    }
    plan.update(fields)
    return plan


def make_week_plan(days: int = 7, **fields) -> Dict[str, Any]:
    """Raw generator reply object for a week plan."""
    plan = {
        "timeframe": "week",
        "title": "一週增肌餐",
        "days": [
            {
                "label": f"Day {i + 1}",
                "summary": "高蛋白",
                "overview": {"calories": 2600},
                "meals": [make_meal(f"第{i + 1}天早餐")],
                "tips": ["訓練後補充蛋白質"],
            }
            for i in range(days)
        ],
    }
    plan.update(fields)
    return plan


def as_reply(plan: Any, fenced: bool = True) -> str:
    """Wrap a plan the way the generator tends to: prose plus a ```json fence."""
    body = json.dumps(plan, ensure_ascii=False)
    if not fenced:
        return body
    return f"好的，以下是您的計畫：\n```json\n{body}\n```\n祝您用餐愉快！"


class FakeCompletion:
    """
    Stand-in for the generator: records every call and returns a canned reply
    (or raises a canned error).
    """

    def __init__(self, reply: Optional[str] = None, error: Optional[Exception] = None):
        self.reply = reply
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    def __call__(self, prompt: str, history) -> str:
        self.calls.append({"prompt": prompt, "history": list(history)})
        if self.error is not None:
            raise self.error
        return self.reply


def make_planner(reply: Optional[str] = None, error: Optional[Exception] = None, history_limit: int = 12):
    """PlannerService wired to a FakeCompletion; returns (planner, fake)."""
    fake = FakeCompletion(reply=reply, error=error)
    planner = PlannerService(PipelineConfig(history_limit=history_limit, api_key="test-key"), completion=fake)
    return planner, fake


# =============================================================================
# API CLIENT FIXTURE
# =============================================================================


@pytest.fixture
def api_client():
    """
    TestClient plus a hook to choose the planner each test uses.

    Yields:
        (client, use_planner) where use_planner(planner) installs the override
    """

    def use_planner(planner: PlannerService) -> None:
        app.dependency_overrides[get_planner_service] = lambda: planner

    with TestClient(app) as client:
        yield client, use_planner
    app.dependency_overrides.clear()
