from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends

from api.dependencies import get_planner_service
from domain.enums import Timeframe
from services.planner_service import PlannerService

router = APIRouter(prefix="/generate", tags=["Meal Planning"])
logger = logging.getLogger("nutrichat.api.plans")


def _generate(planner: PlannerService, body: Any, timeframe: Timeframe) -> Dict[str, Any]:
    plan = planner.generate_plan(body, timeframe)
    logger.info("Returning %s plan %r", timeframe.value, plan.title)
    return plan.to_dict()


@router.post("/day")
def generate_day_plan(
    body: Any = Body(default=None),
    planner: PlannerService = Depends(get_planner_service),
):
    """
    Generate a one-day meal plan.

    The body is the raw request object: goal, profile, preferences and their
    historical aliases/snapshots, plus an optional conversation history.
    Returns the canonical plan with ``meals`` populated and ``days`` empty.
    """
    return _generate(planner, body, Timeframe.DAY)


@router.post("/week")
def generate_week_plan(
    body: Any = Body(default=None),
    planner: PlannerService = Depends(get_planner_service),
):
    """
    Generate a seven-day meal plan.

    Returns the canonical plan with ``days`` populated and ``meals`` empty.
    """
    return _generate(planner, body, Timeframe.WEEK)
