from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, Sequence

from app.config import PipelineConfig
from app.exceptions import InvalidRequestError
from domain.enums import GoalType, Timeframe
from domain.mappers.plan_mapper import canonicalize_plan
from domain.mappers.request_mapper import normalize_request
from domain.models import CanonicalRequest, Plan
from services.llm_client import DeepSeekClient
from services.prompts import build_prompt
from services.response_parser import parse_plan


logger = logging.getLogger("nutrichat.planner")

# (prompt, history messages) -> raw completion text
CompletionFn = Callable[[str, Sequence[Dict[str, Any]]], str]

MIN_SOLID_FOOD_MONTHS = 6


def ensure_goal(request: CanonicalRequest, timeframe: Timeframe) -> None:
    """
    Goal-specific preconditions.

    Raises:
        InvalidRequestError: goal missing; baby goal without babyMonths;
            baby under 6 months asking for a day plan
    """
    if not request.goal:
        raise InvalidRequestError("缺少目標設定，請提供 goal 欄位。", details={"field": "goal"})
    if request.goal == GoalType.BABY.value:
        months = request.profile.baby_months
        if months is None:
            raise InvalidRequestError(
                "嬰幼兒計畫需提供寶寶月齡（profile.babyMonths）。",
                details={"field": "profile.babyMonths"},
            )
        if months < MIN_SOLID_FOOD_MONTHS and Timeframe(timeframe) == Timeframe.DAY:
            raise InvalidRequestError(
                "6 個月以下以奶為主，不建議建立固體輔食計畫。",
                details={"field": "profile.babyMonths", "minimum": MIN_SOLID_FOOD_MONTHS},
            )


class PlannerService:
    """
    Plan generation pipeline:
    - merges the raw request into a CanonicalRequest
    - checks goal preconditions
    - prompts the generator with the request and bounded history
    - extracts, parses and canonicalizes the reply into a Plan

    Every failure is raised where it is detected; nothing is retried.
    """

    def __init__(self, config: PipelineConfig, completion: Optional[CompletionFn] = None):
        self.config = config
        self.completion: CompletionFn = completion or DeepSeekClient(config)

    def prepare_request(self, raw: Any, timeframe: Timeframe) -> CanonicalRequest:
        request = normalize_request(raw, history_limit=self.config.history_limit)
        ensure_goal(request, timeframe)
        return request

    def generate_plan(self, raw: Any, timeframe: Timeframe) -> Plan:
        timeframe = Timeframe(timeframe)
        request = self.prepare_request(raw, timeframe)

        logger.info(
            "Generating %s plan: goal=%s history=%d",
            timeframe.value,
            request.goal,
            len(request.history),
        )

        prompt = build_prompt(request, timeframe)
        history: List[Dict[str, Any]] = request.history_messages()
        raw_text = self.completion(prompt, history)

        parsed = parse_plan(raw_text)
        plan = canonicalize_plan(parsed, timeframe, request)

        logger.info(
            "Generated %s plan: meals=%d days=%d",
            timeframe.value,
            len(plan.meals),
            len(plan.days),
        )
        return plan

    def generate_day_plan(self, raw: Any) -> Plan:
        return self.generate_plan(raw, Timeframe.DAY)

    def generate_week_plan(self, raw: Any) -> Plan:
        return self.generate_plan(raw, Timeframe.WEEK)
