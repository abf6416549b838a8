"""Services package - Business logic layer"""

from services.planner_service import PlannerService, ensure_goal
from services.shopping_service import ShoppingService
from services.llm_client import DeepSeekClient

__all__ = [
    "PlannerService",
    "ensure_goal",
    "ShoppingService",
    "DeepSeekClient",
]
