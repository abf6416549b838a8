"""API routes for shopping list generation."""

import logging
from typing import Any, Mapping

from fastapi import APIRouter, Body

from domain.schemas import ShoppingListResponse
from services.shopping_service import ShoppingService

router = APIRouter(prefix="/shopping-list", tags=["Shopping List"])
logger = logging.getLogger("nutrichat.api.shopping")


@router.post("", response_model=ShoppingListResponse)
def create_shopping_list(body: Any = Body(default=None)):
    """
    Build a shopping list from a previously generated plan.

    Any body shape is accepted; a missing or non-object plan is a 400.

    Example request:
    ```json
    {
        "plan": {"meals": [{"ingredients": ["雞胸肉(去皮)", "糙米"]}]}
    }
    ```
    """
    plan = body.get("plan") if isinstance(body, Mapping) else None
    items = ShoppingService.build_list(plan)
    return ShoppingListResponse(list=items)
