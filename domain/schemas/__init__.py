"""
Domain schemas package - Pydantic models for the HTTP layer.
"""

from domain.schemas.plan_schemas import (
    ShoppingListResponse,
    HealthResponse,
    ErrorBody,
    ErrorResponse,
)

__all__ = [
    "ShoppingListResponse",
    "HealthResponse",
    "ErrorBody",
    "ErrorResponse",
]
