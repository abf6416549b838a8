"""
Domain mappers package.
Handles transformation of loosely-shaped request/generator data into canonical value objects.
"""

from domain.mappers.request_mapper import normalize_history, normalize_request
from domain.mappers.plan_mapper import (
    canonicalize_plan,
    normalize_day,
    normalize_macro_totals,
    normalize_macros,
    normalize_meal,
    normalize_overview,
)

__all__ = [
    "normalize_history",
    "normalize_request",
    "canonicalize_plan",
    "normalize_day",
    "normalize_macro_totals",
    "normalize_macros",
    "normalize_meal",
    "normalize_overview",
]
