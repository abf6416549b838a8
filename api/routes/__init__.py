"""API routes package"""

from . import health, plans, shopping

__all__ = ["health", "plans", "shopping"]
