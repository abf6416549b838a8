"""
App package - Application configuration and core utilities.
Contains settings, exceptions, and foundational application code.
"""

from app.config import settings, PipelineConfig
from app.exceptions import (
    NutriChatError,
    InvalidRequestError,
    UpstreamError,
    MalformedResponseError,
    ConfigurationError,
)

__all__ = [
    "settings",
    "PipelineConfig",
    "NutriChatError",
    "InvalidRequestError",
    "UpstreamError",
    "MalformedResponseError",
    "ConfigurationError",
]
