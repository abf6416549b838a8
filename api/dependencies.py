"""
API dependencies for dependency injection
"""

from functools import lru_cache

from app.config import PipelineConfig, settings
from services.planner_service import PlannerService


@lru_cache(maxsize=1)
def get_pipeline_config() -> PipelineConfig:
    """Pipeline configuration snapshot taken from settings on first use."""
    return PipelineConfig.from_settings(settings)


def get_planner_service() -> PlannerService:
    """
    Planner service dependency for FastAPI routes.

    Usage:
        @router.post("/example")
        def example(planner: PlannerService = Depends(get_planner_service)):
            ...

    Tests override this dependency to inject a fake completion function.
    """
    return PlannerService(get_pipeline_config())
