"""
Metric Insights API package initialization.

This package contains FastAPI router modules:
- metric_explanations: Metric change explanations and metric definitions
"""

from fastapi import APIRouter

from metric_insights.api.metric_explanations import router as metric_explanations_router

# Create main API router
api_router = APIRouter()

api_router.include_router(metric_explanations_router)

__all__ = [
    "api_router",
    "metric_explanations_router",
]
