"""API endpoints for Usage Pulse API."""

from fastapi import APIRouter

from .analytics import router as analytics_router
from .health import router as health_router
from .usage_pulse import router as usage_pulse_router

# Create main API router
api_router = APIRouter()

# Include all routers
api_router.include_router(health_router, prefix="/health", tags=["Health"])
api_router.include_router(analytics_router, prefix="/analytics", tags=["Analytics"])
api_router.include_router(usage_pulse_router, prefix="/usage-pulse", tags=["Usage Pulse"])

__all__ = ["api_router"]
