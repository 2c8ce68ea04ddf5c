"""Health check endpoints for monitoring."""

from datetime import datetime, timezone
from urllib.parse import urlparse

from fastapi import APIRouter
from pydantic import BaseModel

from pulse_api.config.settings import settings

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str
    timestamp: str
    backend: str


def check_backend() -> str:
    """Report whether the portal backend URL is usable."""
    parsed = urlparse(settings.BACKEND_API_URL)
    if not parsed.scheme or not parsed.netloc:
        return "not_configured"
    return "configured"


@router.get("", response_model=HealthResponse)
@router.get("/", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Basic health check endpoint.

    The service holds no state of its own, so it is healthy whenever it can
    name a backend to talk to.
    """
    backend_status = check_backend()

    return HealthResponse(
        status="healthy" if backend_status == "configured" else "unhealthy",
        version=settings.APP_VERSION,
        timestamp=datetime.now(timezone.utc).isoformat(),
        backend=backend_status,
    )


@router.get("/live")
async def liveness_check() -> dict:
    """
    Kubernetes liveness probe.

    Returns 200 if service process is alive.
    """
    return {"alive": True}
