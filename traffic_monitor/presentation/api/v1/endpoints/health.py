"""Health check endpoint — no dependencies, always available."""

from fastapi import APIRouter, Request

from traffic_monitor.config import get_settings

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check(request: Request) -> dict:
    """Returns the current application health status."""
    settings = get_settings()
    sweeper = getattr(request.app.state, "retention_sweeper", None)
    return {
        "status": "healthy",
        "version": settings.app_version,
        "environment": settings.app_env,
        "retention_sweeper": "running" if sweeper and sweeper.running else "stopped",
    }
