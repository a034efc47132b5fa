"""V1 API router — aggregates all v1 endpoint routers."""

from fastapi import APIRouter

from traffic_monitor.presentation.api.v1.endpoints.health import router as health_router
from traffic_monitor.presentation.api.v1.endpoints.traffic import router as traffic_router
from traffic_monitor.presentation.api.v1.settings_controller import router as settings_router

router = APIRouter(prefix="/v1")
router.include_router(health_router)
router.include_router(traffic_router)
router.include_router(settings_router)
