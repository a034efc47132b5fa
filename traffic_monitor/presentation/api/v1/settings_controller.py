"""Settings API controller — manage runtime traffic monitor configuration."""

import logging

from fastapi import APIRouter, HTTPException, status

from traffic_monitor.application.schemas import (
    TrafficSettingsResponse,
    TrafficSettingsUpdate,
)
from traffic_monitor.application.services.settings_service import (
    TRAFFIC_LABELS,
    get_traffic_settings,
    update_traffic_settings,
)
from traffic_monitor.domain.entities import TrafficSettings
from traffic_monitor.domain.exceptions import ConfigError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/settings", tags=["settings"])


def _to_response(current: TrafficSettings) -> TrafficSettingsResponse:
    return TrafficSettingsResponse(
        top_value_limit=current.top_value_limit,
        retention_period=current.retention_period,
        labels=TRAFFIC_LABELS,
    )


@router.get("/traffic", response_model=TrafficSettingsResponse)
async def get_traffic():
    """Return the current top-value limit and retention period."""
    return _to_response(get_traffic_settings())


@router.put("/traffic", response_model=TrafficSettingsResponse)
async def put_traffic(body: TrafficSettingsUpdate):
    """Update operator settings. The retention period must be an ISO 8601 duration."""
    try:
        updated = update_traffic_settings(body.model_dump(exclude_none=True))
    except ConfigError as exc:
        logger.warning("Rejected settings update: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(exc),
        )
    return _to_response(updated)
