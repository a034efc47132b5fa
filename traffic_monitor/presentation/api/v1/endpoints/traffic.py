"""Traffic report endpoints (read-only views over the recorded requests)."""

from fastapi import APIRouter, Depends, Query

from traffic_monitor.application.interfaces import TrafficStore
from traffic_monitor.application.schemas import (
    RequestRecordResponse,
    TopValueResponse,
    TrafficReportResponse,
    top_value_list,
)
from traffic_monitor.application.services import ReportAssembler
from traffic_monitor.application.services.settings_service import get_traffic_settings
from traffic_monitor.config import get_settings
from traffic_monitor.domain.entities import TopDimension
from traffic_monitor.infrastructure.dependencies import (
    get_report_assembler,
    get_traffic_store,
)

router = APIRouter(prefix="/traffic", tags=["Traffic"])


@router.get("/report", response_model=TrafficReportResponse)
async def get_report(
    assembler: ReportAssembler = Depends(get_report_assembler),
) -> TrafficReportResponse:
    """Recent requests plus the top agents, IPs and URLs."""
    report = await assembler.assemble(
        record_limit=get_settings().recent_record_limit,
        top_limit=get_traffic_settings().top_value_limit,
    )
    return TrafficReportResponse.from_report(report)


@router.get("/records", response_model=list[RequestRecordResponse])
async def list_records(
    limit: int = Query(25, ge=1, le=500),
    store: TrafficStore = Depends(get_traffic_store),
) -> list[RequestRecordResponse]:
    """Most recent requests first."""
    records = await store.load_records(limit)
    return [RequestRecordResponse.from_entity(r) for r in records]


@router.get("/top/{dimension}", response_model=list[TopValueResponse])
async def get_top(
    dimension: TopDimension,
    limit: int | None = Query(None, ge=1, le=500),
    store: TrafficStore = Depends(get_traffic_store),
) -> list[TopValueResponse]:
    """Most frequent values of ``dimension``, defaulting to the configured limit."""
    top = await store.get_top(dimension, limit or get_traffic_settings().top_value_limit)
    return top_value_list(top)
