"""FastAPI dependency injection — wires infrastructure to application layer."""

from collections.abc import AsyncGenerator

from fastapi import Depends, Request

from traffic_monitor.application.interfaces import TrafficStore
from traffic_monitor.application.services import ReportAssembler


def get_traffic_store(request: Request) -> TrafficStore:
    """The store built by the application lifespan."""
    return request.app.state.traffic_store


async def get_report_assembler(
    store: TrafficStore = Depends(get_traffic_store),
) -> AsyncGenerator[ReportAssembler, None]:
    """Provides a ReportAssembler reading from the shared traffic store."""
    yield ReportAssembler(store)
