"""HTTP middleware that feeds every inbound request to the RequestRecorder."""

from collections.abc import Awaitable, Callable

from fastapi import Request, Response

from traffic_monitor.application.services import RequestRecorder
from traffic_monitor.domain.clock import utc_now
from traffic_monitor.domain.entities import RequestContext


async def record_traffic(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    """Capture the request on arrival, then hand it to the downstream handler.

    Requests are only recorded once the lifespan has installed a recorder
    on ``app.state``.
    """
    recorder: RequestRecorder | None = getattr(request.app.state, "request_recorder", None)
    if recorder is not None:
        ctx = RequestContext.from_request(request, received_at=utc_now())
        await recorder.capture_and_store(ctx)
    return await call_next(request)
