"""Per-request capture path: turns the request context into a stored record."""

import logging

from traffic_monitor.application.interfaces import TrafficStore
from traffic_monitor.domain.entities import RequestContext, RequestRecord

logger = logging.getLogger(__name__)


class RequestRecorder:
    """Records every inbound request through the traffic store.

    Usage:
        recorder = RequestRecorder(store)
        await recorder.capture_and_store(RequestContext.from_request(request, utc_now()))

    Losing one log entry must never break the request being served, so
    ``capture_and_store`` never raises.
    """

    def __init__(self, store: TrafficStore):
        self._store = store

    async def capture_and_store(self, ctx: RequestContext) -> None:
        try:
            record = RequestRecord.from_context(ctx)
            if not await self._store.record(record):
                logger.error(
                    "Failed to record traffic monitor record: %s %s from %s",
                    ctx.method,
                    ctx.url,
                    ctx.ip,
                )
        except Exception:
            logger.exception("Unexpected error while recording %s %s", ctx.method, ctx.url)
