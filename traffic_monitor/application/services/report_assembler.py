"""Read-only façade combining recent records and top-N lists for presentation."""

from traffic_monitor.application.interfaces import TrafficStore
from traffic_monitor.domain.entities import TopDimension, TrafficReport

# Number of recent requests shown alongside the top lists
MAX_RECORDS = 25


class ReportAssembler:
    """Composes store reads into a ``TrafficReport``. No caching, no writes."""

    def __init__(self, store: TrafficStore):
        self._store = store

    async def assemble(
        self, *, record_limit: int = MAX_RECORDS, top_limit: int = 10
    ) -> TrafficReport:
        return TrafficReport(
            records=await self._store.load_records(record_limit),
            top_agents=await self._store.get_top(TopDimension.AGENT, top_limit),
            top_ips=await self._store.get_top(TopDimension.IP, top_limit),
            top_urls=await self._store.get_top(TopDimension.URL, top_limit),
        )
