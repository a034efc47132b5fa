"""Abstract repository interface (port) for traffic persistence."""

from abc import ABC, abstractmethod
from datetime import datetime

from traffic_monitor.domain.entities import RequestRecord, TopDimension


class TrafficStore(ABC):
    """Port for client/record persistence — implemented in the infrastructure layer.

    Implementations never let storage errors escape: every operation
    reports failure through its return value and logs the cause.
    """

    @abstractmethod
    async def initialize_schema(self) -> bool:
        """Create the traffic tables if they do not exist yet."""
        ...

    @abstractmethod
    async def teardown_schema(self) -> bool:
        """Delete all data and drop the traffic tables, children first.

        The steps are not wrapped in one transaction; a failure partway
        leaves the steps already done in place.
        """
        ...

    @abstractmethod
    async def upsert_client(self, ip: str, agent: str) -> int | None:
        """Return the id of the identity for ``(ip, agent)``, creating it on first sight."""
        ...

    @abstractmethod
    async def record(self, record: RequestRecord) -> bool:
        """Persist a request record, resolving its client identity first."""
        ...

    @abstractmethod
    async def load_records(self, limit: int) -> list[RequestRecord]:
        """Return up to ``limit`` records, most recent first."""
        ...

    @abstractmethod
    async def get_top(self, dimension: TopDimension | str, limit: int) -> dict[str, int]:
        """Return the ``limit`` most frequent values of ``dimension`` with their counts."""
        ...

    @abstractmethod
    async def purge(self, cutoff: datetime) -> bool:
        """Delete every record whose time is strictly before ``cutoff``."""
        ...

    @abstractmethod
    async def forget_user(self, user_id: str) -> bool:
        """Detach a deleted host user from their records without deleting them."""
        ...

    async def get_top_ips(self, limit: int) -> dict[str, int]:
        return await self.get_top(TopDimension.IP, limit)

    async def get_top_agents(self, limit: int) -> dict[str, int]:
        return await self.get_top(TopDimension.AGENT, limit)

    async def get_top_urls(self, limit: int) -> dict[str, int]:
        return await self.get_top(TopDimension.URL, limit)
