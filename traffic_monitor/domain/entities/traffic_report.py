"""Read model handed to the presentation layer."""

from dataclasses import dataclass, field

from .request_record import RequestRecord


@dataclass
class TrafficReport:
    """Recent requests plus the most frequent agents, IPs and URLs.

    Each ``top_*`` mapping is ordered by count descending.
    """

    records: list[RequestRecord] = field(default_factory=list)
    top_agents: dict[str, int] = field(default_factory=dict)
    top_ips: dict[str, int] = field(default_factory=dict)
    top_urls: dict[str, int] = field(default_factory=dict)
