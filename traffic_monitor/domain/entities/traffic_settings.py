"""Operator settings consumed by the report and retention components."""

from dataclasses import dataclass
from enum import Enum

DEFAULT_TOP_VALUE_LIMIT = 10
DEFAULT_RETENTION_PERIOD = "PT1M"


class TopDimension(str, Enum):
    """Columns a top-N aggregation may group by."""

    IP = "ip"
    AGENT = "agent"
    URL = "url"


@dataclass(frozen=True)
class TrafficSettings:
    """Plain configuration struct, loaded at startup or on each sweep."""

    top_value_limit: int = DEFAULT_TOP_VALUE_LIMIT
    retention_period: str = DEFAULT_RETENTION_PERIOD  # ISO-8601 duration
