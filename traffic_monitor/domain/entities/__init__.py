from .client_identity import ClientIdentity
from .request_context import RequestContext
from .request_record import RequestRecord
from .traffic_report import TrafficReport
from .traffic_settings import (
    DEFAULT_RETENTION_PERIOD,
    DEFAULT_TOP_VALUE_LIMIT,
    TopDimension,
    TrafficSettings,
)

__all__ = [
    "ClientIdentity",
    "RequestContext",
    "RequestRecord",
    "TrafficReport",
    "TopDimension",
    "TrafficSettings",
    "DEFAULT_RETENTION_PERIOD",
    "DEFAULT_TOP_VALUE_LIMIT",
]
