from .traffic import (
    RequestRecordResponse,
    TopValueResponse,
    top_value_list,
    TrafficReportResponse,
    TrafficSettingsResponse,
    TrafficSettingsUpdate,
)

__all__ = [
    "RequestRecordResponse",
    "TopValueResponse",
    "top_value_list",
    "TrafficReportResponse",
    "TrafficSettingsResponse",
    "TrafficSettingsUpdate",
]
