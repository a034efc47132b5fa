"""Pydantic DTOs (Data Transfer Objects) for the traffic report feature."""

from datetime import datetime

from pydantic import BaseModel, Field

from traffic_monitor.domain.entities import RequestRecord, TrafficReport


class RequestRecordResponse(BaseModel):
    """One recorded request, flattened with its client identity."""

    time: datetime
    ip: str
    agent: str
    user_id: str | None
    method: str
    url: str

    @classmethod
    def from_entity(cls, record: RequestRecord) -> "RequestRecordResponse":
        return cls(
            time=record.time,
            ip=record.client.ip,
            agent=record.client.agent,
            user_id=record.user_id,
            method=record.method,
            url=record.url,
        )


class TopValueResponse(BaseModel):
    """A value of the grouped dimension with its request count."""

    value: str
    count: int


def top_value_list(top: dict[str, int]) -> list[TopValueResponse]:
    return [TopValueResponse(value=value, count=count) for value, count in top.items()]


class TrafficReportResponse(BaseModel):
    """Schema returned to the presentation layer — top lists ordered by count."""

    records: list[RequestRecordResponse]
    top_agents: list[TopValueResponse]
    top_ips: list[TopValueResponse]
    top_urls: list[TopValueResponse]

    @classmethod
    def from_report(cls, report: TrafficReport) -> "TrafficReportResponse":
        return cls(
            records=[RequestRecordResponse.from_entity(r) for r in report.records],
            top_agents=top_value_list(report.top_agents),
            top_ips=top_value_list(report.top_ips),
            top_urls=top_value_list(report.top_urls),
        )


class TrafficSettingsResponse(BaseModel):
    """Current operator settings with labels."""

    top_value_limit: int
    retention_period: str
    labels: dict[str, str]


class TrafficSettingsUpdate(BaseModel):
    """Payload for updating operator settings. All fields are optional."""

    top_value_limit: int | None = Field(None, ge=1, examples=[10])
    retention_period: str | None = Field(None, min_length=1, examples=["PT1M", "P7D"])
