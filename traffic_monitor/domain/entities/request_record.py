"""A single observed HTTP request."""

from dataclasses import dataclass
from datetime import datetime

from .client_identity import ClientIdentity
from .request_context import RequestContext


@dataclass(frozen=True)
class RequestRecord:
    """An immutable log entry for a single inbound request.

    ``time`` is the arrival time of the request, not the time it was
    written to the store.
    """

    client: ClientIdentity
    method: str
    url: str
    time: datetime
    user_id: str | None = None
    id: int | None = None

    @property
    def has_user_id(self) -> bool:
        return self.user_id is not None

    @classmethod
    def from_context(cls, ctx: RequestContext) -> "RequestRecord":
        """Build a record from the request context captured by the service layer."""
        return cls(
            client=ClientIdentity(ip=ctx.ip, agent=ctx.agent),
            method=ctx.method,
            url=ctx.url,
            time=ctx.received_at,
            user_id=ctx.user_id,
        )
