"""Value object carrying the ambient data of the request being served."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class RequestContext:
    """Request data captured once per request, before the handler runs."""

    ip: str
    agent: str
    method: str
    url: str
    received_at: datetime
    user_id: str | None = None

    @classmethod
    def from_request(cls, request: Any, received_at: datetime) -> "RequestContext":
        """Build a context from a Starlette/FastAPI ``Request``.

        The authenticated user is whatever the host's auth layer stored on
        ``request.state.user_id``; anonymous requests leave it unset.
        """
        client = request.client
        query = request.url.query
        url = request.url.path + (f"?{query}" if query else "")
        user_id = getattr(request.state, "user_id", None)
        return cls(
            ip=client.host if client else "",
            agent=request.headers.get("user-agent", ""),
            method=request.method,
            url=url,
            received_at=received_at,
            user_id=str(user_id) if user_id is not None else None,
        )
