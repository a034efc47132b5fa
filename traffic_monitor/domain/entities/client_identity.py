"""The (IP, user agent) signature of a requester."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ClientIdentity:
    """A distinct requester signature, not a real-world user.

    The store deduplicates identities on the exact ``(ip, agent)`` pair,
    so many request records share one identity.
    """

    ip: str  # textual IPv4/IPv6, at most 45 chars
    agent: str = ""
    id: int | None = None

    @property
    def key(self) -> tuple[str, str]:
        return (self.ip, self.agent)
