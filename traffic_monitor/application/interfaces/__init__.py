from .traffic_store import TrafficStore

__all__ = [
    "TrafficStore",
]
