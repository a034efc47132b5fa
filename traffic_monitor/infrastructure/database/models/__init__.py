from .traffic_models import TrafficClientModel, TrafficRecordModel

__all__ = [
    "TrafficClientModel",
    "TrafficRecordModel",
]
