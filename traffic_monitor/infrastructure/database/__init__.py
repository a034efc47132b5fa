from .base import Base
from .session import (
    engine,
    build_engine,
    build_session_factory,
    ensure_sqlite_directory,
)
from .models import TrafficClientModel, TrafficRecordModel

__all__ = [
    "Base",
    "engine",
    "build_engine",
    "build_session_factory",
    "ensure_sqlite_directory",
    "TrafficClientModel",
    "TrafficRecordModel",
]
