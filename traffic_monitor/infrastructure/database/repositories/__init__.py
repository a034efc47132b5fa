from .traffic_store import SQLAlchemyTrafficStore

__all__ = [
    "SQLAlchemyTrafficStore",
]
