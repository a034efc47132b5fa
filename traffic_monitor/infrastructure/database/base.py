"""SQLAlchemy ORM base shared by the traffic tables."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Declarative base; ``Base.metadata`` holds the traffic schema."""
