"""SQLAlchemy ORM models for traffic clients and request records."""

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from traffic_monitor.infrastructure.database.base import Base

# BIGINT on server databases, INTEGER on SQLite so autoincrement still works
_Id = BigInteger().with_variant(Integer(), "sqlite")


class TrafficClientModel(Base):
    """ORM model — maps to the 'traffic_clients' table.

    No unique constraint on (ip, agent): deduplication happens on write
    and tolerates the occasional duplicate from concurrent first sightings.
    """

    __tablename__ = "traffic_clients"

    id: Mapped[int] = mapped_column(_Id, primary_key=True, autoincrement=True)
    ip: Mapped[str] = mapped_column(String(45), nullable=False)
    agent: Mapped[str] = mapped_column(Text, nullable=False, default="")

    records: Mapped[list["TrafficRecordModel"]] = relationship(
        back_populates="client",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        Index("ix_traffic_clients_ip", "ip"),
    )

    def __repr__(self) -> str:
        return f"<TrafficClientModel(id={self.id}, ip='{self.ip}')>"


class TrafficRecordModel(Base):
    """ORM model — maps to the 'traffic_records' table."""

    __tablename__ = "traffic_records"

    id: Mapped[int] = mapped_column(_Id, primary_key=True, autoincrement=True)
    client_id: Mapped[int] = mapped_column(
        _Id,
        ForeignKey("traffic_clients.id", ondelete="CASCADE", onupdate="CASCADE"),
        nullable=False,
    )
    time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    # Host user id; cleared (not deleted) when the host removes the user
    user_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    method: Mapped[str] = mapped_column(String(10), nullable=False)
    url: Mapped[str] = mapped_column(Text, nullable=False)

    client: Mapped[TrafficClientModel] = relationship(back_populates="records")

    __table_args__ = (
        Index("ix_traffic_records_time", "time"),
        Index("ix_traffic_records_user", "user_id"),
        Index("ix_traffic_records_client", "client_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<TrafficRecordModel(id={self.id}, client_id={self.client_id}, "
            f"method='{self.method}', time={self.time})>"
        )
