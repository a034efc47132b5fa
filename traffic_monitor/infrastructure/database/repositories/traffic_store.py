"""Concrete TrafficStore backed by SQLAlchemy async sessions."""

import logging
from datetime import datetime

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.schema import DropTable

from traffic_monitor.application.interfaces import TrafficStore
from traffic_monitor.domain.clock import as_utc
from traffic_monitor.domain.entities import ClientIdentity, RequestRecord, TopDimension
from traffic_monitor.domain.exceptions import (
    PartialTeardownError,
    QueryError,
    SchemaError,
    WriteError,
)
from traffic_monitor.infrastructure.database.base import Base
from traffic_monitor.infrastructure.database.models import (
    TrafficClientModel,
    TrafficRecordModel,
)
from traffic_monitor.infrastructure.database.session import build_session_factory

logger = logging.getLogger(__name__)

# Parents first for CREATE; teardown walks the reverse order
_TABLES = [TrafficClientModel.__table__, TrafficRecordModel.__table__]

# The only grouping expressions get_top will ever put into a query
_TOP_COLUMNS = {
    TopDimension.IP: TrafficClientModel.ip,
    TopDimension.AGENT: TrafficClientModel.agent,
    TopDimension.URL: TrafficRecordModel.url,
}


def _require_positive(limit: int) -> int:
    if limit < 1:
        raise ValueError(f"limit must be a positive integer, got {limit}")
    return int(limit)


class SQLAlchemyTrafficStore(TrafficStore):
    """Implements the TrafficStore port on top of an async engine.

    Every public operation runs in its own session/transaction and turns
    ``SQLAlchemyError`` into a logged domain error plus a result value, so
    callers on the request and scheduler paths never see an exception.

    ``upsert_client`` is check-then-act. Two concurrent first sightings of
    the same (ip, agent) pair can both miss the lookup and insert two
    identities. That race is accepted: lookups always resolve to the
    lowest id, so later records converge on a single identity.
    """

    def __init__(
        self,
        engine: AsyncEngine,
        session_factory: async_sessionmaker[AsyncSession] | None = None,
    ):
        self._engine = engine
        self._session_factory = session_factory or build_session_factory(engine)

    # ── Schema ──────────────────────────────────────────────────────

    async def initialize_schema(self) -> bool:
        try:
            async with self._engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all, tables=_TABLES, checkfirst=True)
        except SQLAlchemyError as exc:
            logger.error(
                "Failed to initialize traffic monitor schema: %s",
                SchemaError("initialize_schema", str(exc)),
            )
            return False
        logger.debug("Traffic monitor schema ready")
        return True

    async def teardown_schema(self) -> bool:
        try:
            await self._teardown()
        except PartialTeardownError as exc:
            logger.error(
                "Failed to remove traffic monitor schema: %s. "
                "Completed steps were not rolled back; retry the uninstall.",
                exc,
            )
            return False
        logger.info("Traffic monitor schema removed")
        return True

    async def _teardown(self) -> None:
        """Run the four teardown steps, each in its own transaction.

        Raises:
            PartialTeardownError: naming the failed step and those already done.
        """
        steps = [
            ("delete_records", delete(TrafficRecordModel.__table__)),
            ("delete_clients", delete(TrafficClientModel.__table__)),
            ("drop_records", DropTable(TrafficRecordModel.__table__)),
            ("drop_clients", DropTable(TrafficClientModel.__table__)),
        ]
        completed: list[str] = []
        for name, statement in steps:
            try:
                async with self._engine.begin() as conn:
                    await conn.execute(statement)
            except SQLAlchemyError as exc:
                raise PartialTeardownError(name, completed, str(exc)) from exc
            completed.append(name)

    # ── Writes ──────────────────────────────────────────────────────

    async def upsert_client(self, ip: str, agent: str) -> int | None:
        try:
            async with self._session_factory() as session:
                client_id = await self._find_client(session, ip, agent)
                if client_id is None:
                    model = TrafficClientModel(ip=ip, agent=agent)
                    session.add(model)
                    await session.flush()
                    client_id = model.id
                await session.commit()
                return client_id
        except SQLAlchemyError as exc:
            logger.error("%s", WriteError("upsert_client", str(exc)))
            return None

    async def _find_client(self, session: AsyncSession, ip: str, agent: str) -> int | None:
        stmt = (
            select(TrafficClientModel.id)
            .where(TrafficClientModel.ip == ip, TrafficClientModel.agent == agent)
            .order_by(TrafficClientModel.id)
            .limit(1)
        )
        return (await session.execute(stmt)).scalar_one_or_none()

    async def record(self, record: RequestRecord) -> bool:
        client_id = await self.upsert_client(record.client.ip, record.client.agent)
        if client_id is None:
            return False
        try:
            async with self._session_factory() as session:
                session.add(
                    TrafficRecordModel(
                        client_id=client_id,
                        time=as_utc(record.time),
                        user_id=record.user_id,
                        method=record.method,
                        url=record.url,
                    )
                )
                await session.commit()
        except SQLAlchemyError as exc:
            logger.error("%s", WriteError("record", str(exc)))
            return False
        return True

    async def purge(self, cutoff: datetime) -> bool:
        stmt = delete(TrafficRecordModel).where(TrafficRecordModel.time < as_utc(cutoff))
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                await session.commit()
        except SQLAlchemyError as exc:
            logger.error("%s", WriteError("purge", str(exc)))
            return False
        logger.debug("Purged %d traffic records older than %s", result.rowcount, cutoff)
        return True

    async def forget_user(self, user_id: str) -> bool:
        stmt = (
            update(TrafficRecordModel)
            .where(TrafficRecordModel.user_id == user_id)
            .values(user_id=None)
        )
        try:
            async with self._session_factory() as session:
                await session.execute(stmt)
                await session.commit()
        except SQLAlchemyError as exc:
            logger.error("%s", WriteError("forget_user", str(exc)))
            return False
        return True

    # ── Reads ───────────────────────────────────────────────────────

    def _to_entity(
        self, record: TrafficRecordModel, client: TrafficClientModel
    ) -> RequestRecord:
        """Map ORM rows → domain entity."""
        return RequestRecord(
            id=record.id,
            client=ClientIdentity(id=client.id, ip=client.ip, agent=client.agent),
            method=record.method,
            url=record.url,
            time=as_utc(record.time),
            user_id=record.user_id,
        )

    async def load_records(self, limit: int) -> list[RequestRecord]:
        stmt = (
            select(TrafficRecordModel, TrafficClientModel)
            .join(TrafficClientModel, TrafficRecordModel.client_id == TrafficClientModel.id)
            .order_by(TrafficRecordModel.time.desc(), TrafficRecordModel.id.desc())
            .limit(_require_positive(limit))
        )
        try:
            async with self._session_factory() as session:
                rows = (await session.execute(stmt)).all()
        except SQLAlchemyError as exc:
            logger.error("%s", QueryError("load_records", str(exc)))
            return []
        if not rows:
            logger.info("No traffic records found")
        return [self._to_entity(record, client) for record, client in rows]

    async def get_top(self, dimension: TopDimension | str, limit: int) -> dict[str, int]:
        dimension = TopDimension(dimension)
        column = _TOP_COLUMNS[dimension]
        request_count = func.count().label("request_count")
        stmt = (
            select(column, request_count)
            .select_from(TrafficRecordModel)
            .join(TrafficClientModel, TrafficRecordModel.client_id == TrafficClientModel.id)
            .group_by(column)
            # Ties resolve alphabetically by value
            .order_by(request_count.desc(), column.asc())
            .limit(_require_positive(limit))
        )
        try:
            async with self._session_factory() as session:
                rows = (await session.execute(stmt)).all()
        except SQLAlchemyError as exc:
            logger.error("%s", QueryError(f"get_top[{dimension.value}]", str(exc)))
            return {}
        return {value: int(count) for value, count in rows}
