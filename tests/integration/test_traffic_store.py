"""Integration tests for the SQLAlchemy traffic store on a temporary SQLite file."""

import logging
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import delete, func, select

from traffic_monitor.application.services import sweep
from traffic_monitor.domain.entities import ClientIdentity, RequestRecord, TopDimension
from traffic_monitor.infrastructure.database.models import (
    TrafficClientModel,
    TrafficRecordModel,
)

T = datetime(2026, 3, 14, 12, 0, 0, tzinfo=timezone.utc)


def _record(
    ip: str = "1.2.3.4",
    agent: str = "Mozilla/5.0",
    *,
    url: str = "/",
    method: str = "GET",
    time: datetime = T,
    user_id: str | None = None,
) -> RequestRecord:
    return RequestRecord(
        client=ClientIdentity(ip=ip, agent=agent),
        method=method,
        url=url,
        time=time,
        user_id=user_id,
    )


async def _count(engine, model) -> int:
    async with engine.connect() as conn:
        return (await conn.execute(select(func.count()).select_from(model))).scalar_one()


@pytest.mark.asyncio
async def test_initialize_schema_is_idempotent(store):
    assert await store.initialize_schema() is True
    assert await store.initialize_schema() is True


@pytest.mark.asyncio
async def test_same_client_pair_is_stored_once(store, engine):
    assert await store.record(_record(url="/a"))
    assert await store.record(_record(url="/b"))

    assert await _count(engine, TrafficClientModel) == 1
    assert await _count(engine, TrafficRecordModel) == 2


@pytest.mark.asyncio
async def test_distinct_agents_create_distinct_clients(store, engine):
    first = await store.upsert_client("1.2.3.4", "curl/8.0")
    second = await store.upsert_client("1.2.3.4", "Mozilla/5.0")
    again = await store.upsert_client("1.2.3.4", "curl/8.0")

    assert first is not None and second is not None
    assert first != second
    assert again == first
    assert await _count(engine, TrafficClientModel) == 2


@pytest.mark.asyncio
async def test_upsert_resolves_duplicates_to_lowest_id(store, engine):
    async with engine.begin() as conn:
        await conn.execute(
            TrafficClientModel.__table__.insert(),
            [{"ip": "5.6.7.8", "agent": "bot"}, {"ip": "5.6.7.8", "agent": "bot"}],
        )
        ids = (
            await conn.execute(select(TrafficClientModel.id).order_by(TrafficClientModel.id))
        ).scalars().all()

    assert await store.upsert_client("5.6.7.8", "bot") == ids[0]


@pytest.mark.asyncio
async def test_empty_agent_is_a_valid_identity(store):
    assert await store.record(_record(agent=""))
    records = await store.load_records(5)
    assert records[0].client.agent == ""


@pytest.mark.asyncio
async def test_load_records_is_limited_and_most_recent_first(store):
    offsets = [30, 5, 120, 60, 1]
    for i, seconds in enumerate(offsets):
        assert await store.record(_record(url=f"/{i}", time=T - timedelta(seconds=seconds)))

    records = await store.load_records(3)

    assert [r.time for r in records] == [
        T - timedelta(seconds=1),
        T - timedelta(seconds=5),
        T - timedelta(seconds=30),
    ]
    assert all(r.time.tzinfo is not None for r in records)
    assert records[0].client.ip == "1.2.3.4"
    assert records[0].id is not None


@pytest.mark.asyncio
async def test_load_records_on_empty_store_logs_info(store, caplog):
    with caplog.at_level(logging.INFO):
        assert await store.load_records(10) == []
    assert "No traffic records found" in caplog.text


@pytest.mark.asyncio
async def test_load_records_rejects_non_positive_limit(store):
    with pytest.raises(ValueError):
        await store.load_records(0)


@pytest.mark.asyncio
async def test_get_top_ips_orders_by_count(store):
    for ip, n in [("9.9.9.9", 1), ("1.2.3.4", 5), ("5.6.7.8", 3)]:
        for _ in range(n):
            assert await store.record(_record(ip=ip))

    top = await store.get_top("ip", 3)

    assert top == {"1.2.3.4": 5, "5.6.7.8": 3, "9.9.9.9": 1}
    assert list(top) == ["1.2.3.4", "5.6.7.8", "9.9.9.9"]
    assert await store.get_top_ips(2) == {"1.2.3.4": 5, "5.6.7.8": 3}


@pytest.mark.asyncio
async def test_get_top_breaks_ties_by_value(store):
    for url in ["/b", "/a", "/b", "/a", "/c"]:
        assert await store.record(_record(url=url))

    top = await store.get_top(TopDimension.URL, 3)

    assert list(top.items()) == [("/a", 2), ("/b", 2), ("/c", 1)]


@pytest.mark.asyncio
async def test_get_top_agents_groups_across_ips(store):
    assert await store.record(_record(ip="1.1.1.1", agent="curl/8.0"))
    assert await store.record(_record(ip="2.2.2.2", agent="curl/8.0"))
    assert await store.record(_record(ip="3.3.3.3", agent="Mozilla/5.0"))

    assert await store.get_top_agents(10) == {"curl/8.0": 2, "Mozilla/5.0": 1}


@pytest.mark.asyncio
async def test_get_top_rejects_unknown_dimension(store):
    with pytest.raises(ValueError):
        await store.get_top("method", 3)


@pytest.mark.asyncio
async def test_purge_removes_only_older_records(store, engine):
    for seconds in (-10, 0, 10):
        assert await store.record(_record(time=T + timedelta(seconds=seconds)))

    assert await store.purge(T) is True
    remaining = sorted(r.time for r in await store.load_records(10))
    assert remaining == [T, T + timedelta(seconds=10)]

    assert await store.purge(T) is True
    assert await _count(engine, TrafficRecordModel) == 2
    assert await _count(engine, TrafficClientModel) == 1


@pytest.mark.asyncio
async def test_sweep_keeps_records_inside_retention_window(store):
    for seconds in (120, 30, 5):
        assert await store.record(_record(url=f"/{seconds}", time=T - timedelta(seconds=seconds)))

    assert await sweep("PT60S", store, clock=lambda: T) is True

    assert sorted(r.url for r in await store.load_records(10)) == ["/30", "/5"]


@pytest.mark.asyncio
async def test_user_id_is_optional(store):
    assert await store.record(_record(url="/anon", time=T))
    assert await store.record(_record(url="/user", time=T + timedelta(seconds=1), user_id="42"))

    by_url = {r.url: r for r in await store.load_records(10)}
    assert by_url["/anon"].user_id is None
    assert by_url["/anon"].has_user_id is False
    assert by_url["/user"].user_id == "42"


@pytest.mark.asyncio
async def test_forget_user_keeps_the_records(store, engine):
    assert await store.record(_record(user_id="42"))
    assert await store.record(_record(user_id="7"))

    assert await store.forget_user("42") is True

    users = sorted((r.user_id or "") for r in await store.load_records(10))
    assert users == ["", "7"]
    assert await _count(engine, TrafficRecordModel) == 2


@pytest.mark.asyncio
async def test_deleting_a_client_cascades_to_its_records(store, engine):
    assert await store.record(_record(ip="1.1.1.1"))
    assert await store.record(_record(ip="2.2.2.2"))

    async with engine.begin() as conn:
        table = TrafficClientModel.__table__
        await conn.execute(delete(table).where(table.c.ip == "1.1.1.1"))

    assert [r.client.ip for r in await store.load_records(10)] == ["2.2.2.2"]


@pytest.mark.asyncio
async def test_teardown_then_initialize_restores_an_empty_store(store):
    assert await store.record(_record())

    assert await store.teardown_schema() is True
    assert await store.initialize_schema() is True

    assert await store.load_records(10) == []
    assert await store.get_top(TopDimension.IP, 10) == {}
    assert await store.record(_record()) is True


@pytest.mark.asyncio
async def test_teardown_reports_the_failed_step(store, caplog):
    assert await store.teardown_schema() is True

    with caplog.at_level(logging.ERROR):
        assert await store.teardown_schema() is False

    assert "delete_records" in caplog.text
    assert "retry the uninstall" in caplog.text


@pytest.mark.asyncio
async def test_operations_without_schema_fail_softly(store, caplog):
    assert await store.teardown_schema() is True

    with caplog.at_level(logging.ERROR):
        assert await store.record(_record()) is False
        assert await store.upsert_client("1.2.3.4", "x") is None
        assert await store.load_records(5) == []
        assert await store.get_top(TopDimension.URL, 5) == {}
        assert await store.purge(T) is False

    assert "upsert_client failed" in caplog.text
    assert "load_records failed" in caplog.text
