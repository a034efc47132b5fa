"""Shared fixtures: a throwaway SQLite-backed store and an in-memory fake."""

from collections import Counter
from datetime import datetime

import pytest
import pytest_asyncio

from traffic_monitor import config
from traffic_monitor.application.interfaces import TrafficStore
from traffic_monitor.domain.entities import RequestRecord, TopDimension
from traffic_monitor.infrastructure.database import build_engine
from traffic_monitor.infrastructure.database.repositories import SQLAlchemyTrafficStore


class FakeTrafficStore(TrafficStore):
    """In-memory fake store for unit testing."""

    def __init__(self):
        self.records: list[RequestRecord] = []
        self.cutoffs: list[datetime] = []
        self.fail_record = False
        self.fail_purge = False

    async def initialize_schema(self) -> bool:
        return True

    async def teardown_schema(self) -> bool:
        self.records.clear()
        return True

    async def upsert_client(self, ip: str, agent: str) -> int | None:
        return 1

    async def record(self, record: RequestRecord) -> bool:
        if self.fail_record:
            return False
        self.records.append(record)
        return True

    async def load_records(self, limit: int) -> list[RequestRecord]:
        return sorted(self.records, key=lambda r: r.time, reverse=True)[:limit]

    async def get_top(self, dimension: TopDimension | str, limit: int) -> dict[str, int]:
        dimension = TopDimension(dimension)
        values = {
            TopDimension.IP: lambda r: r.client.ip,
            TopDimension.AGENT: lambda r: r.client.agent,
            TopDimension.URL: lambda r: r.url,
        }[dimension]
        counts = Counter(values(r) for r in self.records)
        ordered = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
        return dict(ordered[:limit])

    async def purge(self, cutoff: datetime) -> bool:
        if self.fail_purge:
            return False
        self.cutoffs.append(cutoff)
        self.records = [r for r in self.records if r.time >= cutoff]
        return True

    async def forget_user(self, user_id: str) -> bool:
        return True


@pytest.fixture
def fake_store() -> FakeTrafficStore:
    return FakeTrafficStore()


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'traffic.db'}")
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def store(engine) -> SQLAlchemyTrafficStore:
    store = SQLAlchemyTrafficStore(engine)
    assert await store.initialize_schema()
    return store


@pytest.fixture
def settings_file(tmp_path, monkeypatch):
    """Point the runtime settings overrides at a temporary file."""
    path = tmp_path / "data" / "settings.json"
    monkeypatch.setattr(config, "SETTINGS_FILE", path)
    config.get_settings.cache_clear()
    yield path
    config.get_settings.cache_clear()
