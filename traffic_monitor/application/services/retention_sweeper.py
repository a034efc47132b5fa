"""Retention sweeper — periodically purges records older than the retention period."""

import asyncio
import logging
import re
from collections.abc import Callable
from datetime import timedelta

from pydantic import TypeAdapter, ValidationError

from traffic_monitor.application.interfaces import TrafficStore
from traffic_monitor.domain.clock import Clock, utc_now
from traffic_monitor.domain.exceptions import ConfigError

logger = logging.getLogger(__name__)

# Sweep interval in seconds
SWEEP_INTERVAL = 60

_duration_adapter = TypeAdapter(timedelta)

# PnYnMnWnDTnHnMnS, optionally signed
_ISO_DURATION = re.compile(
    r"[-+]?P(?!$)(?:\d+(?:[.,]\d+)?[YMWD])*(?:T(?:\d+(?:[.,]\d+)?[HMS])+)?"
)


def parse_retention_period(raw: str | timedelta) -> timedelta:
    """Parse an ISO 8601 duration such as ``PT1M`` or ``P1DT12H``.

    Raises:
        ConfigError: if the value is not a duration or is negative.
    """
    if isinstance(raw, timedelta):
        duration = raw
    else:
        value = str(raw).strip()
        if not _ISO_DURATION.fullmatch(value):
            raise ConfigError("retention_period", raw, "expected an ISO 8601 duration such as PT1M")
        try:
            duration = _duration_adapter.validate_python(value)
        except ValidationError as exc:
            raise ConfigError(
                "retention_period", raw, exc.errors()[0].get("msg", str(exc))
            ) from exc
    if duration < timedelta(0):
        raise ConfigError("retention_period", raw, "duration must not be negative")
    return duration


async def sweep(
    retention_period: str | timedelta,
    store: TrafficStore,
    clock: Clock = utc_now,
) -> bool:
    """Purge every record older than ``clock() - retention_period``.

    Failures are logged and reported as ``False``; nothing is raised.
    """
    try:
        retention = parse_retention_period(retention_period)
    except ConfigError as exc:
        logger.error("Failed to purge traffic monitor records: %s", exc)
        return False

    cutoff = clock() - retention
    if not await store.purge(cutoff):
        logger.error("Failed to purge traffic monitor records older than %s", cutoff)
        return False
    return True


class RetentionSweeper:
    """Asyncio timer that runs ``sweep`` on a fixed interval.

    Runs as an asyncio.Task inside FastAPI's lifespan. The retention period
    is re-read through ``retention_provider`` on every tick, so operator
    changes apply without a restart.
    """

    def __init__(
        self,
        store: TrafficStore,
        retention_provider: Callable[[], str | timedelta],
        clock: Clock = utc_now,
        interval_seconds: float = SWEEP_INTERVAL,
    ) -> None:
        self._store = store
        self._retention_provider = retention_provider
        self._clock = clock
        self._interval = interval_seconds
        self._running = False
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._running

    async def start(self) -> None:
        """Start the periodic sweep loop."""
        self._running = True
        self._task = asyncio.create_task(self._loop())
        logger.info("RetentionSweeper started (every %ss)", self._interval)

    async def stop(self) -> None:
        """Stop the sweep loop, cancelling any pending sleep."""
        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        logger.info("RetentionSweeper stopped")

    async def sweep(self) -> bool:
        """Run a single sweep with the currently configured retention period."""
        return await sweep(self._retention_provider(), self._store, self._clock)

    async def _loop(self) -> None:
        while self._running:
            try:
                await self.sweep()
            except asyncio.CancelledError:
                break
            except Exception:
                logger.exception("RetentionSweeper tick failed")

            await asyncio.sleep(self._interval)
