"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from traffic_monitor.application.interfaces import TrafficStore
from traffic_monitor.application.services import RequestRecorder, RetentionSweeper
from traffic_monitor.application.services.settings_service import get_traffic_settings
from traffic_monitor.config import get_settings
from traffic_monitor.infrastructure.database import engine, ensure_sqlite_directory
from traffic_monitor.infrastructure.database.repositories import SQLAlchemyTrafficStore
from traffic_monitor.infrastructure.logging.log_config import setup_logging
from traffic_monitor.presentation.api.router import router as api_router
from traffic_monitor.presentation.middleware import record_traffic

logger = logging.getLogger(__name__)


def _current_retention_period() -> str:
    return get_traffic_settings().retention_period


def _build_lifespan(store: TrafficStore | None):
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Application lifespan — create tables, start recording and the sweeper."""
        settings = get_settings()
        setup_logging()

        traffic_store = store
        if traffic_store is None:
            ensure_sqlite_directory(settings.database_url)
            traffic_store = SQLAlchemyTrafficStore(engine)

        # 1. Create tables; on failure startup continues without recording
        if not await traffic_store.initialize_schema():
            logger.error("Traffic monitor schema unavailable; requests will not be recorded")

        # 2. Record every request from now on
        app.state.traffic_store = traffic_store
        app.state.request_recorder = RequestRecorder(traffic_store)

        # 3. Start the retention sweeper
        sweeper = RetentionSweeper(
            traffic_store,
            retention_provider=_current_retention_period,
            interval_seconds=settings.purge_interval_seconds,
        )
        app.state.retention_sweeper = sweeper
        await sweeper.start()

        yield

        # Shutdown
        await sweeper.stop()
        app.state.request_recorder = None

    return lifespan


def create_app(store: TrafficStore | None = None) -> FastAPI:
    """Factory function that builds and configures the FastAPI application.

    ``store`` replaces the store built from ``database_url``, e.g. in tests.
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        lifespan=_build_lifespan(store),
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Request recording
    app.middleware("http")(record_traffic)

    # Mount API routes
    app.include_router(api_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "traffic_monitor.main:app",
        host="0.0.0.0",
        port=8020,
        reload=True,
    )
