import json
import logging
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings
from functools import lru_cache

from traffic_monitor.domain.entities import (
    DEFAULT_RETENTION_PERIOD,
    DEFAULT_TOP_VALUE_LIMIT,
)

_config_logger = logging.getLogger(__name__)

SETTINGS_FILE = Path("data/settings.json")
_PROJECT_DIR = Path(__file__).resolve().parents[1]
_ENV_FILES = (
    _PROJECT_DIR / ".env",
    ".env",
)
# Operator settings that may be overridden at runtime via data/settings.json
_OVERRIDE_TYPES: dict[str, type] = {
    "top_value_limit": int,
    "retention_period": str,
}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_title: str = "Traffic Monitor API"
    app_version: str = "0.1.0"
    app_env: str = "development"
    database_url: str = "sqlite:///data/traffic_monitor.db"
    database_echo: bool = False
    cors_origins: list[str] = ["http://localhost:3020"]

    # Traffic report
    top_value_limit: int = Field(DEFAULT_TOP_VALUE_LIMIT, ge=1)
    recent_record_limit: int = Field(25, ge=1)

    # Retention: ISO 8601 duration, swept every purge_interval_seconds
    retention_period: str = DEFAULT_RETENTION_PERIOD
    purge_interval_seconds: int = 60

    # Logging — per-category log levels (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_level: str = "INFO"                  # Root / app-wide
    log_level_sql: str = "WARNING"           # sqlalchemy.engine — SQL queries
    log_level_uvicorn: str = "INFO"          # uvicorn.access / uvicorn.error
    log_level_sweeper: str = "INFO"          # RetentionSweeper, runs every minute

    model_config = {
        "env_file": _ENV_FILES,
        "env_file_encoding": "utf-8",
    }

    def model_post_init(self, __context: object) -> None:
        """Merge runtime overrides from data/settings.json into operator settings."""
        if SETTINGS_FILE.exists():
            try:
                overrides = json.loads(SETTINGS_FILE.read_text("utf-8"))
                for key, expected in _OVERRIDE_TYPES.items():
                    value = overrides.get(key)
                    # bool is an int subclass; never accept it as a limit
                    if isinstance(value, expected) and not isinstance(value, bool):
                        object.__setattr__(self, key, value)
            except Exception as exc:
                _config_logger.warning("Could not load settings overrides: %s", exc)


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance — reads .env once."""
    return Settings()
