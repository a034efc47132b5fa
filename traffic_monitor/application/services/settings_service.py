"""Application service for runtime traffic settings management.

Reads/writes operator settings to a JSON file so they persist across
restarts without requiring a database migration.
"""

import json
import logging
from typing import Any

from traffic_monitor import config
from traffic_monitor.application.services.retention_sweeper import parse_retention_period
from traffic_monitor.domain.entities import TrafficSettings
from traffic_monitor.domain.exceptions import ConfigError

logger = logging.getLogger(__name__)

# Operator settings that can be changed at runtime.
TRAFFIC_KEYS = [
    "top_value_limit",
    "retention_period",
]

# Human-friendly labels for each setting.
TRAFFIC_LABELS = {
    "top_value_limit": "Top Value Limit",
    "retention_period": "Retention Period",
}


def _read_overrides() -> dict[str, Any]:
    """Read the JSON overrides file, returning {} if missing or corrupt."""
    path = config.SETTINGS_FILE
    if not path.exists():
        return {}
    try:
        return json.loads(path.read_text("utf-8"))
    except Exception:
        logger.warning("Could not read %s, using defaults", path)
        return {}


def _write_overrides(data: dict[str, Any]) -> None:
    """Persist overrides to the JSON file."""
    path = config.SETTINGS_FILE
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


def _validate(key: str, value: Any) -> Any:
    """Return the normalized value for ``key`` or raise ConfigError."""
    if key == "top_value_limit":
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            raise ConfigError(key, value, "must be a positive integer")
        return value
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(key, value, "must be an ISO 8601 duration such as PT1M")
    parse_retention_period(value)
    return value.strip()


def get_traffic_settings() -> TrafficSettings:
    """Return the effective operator settings.

    Merges .env defaults with any overrides from settings.json.
    """
    settings = config.get_settings()
    return TrafficSettings(
        top_value_limit=settings.top_value_limit,
        retention_period=settings.retention_period,
    )


def update_traffic_settings(updates: dict[str, Any]) -> TrafficSettings:
    """Validate and persist setting overrides, returning the new effective values.

    Only known keys in TRAFFIC_KEYS are accepted; unknown keys are ignored.
    Nothing is written if any value is invalid.

    Raises:
        ConfigError: if a value is malformed.
    """
    validated = {
        key: _validate(key, updates[key]) for key in TRAFFIC_KEYS if key in updates
    }
    overrides = _read_overrides()
    overrides.update(validated)
    _write_overrides(overrides)

    # Clear the cached Settings so get_settings() re-reads from env + overrides
    config.get_settings.cache_clear()

    logger.info("Traffic settings updated: %s", {k: overrides.get(k) for k in TRAFFIC_KEYS})
    return get_traffic_settings()
