"""Unit tests for runtime traffic settings management."""

import json

import pytest

from traffic_monitor.application.services.settings_service import (
    get_traffic_settings,
    update_traffic_settings,
)
from traffic_monitor.domain.entities import TrafficSettings
from traffic_monitor.domain.exceptions import ConfigError


def test_defaults_without_overrides(settings_file):
    assert get_traffic_settings() == TrafficSettings(top_value_limit=10, retention_period="PT1M")


def test_update_persists_and_takes_effect(settings_file):
    updated = update_traffic_settings({"top_value_limit": 5, "retention_period": "P1D"})

    assert updated == TrafficSettings(top_value_limit=5, retention_period="P1D")
    assert json.loads(settings_file.read_text("utf-8")) == {
        "top_value_limit": 5,
        "retention_period": "P1D",
    }
    assert get_traffic_settings().retention_period == "P1D"


def test_partial_update_keeps_other_values(settings_file):
    update_traffic_settings({"retention_period": "PT5M"})
    update_traffic_settings({"top_value_limit": 20})

    assert get_traffic_settings() == TrafficSettings(top_value_limit=20, retention_period="PT5M")


def test_unknown_keys_are_ignored(settings_file):
    update_traffic_settings({"app_title": "nope"})

    assert "app_title" not in json.loads(settings_file.read_text("utf-8"))


@pytest.mark.parametrize(
    "updates",
    [
        {"retention_period": "one minute"},
        {"retention_period": "1 day"},
        {"retention_period": "01:00:00"},
        {"retention_period": ""},
        {"top_value_limit": 0},
        {"top_value_limit": "10"},
        {"top_value_limit": 5, "retention_period": "bogus"},
    ],
)
def test_invalid_values_are_rejected_without_writing(settings_file, updates):
    with pytest.raises(ConfigError):
        update_traffic_settings(updates)

    assert not settings_file.exists()
    assert get_traffic_settings() == TrafficSettings()
