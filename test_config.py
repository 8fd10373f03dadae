"""Tests for fail-fast configuration loading."""

import json
from datetime import datetime, timezone

import pytest

from chronorift import create_app
from chronorift.scheduler import SpawnScheduler
from chronorift.utils import ConfigurationError, load_settings, parse_instant, parse_locations
from conftest import NoSchedulerConfig, config_dict


def test_defaults_load():
    settings = load_settings(config_dict())
    assert settings.timezone_name == 'America/New_York'
    assert settings.reference_time == datetime(2025, 4, 10, 4, 0, tzinfo=timezone.utc)
    assert settings.reference_index == 1
    assert settings.step_minutes == 20
    assert settings.suppressed_hour == 22
    assert (settings.anchor_weekday, settings.anchor_hour) == (3, 4)
    assert settings.locations[1] == ('Sealed Sanctuary', 'Shrine of Devotion')
    assert len(settings.locations) == 4


@pytest.mark.parametrize('overrides', [
    {'SPAWN_INTERVAL_MINUTES': '0'},
    {'SPAWN_INTERVAL_MINUTES': '-20'},
    {'SPAWN_INTERVAL_MINUTES': '7'},
    {'SPAWN_INTERVAL_MINUTES': 'twenty'},
    {'SPAWN_LOCATIONS': '[]'},
    {'SPAWN_LOCATIONS': 'not json'},
    {'SPAWN_LOCATIONS': '[["Orc Village"]]'},
    {'SPAWN_REFERENCE_INDEX': '4'},
    {'SPAWN_REFERENCE_INDEX': '-1'},
    {'SPAWN_REFERENCE_TIME': 'yesterday'},
    {'SPAWN_SUPPRESSED_HOUR': '24'},
    {'SPAWN_ANCHOR_HOUR': '-1'},
    {'SPAWN_ANCHOR_WEEKDAY': '7'},
])
def test_malformed_settings_fail_fast(overrides):
    with pytest.raises(ConfigurationError):
        load_settings(config_dict(**overrides))


def test_unknown_timezone_fails_at_startup():
    settings = load_settings(config_dict(SPAWN_TIMEZONE='Atlantis/Capital'))
    with pytest.raises(ConfigurationError):
        SpawnScheduler.from_settings(settings)


def test_create_app_fails_on_bad_config():
    class BadConfig(NoSchedulerConfig):
        SPAWN_INTERVAL_MINUTES = '25'

    with pytest.raises(ConfigurationError):
        create_app(BadConfig)


def test_parse_instant():
    expected = datetime(2025, 4, 10, 4, 0, tzinfo=timezone.utc)
    assert parse_instant('2025-04-10T04:00:00Z') == expected
    assert parse_instant('2025-04-10T00:00:00-04:00') == expected
    assert parse_instant('2025-04-10T04:00:00') == expected


def test_parse_locations_accepts_objects():
    raw = json.dumps([{'chest': 'A', 'ore': 'B'}, {'chest': 'B', 'ore': 'A'}])
    assert parse_locations(raw) == (('A', 'B'), ('B', 'A'))


def test_custom_rotation():
    settings = load_settings(config_dict(
        SPAWN_LOCATIONS=json.dumps([['A', 'B'], ['B', 'C'], ['C', 'A']]),
        SPAWN_REFERENCE_INDEX='2',
        SPAWN_INTERVAL_MINUTES='15',
    ))
    scheduler = SpawnScheduler.from_settings(settings)
    prediction = scheduler.slot_at_offset(0, now=settings.reference_time)
    assert prediction.slot_index == 2
    assert (prediction.chest, prediction.ore) == ('C', 'A')
    assert scheduler.step_minutes == 15
