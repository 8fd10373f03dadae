"""Shared fixtures for the spawn rotation tests."""

from datetime import datetime, timezone

import pytest

from config import Config
from chronorift.utils import load_settings
from chronorift.rotation import RotationEngine
from chronorift.scheduler import SpawnScheduler

# Midnight EDT on Thursday April 10th, 2025: slot 1 (Sealed Sanctuary / Shrine of Devotion)
REFERENCE = datetime(2025, 4, 10, 4, 0, tzinfo=timezone.utc)


class NoSchedulerConfig(Config):
    TESTING = True
    SCHEDULER_ENABLED = False


def config_dict(**overrides):
    values = {key: getattr(Config, key) for key in dir(Config) if key.isupper()}
    values.update(overrides)
    return values


@pytest.fixture
def settings():
    return load_settings(config_dict())


@pytest.fixture
def engine(settings):
    return RotationEngine.from_settings(settings, clock=lambda: REFERENCE)


@pytest.fixture
def classifier(engine):
    return engine.classifier


@pytest.fixture
def counter(engine):
    return engine.counter


@pytest.fixture
def spawn_scheduler(settings):
    return SpawnScheduler.from_settings(settings, clock=lambda: REFERENCE)


@pytest.fixture
def app():
    from chronorift import create_app
    return create_app(NoSchedulerConfig)


@pytest.fixture
def client(app):
    return app.test_client()
