"""
Global pytest configuration and fixtures for the weather plugin host.
"""
import random
import tempfile
from pathlib import Path

import pytest

from src.core.config import ConfigurationManager
from src.core.service_registry import ServiceCollection
from plugins.weather_forecast import WeatherForecastPlugin
from tests.utils import RecordingHost, RecordingEndpointBuilder


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def seeded_rng():
    """Deterministic randomness provider."""
    return random.Random(1234)


@pytest.fixture
def config_manager(temp_dir, monkeypatch):
    """Configuration manager isolated from the working directory and environment."""
    for env_var in ("WEATHER_PLUGIN_DEBUG", "WEATHER_PLUGIN_LOG_LEVEL", "WEATHER_PLUGIN_WEB_HOST",
                    "WEATHER_PLUGIN_WEB_PORT", "WEATHER_PLUGIN_SEED_COUNT"):
        monkeypatch.delenv(env_var, raising=False)
    manager = ConfigurationManager(str(temp_dir))
    manager.load_config()
    return manager


@pytest.fixture
def host():
    """Recording plugin host."""
    return RecordingHost()


@pytest.fixture
def endpoint_builder():
    return RecordingEndpointBuilder()


@pytest.fixture
def service_collection():
    return ServiceCollection()


@pytest.fixture
def weather_plugin(seeded_rng):
    """Uninitialized weather plugin with deterministic randomness."""
    return WeatherForecastPlugin(rng=seeded_rng)
