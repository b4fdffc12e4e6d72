"""
Weather Forecast Plugin

Sample plugin demonstrating the lifecycle contract:
- Seeds a local forecast list on initialization
- Registers the in-memory weather service as a shared singleton
- Declares forecast, current-conditions, update and info routes
- Clears its data on disposal
"""

import random
import threading
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional

from src.core.plugin_interfaces import (
    BasePlugin,
    EndpointBuilder,
    PluginHost,
    PluginMetadata,
    ServiceRegistry
)
from src.models.forecast import Forecast, MIN_TEMPERATURE_C, MAX_TEMPERATURE_C
from src.services.weather import (
    InMemoryWeatherService,
    WeatherServiceInterface,
    generate_forecasts
)


FORECAST_PATH = "/api/weather/forecast"
CURRENT_PATH = "/api/weather/current"
INFO_PATH = "/api/weather/info"

# Paths advertised by the info endpoint
ADVERTISED_ENDPOINTS = (FORECAST_PATH, CURRENT_PATH, INFO_PATH)

DEFAULT_SEED_COUNT = 5
CURRENT_WEATHER_SUMMARY = "Current Weather"

METADATA = PluginMetadata(
    id="adorika-weather-plugin",
    name="Weather Plugin",
    version="1.0.0",
    description="A sample plugin that provides weather forecast endpoints",
    author="Sample Plugin Developer"
)


class WeatherForecastPlugin(BasePlugin):
    """
    Weather forecast sample plugin.

    The plugin's own forecast list and the registered weather service's
    stored list are independent and never synchronized.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng
        self._forecasts: List[Forecast] = []
        self._lock = threading.Lock()
        super().__init__()

    def get_metadata(self) -> PluginMetadata:
        return METADATA

    @property
    def author(self) -> str:
        return METADATA.author

    async def on_initialize(self, host: PluginHost) -> None:
        host.log_info(f"Initializing {self.name} v{self.version}")

        seed_count = host.get_plugin_config(self.id).get('seed_count', DEFAULT_SEED_COUNT)
        forecasts = generate_forecasts(seed_count, self.rng)
        with self._lock:
            self._forecasts.extend(forecasts)

        host.log_info(f"{self.name} initialized successfully")

    def on_configure_services(self, registry: ServiceRegistry) -> None:
        registry.add_singleton(WeatherServiceInterface, lambda: InMemoryWeatherService(self.rng))
        registry.add_singleton(type(self), instance=self)

    def on_configure_endpoints(self, builder: EndpointBuilder) -> None:
        builder.map_get(FORECAST_PATH, self.get_weather_forecast)
        builder.map_get(CURRENT_PATH, self.get_current_weather)
        builder.map_post(FORECAST_PATH, self.update_weather_forecast)
        builder.map_get(INFO_PATH, self.get_plugin_info)

    async def on_dispose(self) -> None:
        with self._lock:
            self._forecasts.clear()

    def get_local_forecasts(self) -> List[Forecast]:
        """Snapshot of the plugin's own forecast list"""
        with self._lock:
            return list(self._forecasts)

    async def get_weather_forecast(self) -> List[Forecast]:
        """Seeded forecasts, or a fresh sample when the list is empty"""
        forecasts = self.get_local_forecasts()
        if forecasts:
            return forecasts
        return generate_forecasts(DEFAULT_SEED_COUNT, self.rng)

    async def get_current_weather(self) -> Forecast:
        rng = self.rng or random
        return Forecast(
            date=date.today(),
            temperature_c=rng.randint(MIN_TEMPERATURE_C, MAX_TEMPERATURE_C),
            summary=CURRENT_WEATHER_SUMMARY
        )

    async def update_weather_forecast(self, request: Any) -> Dict[str, Any]:
        """Acknowledge a forecast update. The request body is accepted but unused."""
        return {
            'message': "Weather forecast updated",
            'timestamp': datetime.now(timezone.utc).isoformat()
        }

    async def get_plugin_info(self) -> Dict[str, Any]:
        info = self.get_metadata().to_dict()
        info['endpoints'] = list(ADVERTISED_ENDPOINTS)
        return info
