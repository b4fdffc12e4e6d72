"""
Unit tests for the weather forecast plugin
"""

from datetime import date, datetime, timedelta

import pytest

from plugins.weather_forecast.plugin import (
    ADVERTISED_ENDPOINTS,
    CURRENT_PATH,
    FORECAST_PATH,
    INFO_PATH,
    WeatherForecastPlugin
)
from src.core.plugin_interfaces import LifecycleViolation, PluginState
from src.models.forecast import Forecast, SUMMARIES
from src.services.weather import InMemoryWeatherService, WeatherServiceInterface
from tests.utils import RecordingHost


class TestIdentity:
    """Tests for plugin identity"""

    def test_metadata(self, weather_plugin):
        assert weather_plugin.id == "adorika-weather-plugin"
        assert weather_plugin.name == "Weather Plugin"
        assert weather_plugin.version == "1.0.0"
        assert weather_plugin.description == "A sample plugin that provides weather forecast endpoints"
        assert weather_plugin.author == "Sample Plugin Developer"

    def test_identity_stable_across_instances(self):
        assert WeatherForecastPlugin().get_metadata() == WeatherForecastPlugin().get_metadata()


class TestInitialize:
    """Tests for initialization"""

    @pytest.mark.asyncio
    async def test_seeds_five_forecasts(self, weather_plugin, host):
        await weather_plugin.initialize(host)

        forecasts = weather_plugin.get_local_forecasts()
        assert len(forecasts) == 5
        for forecast in forecasts:
            assert -20 <= forecast.temperature_c <= 54
            assert forecast.summary in SUMMARIES

    @pytest.mark.asyncio
    async def test_logs_through_host(self, weather_plugin, host):
        await weather_plugin.initialize(host)

        assert host.lines("INFO") == [
            "Initializing Weather Plugin v1.0.0",
            "Weather Plugin initialized successfully"
        ]

    @pytest.mark.asyncio
    async def test_seed_count_from_config(self, weather_plugin):
        host = RecordingHost({"adorika-weather-plugin": {"seed_count": 12}})

        await weather_plugin.initialize(host)

        assert len(weather_plugin.get_local_forecasts()) == 12


class TestConfigureServices:
    """Tests for service registration"""

    @pytest.mark.asyncio
    async def test_registers_weather_service_singleton(self, weather_plugin, host, service_collection):
        await weather_plugin.initialize(host)
        weather_plugin.configure_services(service_collection)

        service = service_collection.get(WeatherServiceInterface)
        assert isinstance(service, InMemoryWeatherService)
        assert service_collection.get(WeatherServiceInterface) is service

    @pytest.mark.asyncio
    async def test_registers_plugin_under_own_type(self, weather_plugin, host, service_collection):
        await weather_plugin.initialize(host)
        weather_plugin.configure_services(service_collection)

        assert service_collection.get(WeatherForecastPlugin) is weather_plugin

    @pytest.mark.asyncio
    async def test_service_list_independent_of_plugin_list(self, weather_plugin, host, service_collection):
        await weather_plugin.initialize(host)
        weather_plugin.configure_services(service_collection)
        service = service_collection.get(WeatherServiceInterface)

        added = Forecast(date=date(2030, 1, 1), temperature_c=3, summary="Cool")
        await service.add_forecast(added)

        assert added not in weather_plugin.get_local_forecasts()
        assert service.get_stored_forecasts() == [added]


class TestConfigureEndpoints:
    """Tests for endpoint declaration"""

    def test_rejected_before_initialize(self, weather_plugin, endpoint_builder):
        with pytest.raises(LifecycleViolation):
            weather_plugin.configure_endpoints(endpoint_builder)
        assert endpoint_builder.routes == {}

    @pytest.mark.asyncio
    async def test_declares_four_routes(self, weather_plugin, host, endpoint_builder):
        await weather_plugin.initialize(host)
        weather_plugin.configure_endpoints(endpoint_builder)

        assert list(endpoint_builder.routes) == [
            ("GET", FORECAST_PATH),
            ("GET", CURRENT_PATH),
            ("POST", FORECAST_PATH),
            ("GET", INFO_PATH),
        ]

    @pytest.mark.asyncio
    async def test_forecast_handler_returns_seeded_list(self, weather_plugin, host, endpoint_builder):
        await weather_plugin.initialize(host)
        weather_plugin.configure_endpoints(endpoint_builder)

        result = await endpoint_builder.handler("GET", FORECAST_PATH)()

        assert result == weather_plugin.get_local_forecasts()

    @pytest.mark.asyncio
    async def test_current_handler(self, weather_plugin, host, endpoint_builder):
        await weather_plugin.initialize(host)
        weather_plugin.configure_endpoints(endpoint_builder)

        current = await endpoint_builder.handler("GET", CURRENT_PATH)()

        assert current.date == date.today()
        assert current.summary == "Current Weather"
        assert -20 <= current.temperature_c <= 54

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [None, {}, {"anything": [1, 2, 3]}, "not json", 42])
    async def test_post_handler_ignores_body(self, weather_plugin, host, endpoint_builder, body):
        await weather_plugin.initialize(host)
        weather_plugin.configure_endpoints(endpoint_builder)
        before = weather_plugin.get_local_forecasts()

        result = await endpoint_builder.handler("POST", FORECAST_PATH)(body)

        assert result['message'] == "Weather forecast updated"
        timestamp = datetime.fromisoformat(result['timestamp'])
        assert timestamp.utcoffset() == timedelta(0)
        assert weather_plugin.get_local_forecasts() == before

    @pytest.mark.asyncio
    async def test_info_handler(self, weather_plugin, host, endpoint_builder):
        await weather_plugin.initialize(host)
        weather_plugin.configure_endpoints(endpoint_builder)

        info = await endpoint_builder.handler("GET", INFO_PATH)()

        assert info == {
            'id': "adorika-weather-plugin",
            'name': "Weather Plugin",
            'version': "1.0.0",
            'description': "A sample plugin that provides weather forecast endpoints",
            'author': "Sample Plugin Developer",
            'endpoints': [
                "/api/weather/forecast",
                "/api/weather/current",
                "/api/weather/info"
            ]
        }
        assert tuple(info['endpoints']) == ADVERTISED_ENDPOINTS


class TestDispose:
    """Tests for disposal"""

    @pytest.mark.asyncio
    async def test_clears_local_list(self, weather_plugin, host):
        await weather_plugin.initialize(host)

        await weather_plugin.dispose()

        assert weather_plugin.get_local_forecasts() == []
        assert weather_plugin.state == PluginState.DISPOSED

    @pytest.mark.asyncio
    async def test_forecast_handler_after_dispose_generates(self, weather_plugin, host, endpoint_builder):
        """An empty local list falls back to freshly generated data"""
        await weather_plugin.initialize(host)
        weather_plugin.configure_endpoints(endpoint_builder)
        await weather_plugin.dispose()

        result = await endpoint_builder.handler("GET", FORECAST_PATH)()

        assert len(result) == 5

    @pytest.mark.asyncio
    async def test_lifecycle_calls_after_dispose_rejected(self, weather_plugin, host, endpoint_builder):
        await weather_plugin.initialize(host)
        await weather_plugin.dispose()

        with pytest.raises(LifecycleViolation):
            weather_plugin.configure_endpoints(endpoint_builder)
        with pytest.raises(LifecycleViolation):
            await weather_plugin.initialize(host)
