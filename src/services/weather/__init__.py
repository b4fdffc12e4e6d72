"""
Weather Service Module

Provides synthetic forecast generation and the in-memory weather service
registered by the weather plugin.
"""

from .forecast_generator import generate_forecasts, MAX_FORECAST_DAYS
from .weather_service import WeatherServiceInterface, InMemoryWeatherService

__all__ = [
    'generate_forecasts',
    'MAX_FORECAST_DAYS',
    'WeatherServiceInterface',
    'InMemoryWeatherService'
]
