"""
Weather Forecast Plugin

Sample plugin serving synthetic forecast data through host-declared routes.
"""

from .plugin import WeatherForecastPlugin

__all__ = ['WeatherForecastPlugin']
