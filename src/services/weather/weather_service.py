"""
Weather Data Service

In-memory forecast service the weather plugin registers as a shared
singleton in the host's service registry.
"""

import random
import threading
from abc import ABC, abstractmethod
from typing import List, Optional

from src.core.logging import get_logger
from src.models.forecast import Forecast
from .forecast_generator import generate_forecasts, MAX_FORECAST_DAYS


class WeatherServiceInterface(ABC):
    """Capability other host components resolve the weather service by"""

    @abstractmethod
    async def get_forecast(self, days: int = 5) -> List[Forecast]:
        """
        Get a forecast for the coming days.

        Args:
            days: Number of days, clamped into [1, 30]

        Returns:
            Freshly generated forecasts
        """
        pass

    @abstractmethod
    async def add_forecast(self, forecast: Forecast) -> Forecast:
        """
        Store a forecast.

        Args:
            forecast: Forecast to append

        Returns:
            The same forecast, as an acknowledgement
        """
        pass


class InMemoryWeatherService(WeatherServiceInterface):
    """
    Process-local weather service.

    Generation and storage are independent: get_forecast() always generates
    new data and never reads what add_forecast() stored. The stored list is
    shared by every request handler, so appends are serialized by a lock.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng
        self.logger = get_logger('weather_service')
        self._forecasts: List[Forecast] = []
        self._lock = threading.Lock()

    async def get_forecast(self, days: int = 5) -> List[Forecast]:
        days = max(1, min(days, MAX_FORECAST_DAYS))
        return generate_forecasts(days, self.rng)

    async def add_forecast(self, forecast: Forecast) -> Forecast:
        with self._lock:
            self._forecasts.append(forecast)
            stored = len(self._forecasts)
        self.logger.debug(f"Stored forecast for {forecast.date} ({stored} total)")
        return forecast

    def get_stored_forecasts(self) -> List[Forecast]:
        """Snapshot of the stored forecasts"""
        with self._lock:
            return list(self._forecasts)
