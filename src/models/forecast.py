"""
Forecast Data Model

Defines the synthetic single-day forecast served by the weather plugin.
"""

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Optional


SUMMARIES = (
    "Freezing", "Bracing", "Chilly", "Cool", "Mild",
    "Warm", "Balmy", "Hot", "Sweltering", "Scorching"
)

MIN_TEMPERATURE_C = -20
MAX_TEMPERATURE_C = 54

# Celsius degrees per Fahrenheit degree
FAHRENHEIT_SCALE = 0.5556


@dataclass(frozen=True)
class Forecast:
    """A single day's forecast"""
    date: date
    temperature_c: int
    summary: Optional[str] = None

    @property
    def temperature_f(self) -> int:
        """Temperature in Fahrenheit; the scaled value is truncated toward zero"""
        return 32 + int(self.temperature_c / FAHRENHEIT_SCALE)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON shape served over HTTP"""
        return {
            'date': self.date.isoformat(),
            'temperatureC': self.temperature_c,
            'temperatureF': self.temperature_f,
            'summary': self.summary
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Forecast':
        """Create from dictionary; temperatureF is derived and ignored"""
        forecast_date = data['date']
        if isinstance(forecast_date, str):
            forecast_date = date.fromisoformat(forecast_date)
        return cls(
            date=forecast_date,
            temperature_c=int(data['temperatureC']),
            summary=data.get('summary')
        )
