"""
Synthetic forecast generation.
"""

import random
from datetime import date, timedelta
from typing import List, Optional

from src.core.plugin_interfaces import InvalidArgument
from src.models.forecast import Forecast, SUMMARIES, MIN_TEMPERATURE_C, MAX_TEMPERATURE_C


MAX_FORECAST_DAYS = 30


def generate_forecasts(count: int, rng: Optional[random.Random] = None,
                       today: Optional[date] = None) -> List[Forecast]:
    """
    Generate synthetic forecasts for the days following today.

    Args:
        count: Number of days; values above 30 are clamped to 30
        rng: Randomness provider (defaults to the process-wide random module)
        today: Date the sequence counts from (defaults to the current date)

    Returns:
        One forecast per day, dated today + 1 through today + count

    Raises:
        InvalidArgument: If count is zero or negative
    """
    if count <= 0:
        raise InvalidArgument(f"Forecast count must be positive, got {count}")

    rng = rng or random
    today = today or date.today()
    count = min(count, MAX_FORECAST_DAYS)

    return [
        Forecast(
            date=today + timedelta(days=position),
            temperature_c=rng.randint(MIN_TEMPERATURE_C, MAX_TEMPERATURE_C),
            summary=rng.choice(SUMMARIES)
        )
        for position in range(1, count + 1)
    ]
