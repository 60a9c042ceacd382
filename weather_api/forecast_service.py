"""Generate the synthetic 24-hour forecast."""
from __future__ import annotations

import asyncio
import logging
from typing import List, Optional

from weather_api.models import (
    FORECAST_HOURS,
    MAX_RAINFALL_MM,
    MAX_TEMPERATURE_C,
    MIN_TEMPERATURE_C,
    HourlyForecast,
)
from weather_api.random_source import RandomSource, RandomSourceFactory, random_source_factory
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="weather_api/forecast_service")


def generate_forecast(random_source: RandomSource) -> List[HourlyForecast]:
    """
    Draw one HourlyForecast per hour, hours 1..24 in order.

    Temperature is an integer in [-5, 34]; rainfall is a uniform draw scaled to
    [0, 10) millimetres and rounded to one decimal place.
    """
    forecast: List[HourlyForecast] = []
    for hour in range(1, FORECAST_HOURS + 1):
        forecast.append(
            HourlyForecast(
                hour=hour,
                temperature_c=random_source.randrange(MIN_TEMPERATURE_C, MAX_TEMPERATURE_C + 1),
                rainfall_mm=round(random_source.random() * MAX_RAINFALL_MM, 1),
            )
        )
    return forecast


class WeatherService:
    """Stateless forecast provider; one instance can serve concurrent requests."""

    def __init__(
        self,
        random_factory: Optional[RandomSourceFactory] = None,
        *,
        log: Optional[logging.LoggerAdapter | logging.Logger] = None,
        simulated_delay_seconds: float = 0.0,
    ) -> None:
        self._random_factory = random_factory or random_source_factory()
        self._logger = log or logger
        self._delay = simulated_delay_seconds

    async def get_forecast(self) -> List[HourlyForecast]:
        """Return a freshly generated 24-hour forecast."""
        self._logger.info("Generating 24-hour weather forecast")

        forecast = generate_forecast(self._random_factory())

        if self._delay > 0:
            await asyncio.sleep(self._delay)

        self._logger.debug("Generated forecast", extra={"hours": len(forecast)})
        return forecast


def main():
    """Manual helper: print one generated forecast."""
    service = WeatherService()
    for h in asyncio.run(service.get_forecast()):
        print(f"hour {h.hour:>2}: {h.temperature_c:>3} C / {h.temperature_f:>3} F, rain {h.rainfall_mm} mm")


if __name__ == "__main__":
    main()
