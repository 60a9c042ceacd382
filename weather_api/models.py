"""Pydantic models for the hourly forecast wire format."""

from pydantic import BaseModel, ConfigDict, Field, computed_field

FORECAST_HOURS = 24
MIN_TEMPERATURE_C = -5
MAX_TEMPERATURE_C = 34
MAX_RAINFALL_MM = 10.0

# Kept as observed on the published contract instead of the exact 9/5 factor.
_CELSIUS_PER_FAHRENHEIT_DEGREE = 0.5556


def celsius_to_fahrenheit(temperature_c: int) -> int:
    """Convert Celsius to Fahrenheit, truncating toward zero."""
    return 32 + int(temperature_c / _CELSIUS_PER_FAHRENHEIT_DEGREE)


class HourlyForecast(BaseModel):
    """One hour of synthetic forecast data."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    hour: int = Field(ge=1, le=FORECAST_HOURS)
    temperature_c: int = Field(alias="temperatureC")
    rainfall_mm: float = Field(alias="rainfallMm", ge=0.0)

    @computed_field(alias="temperatureF")  # type: ignore[prop-decorator]
    @property
    def temperature_f(self) -> int:
        return celsius_to_fahrenheit(self.temperature_c)
