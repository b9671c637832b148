"""Weather provider integrations."""

from .base import WeatherProvider
from .models import ForecastDay, HourForecast, WeatherSnapshot
from .weatherapi import WeatherAPIProvider

__all__ = [
    "ForecastDay",
    "HourForecast",
    "WeatherAPIProvider",
    "WeatherProvider",
    "WeatherSnapshot",
]
