"""Tests for unit-aware display formatting."""

from __future__ import annotations

import json
from pathlib import Path

from pweather.formatting import (
    PLACEHOLDER,
    TIME_PLACEHOLDER,
    current_temperature,
    format_local_time,
    format_pressure,
    format_temperature,
    format_to_day_and_date,
    format_to_time,
    format_wind_speed,
    high_temperature,
    low_temperature,
)
from pweather.preferences.models import PressureUnit, TemperatureUnit, WindSpeedUnit
from pweather.weather.models import WeatherSnapshot


def _snapshot(with_forecast: bool = True) -> WeatherSnapshot:
    source = Path(__file__).parent / "fixtures" / "weatherapi_forecast.json"
    payload = json.loads(source.read_text(encoding="utf-8"))
    if not with_forecast:
        payload["forecast"]["forecastday"] = []
    return WeatherSnapshot.model_validate(payload)


def test_temperature_uses_selected_unit() -> None:
    assert format_temperature(21.6, 70.9, TemperatureUnit.CELSIUS) == "22°C"
    assert format_temperature(21.6, 70.9, "F") == "71°F"
    assert format_temperature(21.6, 70.9, "K") == "22°C"
    assert format_temperature(21.64, 70.9, "C", decimals=1) == "21.6°C"


def test_wind_speed_conversions() -> None:
    assert format_wind_speed(36.0, 22.4, WindSpeedUnit.KILOMETERS_PER_HOUR) == "36 km/h"
    assert format_wind_speed(36.0, 22.4, WindSpeedUnit.METERS_PER_SECOND) == "10 m/s"
    assert format_wind_speed(36.0, 22.4, "mph") == "22 mph"


def test_pressure_conversions() -> None:
    assert format_pressure(1016.0, 30.0, PressureUnit.HECTOPASCALS) == "1016 hPa"
    assert format_pressure(1016.0, 30.0, PressureUnit.MILLIMETERS_OF_MERCURY) == "762 mmHg"


def test_snapshot_temperatures() -> None:
    snapshot = _snapshot()
    assert current_temperature(snapshot, "C") == "22°C"
    assert high_temperature(snapshot, "C") == "24°C"
    assert low_temperature(snapshot, "F") == "55°F"


def test_missing_forecast_days_use_placeholder() -> None:
    snapshot = _snapshot(with_forecast=False)
    assert high_temperature(snapshot, "C") == PLACEHOLDER
    assert low_temperature(snapshot, "C") == PLACEHOLDER


def test_date_time_helpers() -> None:
    assert format_to_time("2024-06-10 18:20") == "18:20"
    assert format_to_time("not a time") == TIME_PLACEHOLDER
    assert format_to_day_and_date("2024-06-10 18:20") == "Monday, 10 Jun"
    assert format_to_day_and_date("") is None
    assert format_local_time("2024-06-10 18:20") == "18:20"
    assert format_local_time("") == TIME_PLACEHOLDER
