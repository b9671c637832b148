"""Unit-aware display formatting for weather values."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from .preferences.models import (
    PressureUnit,
    TemperatureUnit,
    UnitKind,
    WindSpeedUnit,
    parse_unit,
)
from .weather.models import WeatherSnapshot

MB_TO_MMHG = 0.750062
PLACEHOLDER = "--"
TIME_PLACEHOLDER = "--:--"

_API_DATETIME_FORMAT = "%Y-%m-%d %H:%M"


def format_temperature(
    temp_c: float,
    temp_f: float,
    unit: str | Enum | None,
    decimals: int = 0,
) -> str:
    parsed = parse_unit(UnitKind.TEMPERATURE, unit)
    value = temp_c if parsed is TemperatureUnit.CELSIUS else temp_f
    return f"{value:.{decimals}f}°{parsed.value}"


def format_wind_speed(speed_kph: float, speed_mph: float, unit: str | Enum | None) -> str:
    parsed = parse_unit(UnitKind.WIND_SPEED, unit)
    if parsed is WindSpeedUnit.MILES_PER_HOUR:
        value = speed_mph
    elif parsed is WindSpeedUnit.METERS_PER_SECOND:
        value = speed_kph * 1000 / 3600
    else:
        value = speed_kph
    return f"{int(value)} {parsed.value}"


def format_pressure(pressure_mb: float, pressure_in: float, unit: str | Enum | None) -> str:
    """Format pressure; `pressure_in` is accepted for symmetry with the API fields."""
    parsed = parse_unit(UnitKind.PRESSURE, unit)
    if parsed is PressureUnit.MILLIMETERS_OF_MERCURY:
        value = pressure_mb * MB_TO_MMHG
    else:
        value = pressure_mb
    return f"{int(value)} {parsed.value}"


def current_temperature(snapshot: WeatherSnapshot, unit: str | Enum | None) -> str:
    return format_temperature(snapshot.current.temp_c, snapshot.current.temp_f, unit)


def high_temperature(snapshot: WeatherSnapshot, unit: str | Enum | None) -> str:
    if not snapshot.forecast.forecastday:
        return PLACEHOLDER
    day = snapshot.forecast.forecastday[0].day
    return format_temperature(day.maxtemp_c, day.maxtemp_f, unit)


def low_temperature(snapshot: WeatherSnapshot, unit: str | Enum | None) -> str:
    if not snapshot.forecast.forecastday:
        return PLACEHOLDER
    day = snapshot.forecast.forecastday[0].day
    return format_temperature(day.mintemp_c, day.mintemp_f, unit)


def _parse_api_datetime(value: str) -> datetime | None:
    try:
        return datetime.strptime(value.strip(), _API_DATETIME_FORMAT)
    except ValueError:
        return None


def format_to_time(value: str) -> str:
    """`"2024-06-10 18:20"` -> `"18:20"`."""
    parsed = _parse_api_datetime(value)
    return parsed.strftime("%H:%M") if parsed else TIME_PLACEHOLDER


def format_to_day_and_date(value: str) -> str | None:
    """`"2024-06-10 18:20"` -> `"Monday, 10 Jun"`."""
    parsed = _parse_api_datetime(value)
    if parsed is None:
        return None
    return f"{parsed:%A}, {parsed.day} {parsed:%b}"


def format_local_time(local_time: str) -> str:
    parts = local_time.split()
    return parts[-1] if parts else TIME_PLACEHOLDER
