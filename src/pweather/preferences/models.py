"""Unit, theme and preference models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class TemperatureUnit(str, Enum):
    CELSIUS = "C"
    FAHRENHEIT = "F"


class WindSpeedUnit(str, Enum):
    METERS_PER_SECOND = "m/s"
    KILOMETERS_PER_HOUR = "km/h"
    MILES_PER_HOUR = "mph"


class PressureUnit(str, Enum):
    MILLIMETERS_OF_MERCURY = "mmHg"
    HECTOPASCALS = "hPa"


class ThemeMode(str, Enum):
    """Visual theme selected by the user."""

    SYSTEM = "system"
    LIGHT = "light"
    DARK = "dark"

    @property
    def display_name(self) -> str:
        return {"system": "Auto", "light": "Light", "dark": "Dark"}[self.value]


class UnitKind(str, Enum):
    """Unit categories; values double as the persisted preference keys."""

    TEMPERATURE = "TemperatureUnit"
    WIND_SPEED = "WindSpeedUnit"
    PRESSURE = "PressureUnit"


UNIT_TYPES: dict[UnitKind, type[Enum]] = {
    UnitKind.TEMPERATURE: TemperatureUnit,
    UnitKind.WIND_SPEED: WindSpeedUnit,
    UnitKind.PRESSURE: PressureUnit,
}

DEFAULT_UNITS: dict[UnitKind, Enum] = {
    UnitKind.TEMPERATURE: TemperatureUnit.CELSIUS,
    UnitKind.WIND_SPEED: WindSpeedUnit.KILOMETERS_PER_HOUR,
    UnitKind.PRESSURE: PressureUnit.HECTOPASCALS,
}


def parse_unit(kind: UnitKind, raw: str | Enum | None) -> Enum:
    """Return the unit for `raw`, falling back to the category default."""
    unit_type = UNIT_TYPES[kind]
    if isinstance(raw, unit_type):
        return raw
    value = raw.value if isinstance(raw, Enum) else raw
    try:
        return unit_type(value)
    except ValueError:
        return DEFAULT_UNITS[kind]


def parse_theme_mode(raw: str | None) -> ThemeMode:
    try:
        return ThemeMode(raw)
    except ValueError:
        return ThemeMode.SYSTEM


class Preferences(BaseModel):
    """Flat set of display preferences with documented defaults."""

    temperature_unit: TemperatureUnit = TemperatureUnit.CELSIUS
    wind_speed_unit: WindSpeedUnit = WindSpeedUnit.KILOMETERS_PER_HOUR
    pressure_unit: PressureUnit = PressureUnit.HECTOPASCALS
    theme_mode: ThemeMode = ThemeMode.SYSTEM
