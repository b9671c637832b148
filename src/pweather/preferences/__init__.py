"""Persisted user preferences and saved cities."""

from .backend import JsonFileBackend, KeyValueBackend, MemoryBackend
from .models import (
    Preferences,
    PressureUnit,
    TemperatureUnit,
    ThemeMode,
    UnitKind,
    WindSpeedUnit,
)
from .store import PreferenceStore

__all__ = [
    "JsonFileBackend",
    "KeyValueBackend",
    "MemoryBackend",
    "PreferenceStore",
    "Preferences",
    "PressureUnit",
    "TemperatureUnit",
    "ThemeMode",
    "UnitKind",
    "WindSpeedUnit",
]
