"""Tests for preference backends, unit parsing and the saved-city store."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from pweather.core.city import City
from pweather.exceptions import PreferenceStoreError
from pweather.preferences.backend import JsonFileBackend, MemoryBackend
from pweather.preferences.models import (
    PressureUnit,
    TemperatureUnit,
    ThemeMode,
    UnitKind,
    WindSpeedUnit,
    parse_theme_mode,
    parse_unit,
)
from pweather.preferences.store import SAVED_CITIES_KEY, PreferenceStore, move_items

LOGGER = logging.getLogger("test_preferences")

ZURICH = City(name="Zurich", latitude=47.3769, longitude=8.5417)
BERN = City(name="Bern", latitude=46.9480, longitude=7.4474)
GENEVA = City(name="Geneva", latitude=46.2044, longitude=6.1432)
BASEL = City(name="Basel", latitude=47.5596, longitude=7.5886)


def test_unit_defaults_and_fallbacks() -> None:
    assert parse_unit(UnitKind.TEMPERATURE, None) is TemperatureUnit.CELSIUS
    assert parse_unit(UnitKind.TEMPERATURE, "F") is TemperatureUnit.FAHRENHEIT
    assert parse_unit(UnitKind.WIND_SPEED, "knots") is WindSpeedUnit.KILOMETERS_PER_HOUR
    assert parse_unit(UnitKind.PRESSURE, "mmHg") is PressureUnit.MILLIMETERS_OF_MERCURY
    assert parse_unit(UnitKind.PRESSURE, PressureUnit.HECTOPASCALS) is PressureUnit.HECTOPASCALS


def test_theme_mode_fallback_and_display_name() -> None:
    assert parse_theme_mode("dark") is ThemeMode.DARK
    assert parse_theme_mode("sepia") is ThemeMode.SYSTEM
    assert parse_theme_mode(None) is ThemeMode.SYSTEM
    assert ThemeMode.SYSTEM.display_name == "Auto"


def test_store_reads_defaults_from_empty_backend() -> None:
    store = PreferenceStore(MemoryBackend(), logger=LOGGER)
    prefs = store.preferences()

    assert store.saved_cities == []
    assert prefs.temperature_unit is TemperatureUnit.CELSIUS
    assert prefs.wind_speed_unit is WindSpeedUnit.KILOMETERS_PER_HOUR
    assert prefs.pressure_unit is PressureUnit.HECTOPASCALS
    assert prefs.theme_mode is ThemeMode.SYSTEM


def test_units_and_theme_are_persisted_under_stable_keys() -> None:
    backend = MemoryBackend()
    store = PreferenceStore(backend, logger=LOGGER)

    store.set_unit(UnitKind.TEMPERATURE, "F")
    store.set_unit(UnitKind.WIND_SPEED, WindSpeedUnit.MILES_PER_HOUR)
    assert store.set_unit(UnitKind.PRESSURE, "inHg") is PressureUnit.HECTOPASCALS
    store.set_theme_mode(ThemeMode.DARK)

    assert backend.get("TemperatureUnit") == "F"
    assert backend.get("WindSpeedUnit") == "mph"
    assert backend.get("PressureUnit") == "hPa"
    assert backend.get("themeMode") == "dark"
    assert store.preferences().temperature_unit is TemperatureUnit.FAHRENHEIT


def test_add_city_dedupes_by_id_and_notifies() -> None:
    store = PreferenceStore(MemoryBackend(), logger=LOGGER)
    seen: list[list[City]] = []
    unsubscribe = store.subscribe(seen.append)

    assert store.add_city(ZURICH) is True
    assert store.add_city(ZURICH) is False
    assert store.add_city(BERN) is True
    unsubscribe()
    store.add_city(GENEVA)

    assert store.saved_cities == [ZURICH, BERN, GENEVA]
    assert seen == [[ZURICH], [ZURICH, BERN]]


def test_saved_cities_copy_cannot_mutate_store() -> None:
    store = PreferenceStore(MemoryBackend(), logger=LOGGER)
    store.add_city(ZURICH)
    store.saved_cities.append(BERN)
    assert store.saved_cities == [ZURICH]


def test_delete_and_clear_cities() -> None:
    backend = MemoryBackend()
    store = PreferenceStore(backend, logger=LOGGER)
    store.add_city(ZURICH)
    store.add_city(BERN)

    assert store.delete_city(ZURICH.id) is True
    assert store.delete_city("missing") is False
    assert store.saved_cities == [BERN]

    store.clear_cities()
    assert store.saved_cities == []
    assert backend.get(SAVED_CITIES_KEY) is None


def test_move_items_uses_insert_before_destination() -> None:
    items = [ZURICH, BERN, GENEVA, BASEL]
    assert move_items(items, [0], 2) == [BERN, ZURICH, GENEVA, BASEL]
    assert move_items(items, [0], 4) == [BERN, GENEVA, BASEL, ZURICH]
    assert move_items(items, [3], 0) == [BASEL, ZURICH, BERN, GENEVA]
    assert move_items(items, [0, 2], 4) == [BERN, BASEL, ZURICH, GENEVA]
    assert move_items(items, [1], 1) == items


def test_move_items_rejects_out_of_range_offsets() -> None:
    with pytest.raises(IndexError):
        move_items([ZURICH], [1], 0)
    with pytest.raises(IndexError):
        move_items([ZURICH], [0], 2)


def test_reorder_cities_persists_new_order() -> None:
    backend = MemoryBackend()
    store = PreferenceStore(backend, logger=LOGGER)
    for city in (ZURICH, BERN, GENEVA):
        store.add_city(city)

    store.reorder_cities(2, 0)

    reloaded = PreferenceStore(backend, logger=LOGGER)
    assert reloaded.saved_cities == [GENEVA, ZURICH, BERN]


def test_unreadable_city_list_is_discarded() -> None:
    backend = MemoryBackend({SAVED_CITIES_KEY: [{"name": "Zurich"}]})
    store = PreferenceStore(backend, logger=LOGGER)
    assert store.saved_cities == []


def test_json_file_backend_round_trips_saved_cities(tmp_path: Path) -> None:
    path = tmp_path / "prefs" / "preferences.json"
    store = PreferenceStore(JsonFileBackend(path), logger=LOGGER)
    store.add_city(ZURICH)
    store.set_unit(UnitKind.TEMPERATURE, "F")

    on_disk = json.loads(path.read_text(encoding="utf-8"))
    assert on_disk["TemperatureUnit"] == "F"
    assert on_disk[SAVED_CITIES_KEY][0]["name"] == "Zurich"
    assert not path.with_suffix(".json.tmp").exists()

    reloaded = PreferenceStore(JsonFileBackend(path), logger=LOGGER)
    assert reloaded.saved_cities == [ZURICH]


def test_json_file_backend_rejects_corrupt_file(tmp_path: Path) -> None:
    path = tmp_path / "preferences.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(PreferenceStoreError):
        JsonFileBackend(path)


def test_json_file_backend_rejects_non_object(tmp_path: Path) -> None:
    path = tmp_path / "preferences.json"
    path.write_text("[1, 2, 3]", encoding="utf-8")
    with pytest.raises(PreferenceStoreError, match="JSON object"):
        JsonFileBackend(path)
