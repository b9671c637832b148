"""Typed preference store over a key/value backend."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from enum import Enum

from pydantic import TypeAdapter, ValidationError

from ..core.city import City
from .backend import KeyValueBackend
from .models import (
    Preferences,
    ThemeMode,
    UnitKind,
    parse_theme_mode,
    parse_unit,
)

SAVED_CITIES_KEY = "SavedCities"
THEME_MODE_KEY = "themeMode"

CitiesListener = Callable[[list[City]], None]

_CITY_LIST = TypeAdapter(list[City])


def move_items(items: list[City], source: Iterable[int], destination: int) -> list[City]:
    """Move the items at `source` offsets so they land before `destination`.

    `destination` is an offset into the list *before* removal, matching the
    drag-and-drop reorder contract of list UIs.
    """
    offsets = sorted(set(source))
    for offset in offsets:
        if not (0 <= offset < len(items)):
            raise IndexError(f"Source offset {offset} out of range for {len(items)} items.")
    if not (0 <= destination <= len(items)):
        raise IndexError(f"Destination {destination} out of range for {len(items)} items.")

    moving = [items[offset] for offset in offsets]
    skipped = set(offsets)
    remaining = [item for index, item in enumerate(items) if index not in skipped]
    insert_at = destination - sum(1 for offset in offsets if offset < destination)
    return remaining[:insert_at] + moving + remaining[insert_at:]


class PreferenceStore:
    """Durable user preferences and the ordered saved-city list."""

    def __init__(self, backend: KeyValueBackend, logger: logging.Logger) -> None:
        self.backend = backend
        self.logger = logger
        self._listeners: list[CitiesListener] = []
        self._saved_cities = self._load_cities()

    # Saved cities

    @property
    def saved_cities(self) -> list[City]:
        return list(self._saved_cities)

    def subscribe(self, listener: CitiesListener) -> Callable[[], None]:
        """Register a saved-city change listener; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def add_city(self, city: City) -> bool:
        if any(saved.id == city.id for saved in self._saved_cities):
            return False
        self._replace_cities([*self._saved_cities, city])
        return True

    def delete_city(self, city_id: str) -> bool:
        remaining = [city for city in self._saved_cities if city.id != city_id]
        if len(remaining) == len(self._saved_cities):
            return False
        self._replace_cities(remaining)
        return True

    def reorder_cities(self, source: int | Iterable[int], destination: int) -> None:
        offsets = [source] if isinstance(source, int) else list(source)
        self._replace_cities(move_items(self._saved_cities, offsets, destination))

    def clear_cities(self) -> None:
        self.backend.remove(SAVED_CITIES_KEY)
        self._saved_cities = []
        self._notify()

    def _replace_cities(self, cities: list[City]) -> None:
        self.backend.set(SAVED_CITIES_KEY, _CITY_LIST.dump_python(cities, mode="json"))
        self._saved_cities = cities
        self._notify()

    def _load_cities(self) -> list[City]:
        raw = self.backend.get(SAVED_CITIES_KEY)
        if raw is None:
            return []
        try:
            return _CITY_LIST.validate_python(raw)
        except ValidationError as exc:
            self.logger.warning(
                "Discarding unreadable saved-city list (%d error(s))", exc.error_count()
            )
            return []

    def _notify(self) -> None:
        snapshot = self.saved_cities
        for listener in list(self._listeners):
            listener(snapshot)

    # Units and theme

    def get_unit(self, kind: UnitKind) -> Enum:
        return parse_unit(kind, self.backend.get(kind.value))

    def set_unit(self, kind: UnitKind, unit: str | Enum) -> Enum:
        """Persist `unit`, or the category default when it is not a valid unit."""
        parsed = parse_unit(kind, unit)
        self.backend.set(kind.value, parsed.value)
        return parsed

    @property
    def theme_mode(self) -> ThemeMode:
        return parse_theme_mode(self.backend.get(THEME_MODE_KEY))

    def set_theme_mode(self, mode: str | ThemeMode) -> ThemeMode:
        parsed = parse_theme_mode(mode.value if isinstance(mode, ThemeMode) else mode)
        self.backend.set(THEME_MODE_KEY, parsed.value)
        return parsed

    def preferences(self) -> Preferences:
        return Preferences(
            temperature_unit=self.get_unit(UnitKind.TEMPERATURE),
            wind_speed_unit=self.get_unit(UnitKind.WIND_SPEED),
            pressure_unit=self.get_unit(UnitKind.PRESSURE),
            theme_mode=self.theme_mode,
        )
