"""Application dependency root: builds each service once and wires them together."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .config import Settings
from .core.coordinator import Coordinator
from .core.search import CitySearch
from .location.base import LocationProvider
from .location.fixed import FixedLocationProvider
from .location.models import Coordinate
from .preferences.backend import JsonFileBackend
from .preferences.store import PreferenceStore
from .weather.base import WeatherProvider
from .weather.weatherapi import WeatherAPIProvider


@dataclass(slots=True)
class AppContainer:
    """Long-lived services shared by every front-end command."""

    settings: Settings
    logger: logging.Logger
    weather_provider: WeatherProvider
    location_provider: LocationProvider
    preference_store: PreferenceStore
    coordinator: Coordinator
    city_search: CitySearch

    async def aclose(self) -> None:
        await self.coordinator.close()
        await self.weather_provider.aclose()


def default_coordinate(settings: Settings) -> Coordinate | None:
    if settings.default_lat is None or settings.default_lon is None:
        return None
    return Coordinate(latitude=settings.default_lat, longitude=settings.default_lon)


def build_container(
    settings: Settings,
    logger: logging.Logger,
    *,
    weather_provider: WeatherProvider | None = None,
    location_provider: LocationProvider | None = None,
    preference_store: PreferenceStore | None = None,
) -> AppContainer:
    """Construct the service graph; any collaborator may be injected instead."""
    weather = weather_provider or WeatherAPIProvider(settings=settings, logger=logger)
    location = location_provider or FixedLocationProvider(
        default_coordinate(settings),
        logger=logger,
        distance_filter_meters=settings.location_distance_filter_meters,
    )
    store = preference_store or PreferenceStore(
        JsonFileBackend(settings.preferences_path),
        logger=logger,
    )
    coordinator = Coordinator(
        weather_provider=weather,
        location_provider=location,
        preference_store=store,
        logger=logger,
        debounce_seconds=settings.location_debounce_seconds,
        settle_window_seconds=settings.settle_window_seconds,
    )
    return AppContainer(
        settings=settings,
        logger=logger,
        weather_provider=weather,
        location_provider=location,
        preference_store=store,
        coordinator=coordinator,
        city_search=CitySearch(weather, logger),
    )
