"""Per-city weather snapshot cache with in-flight request sharing."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable

from ..exceptions import WeatherProviderError
from ..weather.base import WeatherProvider
from ..weather.models import WeatherSnapshot
from .city import City


class WeatherCache:
    """Snapshots keyed by `City.id`.

    Concurrent loads of the same id share one provider call. A fetch whose id
    was evicted or superseded while in flight does not write its result.
    """

    def __init__(self, provider: WeatherProvider, logger: logging.Logger) -> None:
        self.provider = provider
        self.logger = logger
        self._entries: dict[str, WeatherSnapshot] = {}
        self._in_flight: dict[str, asyncio.Task[WeatherSnapshot]] = {}

    def __contains__(self, city_id: object) -> bool:
        return city_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, city_id: str) -> WeatherSnapshot | None:
        return self._entries.get(city_id)

    def snapshot(self) -> dict[str, WeatherSnapshot]:
        """Return a copy of the current entries for read-only consumers."""
        return dict(self._entries)

    def is_loading(self, city_id: str) -> bool:
        return city_id in self._in_flight

    def put(self, city_id: str, snapshot: WeatherSnapshot) -> None:
        self._entries[city_id] = snapshot

    def evict(self, city_id: str) -> bool:
        self._in_flight.pop(city_id, None)
        return self._entries.pop(city_id, None) is not None

    def evict_all_except(self, keep_id: str | None) -> list[str]:
        """Drop every entry except `keep_id`; returns the evicted ids."""
        evicted = [city_id for city_id in self._entries if city_id != keep_id]
        for city_id in evicted:
            del self._entries[city_id]
        for city_id in [key for key in self._in_flight if key != keep_id]:
            del self._in_flight[city_id]
        return evicted

    async def ensure_loaded(self, city: City) -> WeatherSnapshot:
        """Return the cached snapshot, fetching it once if missing."""
        cached = self._entries.get(city.id)
        if cached is not None:
            return cached
        task = self._in_flight.get(city.id)
        if task is None:
            task = self._start_fetch(city)
        return await asyncio.shield(task)

    async def refresh(self, city: City) -> WeatherSnapshot:
        """Fetch unconditionally and overwrite the cached snapshot."""
        return await asyncio.shield(self._start_fetch(city))

    async def preload_all(self, cities: Iterable[City]) -> dict[str, WeatherProviderError]:
        """Load every distinct city once; returns failures keyed by city id."""
        failures: dict[str, WeatherProviderError] = {}
        seen: set[str] = set()
        for city in cities:
            if city.id in seen:
                continue
            seen.add(city.id)
            try:
                await self.ensure_loaded(city)
            except WeatherProviderError as exc:
                failures[city.id] = exc
        return failures

    async def aclose(self) -> None:
        """Cancel outstanding fetches."""
        tasks = list(self._in_flight.values())
        self._in_flight.clear()
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    def _start_fetch(self, city: City) -> asyncio.Task[WeatherSnapshot]:
        task = asyncio.get_running_loop().create_task(self._fetch(city))
        self._in_flight[city.id] = task
        return task

    async def _fetch(self, city: City) -> WeatherSnapshot:
        self.logger.info("Loading weather for city id %s", city.id)
        owned = False
        try:
            if city.lookup_by_name:
                snapshot = await self.provider.fetch_by_name(city.name)
            else:
                snapshot = await self.provider.fetch_by_coordinates(city.latitude, city.longitude)
        except WeatherProviderError as exc:
            self.logger.warning(
                "Failed to load weather for %s: %s",
                city.name,
                exc,
                extra={"city_id": city.id, "category": exc.category},
            )
            raise
        finally:
            owned = self._in_flight.get(city.id) is asyncio.current_task()
            if owned:
                del self._in_flight[city.id]

        if owned:
            self._entries[city.id] = snapshot
        return snapshot
