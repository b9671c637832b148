"""Coordinates location, weather fetches, the city list and screen state."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterable, Iterator
from contextlib import contextmanager

from pydantic import BaseModel, ConfigDict

from ..exceptions import WeatherProviderError
from ..location.base import LocationProvider
from ..location.models import Coordinate, LocationEvent
from ..preferences.store import PreferenceStore
from ..weather.base import WeatherProvider
from ..weather.models import WeatherSnapshot
from .cache import WeatherCache
from .city import City, is_same_city
from .content_state import ContentState, resolve_content_state
from .debounce import Debouncer
from .reconcile import reconcile_cities

# Debounced fixes closer than this (degrees, both axes) to the last requested
# fix or to the loaded current-location snapshot do not trigger a refetch.
SAME_FIX_DEGREES = 0.001


class CoordinatorState(BaseModel):
    """Everything a UI layer needs to render, emitted as one notification."""

    model_config = ConfigDict(frozen=True)

    content_state: ContentState
    advisory: str | None = None
    city_ids: tuple[str, ...] = ()
    cached_ids: tuple[str, ...] = ()
    current_city_id: str | None = None


StateListener = Callable[[CoordinatorState], None]


def _same_fix(latitude: float, longitude: float, coordinate: Coordinate) -> bool:
    return (
        abs(latitude - coordinate.latitude) < SAME_FIX_DEGREES
        and abs(longitude - coordinate.longitude) < SAME_FIX_DEGREES
    )


class Coordinator:
    """Single owner of the reconciled city list, weather cache and content state.

    All methods run on one asyncio event loop; `start()`, `on_appear()` and the
    location callbacks schedule work on the running loop, so they must be
    called from inside it. Listeners are notified once per operation, and only
    when the visible state changed.
    """

    def __init__(
        self,
        *,
        weather_provider: WeatherProvider,
        location_provider: LocationProvider,
        preference_store: PreferenceStore,
        logger: logging.Logger,
        debounce_seconds: float = 2.0,
        settle_window_seconds: float = 1.0,
    ) -> None:
        self.weather_provider = weather_provider
        self.location_provider = location_provider
        self.preference_store = preference_store
        self.logger = logger
        self.settle_window_seconds = settle_window_seconds
        self.cache = WeatherCache(weather_provider, logger)

        self._debouncer: Debouncer[Coordinate] = Debouncer(
            debounce_seconds, self._handle_location_update
        )
        self._current_city: City | None = None
        self._cities: list[City] = reconcile_cities(None, preference_store.saved_cities)
        self._current_weather: WeatherSnapshot | None = None
        self._current_weather_error: str | None = None

        self._is_fetching = False
        self._pending_coordinate: Coordinate | None = None
        self._last_requested: Coordinate | None = None
        self._fetch_task: asyncio.Task[None] | None = None
        self._settle_task: asyncio.Task[None] | None = None
        self._ready_to_show = False

        self._content_state = ContentState.loading()
        self._advisory: str | None = None
        self._listeners: list[StateListener] = []
        self._last_emitted: CoordinatorState | None = None
        self._unsubscribers: list[Callable[[], None]] = []
        self._batch_depth = 0
        self._dirty = False
        self._started = False
        self._closed = False

    # Read side

    @property
    def cities(self) -> list[City]:
        return list(self._cities)

    @property
    def weather_cache(self) -> dict[str, WeatherSnapshot]:
        return self.cache.snapshot()

    @property
    def content_state(self) -> ContentState:
        return self._content_state

    @property
    def advisory(self) -> str | None:
        return self._advisory

    @property
    def current_city(self) -> City | None:
        return self._current_city

    @property
    def current_weather(self) -> WeatherSnapshot | None:
        return self._current_weather

    @property
    def is_fetching_current_location(self) -> bool:
        return self._is_fetching

    @property
    def is_busy(self) -> bool:
        """True while a debounce, current-location fetch or settle window is pending."""
        return self._debouncer.pending or self._is_fetching or self._settle_task is not None

    @property
    def state(self) -> CoordinatorState:
        return CoordinatorState(
            content_state=self._content_state,
            advisory=self._advisory,
            city_ids=tuple(city.id for city in self._cities),
            cached_ids=tuple(sorted(self.cache.snapshot())),
            current_city_id=self._current_city.id if self._current_city else None,
        )

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a state listener; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    # Lifecycle

    def start(self) -> None:
        """Bind to collaborators and kick off the location permission flow."""
        if self._started:
            return
        self._started = True
        self._unsubscribers.append(self.location_provider.subscribe(self._on_location_event))
        self._unsubscribers.append(self.preference_store.subscribe(self._on_saved_cities_changed))

        with self._batched():
            self._refresh_city_list()
            self._recompute()
            if self.location_provider.authorization_status == "not_determined":
                self.location_provider.request_authorization()
            else:
                self.location_provider.start_updating()

    async def close(self) -> None:
        """Cancel timers and in-flight work and detach from collaborators."""
        if self._closed:
            return
        self._closed = True
        self._debouncer.cancel()
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()
        self.location_provider.stop_updating()

        tasks = [task for task in (self._fetch_task, self._settle_task) if task is not None]
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        await self.cache.aclose()

    # UI operations

    def on_appear(self) -> None:
        """Fetch for the known location, or restart the location flow."""
        location = self.location_provider.location
        if location is not None:
            self._debouncer.cancel()
            self._enqueue_or_fetch(location)
        else:
            self.retry_location_flow()

    def retry_location_flow(self) -> None:
        with self._batched():
            self.location_provider.retry()
            self._recompute()

    def clear_advisory(self) -> None:
        self._advisory = None
        self._emit()

    def save_city(self, item: WeatherSnapshot | City) -> City | None:
        """Save a searched place; returns the saved city, or None when skipped.

        A snapshot is a search result, so the saved city is refetched by name.
        """
        if isinstance(item, WeatherSnapshot):
            city = City.from_snapshot(item, lookup_by_name=True)
            snapshot: WeatherSnapshot | None = item
        else:
            city = item.model_copy(update={"is_current_location": False})
            snapshot = None

        if self._current_city is not None and is_same_city(city, self._current_city):
            self.logger.info("%s is already the current location; not saving", city.name)
            return None
        if any(saved.id == city.id for saved in self.preference_store.saved_cities):
            self.logger.info("City %s is already saved", city.name)
            return None

        with self._batched():
            if snapshot is not None:
                self.cache.put(city.id, snapshot)
            self.preference_store.add_city(city)
            self._recompute()
        self.logger.info("Saved city %s", city.id)
        return city

    def delete_city(self, city_id: str) -> bool:
        with self._batched():
            deleted = self.preference_store.delete_city(city_id)
            if deleted:
                self.cache.evict(city_id)
            self._recompute()
        if deleted:
            self.logger.info("Deleted city %s", city_id)
        return deleted

    def reorder_cities(self, source: int | Iterable[int], destination: int) -> None:
        """Reorder saved cities; the current location stays first regardless."""
        with self._batched():
            self.preference_store.reorder_cities(source, destination)
            self._recompute()

    def clear_all_cities(self) -> None:
        """Remove every saved city, keeping only the current-location cache entry."""
        with self._batched():
            self.preference_store.clear_cities()
            keep_id = self._current_city.id if self._current_city else None
            evicted = self.cache.evict_all_except(keep_id)
            self._refresh_city_list()
            self._recompute()
        self.logger.info("Cleared saved cities (%d cache entries evicted)", len(evicted))

    async def ensure_loaded(self, city: City) -> WeatherSnapshot:
        snapshot = await self.cache.ensure_loaded(city)
        self._recompute()
        return snapshot

    async def refresh(self, city: City) -> WeatherSnapshot:
        """Pull-to-refresh: refetch `city` even if it is cached."""
        snapshot = await self.cache.refresh(city)
        if self._current_city is not None and city.id == self._current_city.id:
            self._current_weather = snapshot
            self._current_weather_error = None
        self._recompute()
        return snapshot

    async def preload_all(self) -> dict[str, WeatherProviderError]:
        """Load weather for every city in the display list."""
        failures = await self.cache.preload_all(self.cities)
        self._recompute()
        return failures

    # Location and weather orchestration

    def _on_location_event(self, event: LocationEvent) -> None:
        if event.kind == "location" and event.location is not None:
            self._debouncer.push(event.location)
        self._recompute()

    def _on_saved_cities_changed(self, cities: list[City]) -> None:
        self._refresh_city_list()
        self._recompute()

    def _handle_location_update(self, coordinate: Coordinate) -> None:
        requested = self._last_requested
        if (
            requested is not None
            and self._current_weather_error is None
            and _same_fix(requested.latitude, requested.longitude, coordinate)
        ):
            self._pending_coordinate = None
            return
        current = self._current_weather
        if not self._is_fetching and current is not None and _same_fix(
            current.location.lat, current.location.lon, coordinate
        ):
            return
        self._enqueue_or_fetch(coordinate)

    def _enqueue_or_fetch(self, coordinate: Coordinate) -> None:
        if self._closed:
            return
        if self._is_fetching:
            self.logger.info(
                "Fetch in flight; queueing %.4f,%.4f", coordinate.latitude, coordinate.longitude
            )
            self._pending_coordinate = coordinate
            return

        self._pending_coordinate = None
        self._last_requested = coordinate
        self._ready_to_show = False
        self._cancel_settle_window()
        self._is_fetching = True
        self._current_weather_error = None
        self._recompute()
        self._fetch_task = asyncio.get_running_loop().create_task(
            self._fetch_current_location(coordinate)
        )

    async def _fetch_current_location(self, coordinate: Coordinate) -> None:
        self.logger.info(
            "Fetching current-location weather for %.4f,%.4f",
            coordinate.latitude,
            coordinate.longitude,
        )
        try:
            snapshot = await self.weather_provider.fetch_by_coordinates(
                coordinate.latitude, coordinate.longitude
            )
        except WeatherProviderError as exc:
            self.logger.warning("Current-location weather failed: %s", exc)
            self._current_weather_error = str(exc)
        else:
            self._current_weather = snapshot
            with self._batched():
                self._handle_current_weather(snapshot)
        finally:
            self._is_fetching = False
            if not self._closed:
                with self._batched():
                    self._fetch_queued_if_needed()
                    self._recompute()

    def _handle_current_weather(self, snapshot: WeatherSnapshot) -> None:
        city = City.from_snapshot(snapshot, is_current=True)
        previous = self._current_city
        if previous is not None and is_same_city(previous, city):
            city = previous
        else:
            if previous is not None:
                self.cache.evict(previous.id)
            self._current_city = city
            self.logger.info("Current location city set to %s", city.name)

        self.cache.put(city.id, snapshot)
        self._refresh_city_list()
        self._start_settle_window()
        self._recompute()

    def _fetch_queued_if_needed(self) -> None:
        coordinate = self._pending_coordinate
        if coordinate is None:
            return
        self._pending_coordinate = None
        self._enqueue_or_fetch(coordinate)

    def _start_settle_window(self) -> None:
        self._cancel_settle_window()
        self._settle_task = asyncio.get_running_loop().create_task(self._settle())

    def _cancel_settle_window(self) -> None:
        if self._settle_task is not None:
            self._settle_task.cancel()
            self._settle_task = None

    async def _settle(self) -> None:
        await asyncio.sleep(self.settle_window_seconds)
        self._settle_task = None
        self._ready_to_show = True
        self._recompute()

    # State derivation

    def _refresh_city_list(self) -> None:
        self._cities = reconcile_cities(self._current_city, self.preference_store.saved_cities)

    @contextmanager
    def _batched(self) -> Iterator[None]:
        """Defer recomputation until the outermost batch exits."""
        self._batch_depth += 1
        try:
            yield
        finally:
            self._batch_depth -= 1
            if self._batch_depth == 0 and self._dirty:
                self._dirty = False
                self._recompute()

    def _recompute(self) -> None:
        if self._batch_depth:
            self._dirty = True
            return

        location_error = self.location_provider.error
        decision = resolve_content_state(
            has_saved_cities=bool(self.preference_store.saved_cities),
            has_location=self.location_provider.location is not None,
            location_error=str(location_error) if location_error is not None else None,
            has_current_weather=self._current_weather is not None,
            current_weather_error=self._current_weather_error,
            is_ready_to_show=self._ready_to_show,
        )
        if decision.state != self._content_state:
            self.logger.info("Content state -> %s", decision.state.kind)
        self._content_state = decision.state
        self._advisory = decision.advisory
        self._emit()

    def _emit(self) -> None:
        state = self.state
        if state == self._last_emitted:
            return
        self._last_emitted = state
        for listener in list(self._listeners):
            listener(state)
