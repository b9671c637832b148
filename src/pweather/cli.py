"""pweather command line: forecasts, search, saved cities, settings and a live watch."""

from __future__ import annotations

import argparse
import asyncio
import sys
import time

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .app import AppContainer, build_container, default_coordinate
from .config import Settings, load_settings
from .exceptions import ConfigError, LocationError, PreferenceStoreError, WeatherProviderError
from .location.fixed import FixedLocationProvider
from .location.models import Coordinate
from .log_setup import setup_logger
from .preferences.models import (
    PressureUnit,
    TemperatureUnit,
    ThemeMode,
    UnitKind,
    WindSpeedUnit,
)
from .redaction import sanitize_for_logging
from .ui.dashboard import WatchDashboard
from .ui.tables import alerts_table, cities_table, daily_table, hourly_table, snapshot_summary
from .weather.models import WeatherSnapshot

_WATCH_SETTLED_KINDS = {"ready", "error", "location_error", "requesting_location"}


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse pweather CLI arguments."""
    parser = argparse.ArgumentParser(prog="pweather", description="Terminal weather client.")
    sub = parser.add_subparsers(dest="command", required=True)

    current = sub.add_parser("current", help="Show the forecast for a place.")
    current.add_argument("--lat", type=float, default=None, help="Latitude.")
    current.add_argument("--lon", type=float, default=None, help="Longitude.")
    current.add_argument("--city", type=str, default=None, help="City name instead of lat/lon.")
    current.add_argument("--max-print", type=int, default=None, help="Hourly rows to print.")

    search = sub.add_parser("search", help="Search a city by name.")
    search.add_argument("name", help="City name.")
    search.add_argument("--save", action="store_true", help="Save the result as a city.")

    cities = sub.add_parser("cities", help="Manage saved cities.")
    cities_sub = cities.add_subparsers(dest="cities_command", required=True)
    cities_sub.add_parser("list", help="List saved cities.")
    remove = cities_sub.add_parser("remove", help="Delete a saved city by id or index.")
    remove.add_argument("city", help="City id or list index.")
    move = cities_sub.add_parser("move", help="Move a saved city to a new position.")
    move.add_argument("source", type=int, help="Current index.")
    move.add_argument("destination", type=int, help="Insert-before index.")
    cities_sub.add_parser("clear", help="Delete every saved city.")

    prefs = sub.add_parser("settings", help="Show or change display settings.")
    prefs_sub = prefs.add_subparsers(dest="settings_command", required=True)
    prefs_sub.add_parser("show", help="Print current settings.")
    set_parser = prefs_sub.add_parser("set", help="Update one or more settings.")
    set_parser.add_argument(
        "--temperature-unit", choices=[unit.value for unit in TemperatureUnit]
    )
    set_parser.add_argument("--wind-speed-unit", choices=[unit.value for unit in WindSpeedUnit])
    set_parser.add_argument("--pressure-unit", choices=[unit.value for unit in PressureUnit])
    set_parser.add_argument("--theme", choices=[mode.value for mode in ThemeMode])

    watch = sub.add_parser("watch", help="Run the location/weather coordinator.")
    watch.add_argument("--lat", type=float, default=None, help="Reported latitude.")
    watch.add_argument("--lon", type=float, default=None, help="Reported longitude.")
    watch.add_argument(
        "--deny-location",
        action="store_true",
        help="Simulate the user refusing location permission.",
    )
    watch.add_argument(
        "--timeout",
        type=float,
        default=30.0,
        help="Seconds to wait for the screen state to settle.",
    )
    return parser.parse_args(argv)


def _resolve_coordinate(
    args: argparse.Namespace, settings: Settings
) -> Coordinate | None:
    if (args.lat is None) != (args.lon is None):
        raise WeatherProviderError(
            "Pass both --lat and --lon, or neither.", category="invalid_input"
        )
    if args.lat is not None:
        return Coordinate(latitude=args.lat, longitude=args.lon)
    return default_coordinate(settings)


def _print_snapshot(
    console: Console, container: AppContainer, snapshot: WeatherSnapshot, max_print: int
) -> None:
    prefs = container.preference_store.preferences()
    console.print(snapshot_summary(snapshot, prefs))
    console.print(hourly_table(snapshot, prefs, max_rows=max_print))
    console.print(daily_table(snapshot, prefs))
    alerts = alerts_table(snapshot)
    if alerts is not None:
        console.print(alerts)


async def _run_current(args: argparse.Namespace, container: AppContainer, console: Console) -> int:
    if args.max_print is not None and args.max_print <= 0:
        raise WeatherProviderError("--max-print must be > 0 when provided.", category="invalid_input")
    provider = container.weather_provider
    if args.city:
        if args.lat is not None or args.lon is not None:
            raise WeatherProviderError(
                "Use either --city or --lat/--lon, not both.", category="invalid_input"
            )
        snapshot = await provider.fetch_by_name(args.city)
    else:
        coordinate = _resolve_coordinate(args, container.settings)
        if coordinate is None:
            raise WeatherProviderError(
                "Missing location input: pass --lat and --lon, --city, "
                "or set DEFAULT_LAT/DEFAULT_LON.",
                category="invalid_input",
            )
        snapshot = await provider.fetch_by_coordinates(coordinate.latitude, coordinate.longitude)

    _print_snapshot(console, container, snapshot, args.max_print or container.settings.max_print)
    return 0


async def _run_search(args: argparse.Namespace, container: AppContainer, console: Console) -> int:
    search = container.city_search
    results = await search.search(args.name)
    if search.error is not None:
        raise search.error
    if not results:
        console.print("Nothing to search for.")
        return 0

    snapshot = results[0]
    _print_snapshot(console, container, snapshot, container.settings.max_print)
    if args.save:
        saved = container.coordinator.save_city(snapshot)
        if saved is None:
            console.print(f"{snapshot.location.name} is already saved.")
        else:
            console.print(f"Saved {saved.name} as {saved.id}.")
    return 0


def _run_cities(args: argparse.Namespace, container: AppContainer, console: Console) -> int:
    coordinator = container.coordinator
    store = container.preference_store

    if args.cities_command == "remove":
        city_id = args.city
        saved = store.saved_cities
        if city_id.isdigit():
            index = int(city_id)
            if index >= len(saved):
                console.print(f"No saved city at index {index}.")
                return 1
            city_id = saved[index].id
        if not coordinator.delete_city(city_id):
            console.print(f"No saved city with id {city_id}.")
            return 1
        console.print(f"Deleted {city_id}.")
    elif args.cities_command == "move":
        try:
            coordinator.reorder_cities(args.source, args.destination)
        except IndexError as exc:
            console.print(str(exc))
            return 1
    elif args.cities_command == "clear":
        coordinator.clear_all_cities()
        console.print("Cleared all saved cities.")

    prefs = store.preferences()
    saved = store.saved_cities
    if not saved:
        console.print("No saved cities.")
        return 0
    console.print(cities_table(saved, prefs, title="Saved Cities"))
    return 0


def _run_settings(args: argparse.Namespace, container: AppContainer, console: Console) -> int:
    store = container.preference_store
    if args.settings_command == "set":
        if args.temperature_unit:
            store.set_unit(UnitKind.TEMPERATURE, args.temperature_unit)
        if args.wind_speed_unit:
            store.set_unit(UnitKind.WIND_SPEED, args.wind_speed_unit)
        if args.pressure_unit:
            store.set_unit(UnitKind.PRESSURE, args.pressure_unit)
        if args.theme:
            store.set_theme_mode(args.theme)

    prefs = store.preferences()
    table = Table(title="Settings")
    table.add_column("Setting")
    table.add_column("Value")
    table.add_row("Temperature", prefs.temperature_unit.value)
    table.add_row("Wind speed", prefs.wind_speed_unit.value)
    table.add_row("Pressure", prefs.pressure_unit.value)
    table.add_row("Theme", prefs.theme_mode.display_name)
    for key, value in sanitize_for_logging(container.settings.safe_summary()).items():
        table.add_row(key, str(value))
    console.print(table)
    return 0


async def _wait_until_settled(container: AppContainer, timeout: float) -> bool:
    coordinator = container.coordinator
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if coordinator.content_state.kind in _WATCH_SETTLED_KINDS and not coordinator.is_busy:
            return True
        await asyncio.sleep(0.1)
    return False


async def _run_watch(args: argparse.Namespace, container: AppContainer, console: Console) -> int:
    coordinator = container.coordinator
    dashboard = WatchDashboard(console=console)
    dashboard.attach_logger(container.logger)
    unsubscribe = coordinator.subscribe(dashboard.on_state)
    try:
        coordinator.start()
        coordinator.on_appear()
        settled = await _wait_until_settled(container, args.timeout)
        if not settled:
            dashboard.record(severity="WARN", message="Timed out waiting for weather.")
        failures = await coordinator.preload_all()
        for city_id, exc in failures.items():
            dashboard.record(severity="WARN", message=f"{city_id}: {exc}")
    finally:
        unsubscribe()
        dashboard.detach_logger()

    state = coordinator.content_state
    console.print(dashboard.summary_panel())
    if coordinator.cities:
        console.print(
            cities_table(
                coordinator.cities,
                container.preference_store.preferences(),
                coordinator.weather_cache,
            )
        )
    if state.is_blocking_error:
        console.print(f"[bold red]{escape(state.message or '')}[/bold red]")
        console.print(f"Actions: {', '.join(state.actions)}")
        return 4
    return 0


async def _dispatch(args: argparse.Namespace, container: AppContainer, console: Console) -> int:
    try:
        if args.command == "current":
            return await _run_current(args, container, console)
        if args.command == "search":
            return await _run_search(args, container, console)
        if args.command == "cities":
            return _run_cities(args, container, console)
        if args.command == "settings":
            return _run_settings(args, container, console)
        return await _run_watch(args, container, console)
    finally:
        await container.aclose()


def main(argv: list[str] | None = None) -> int:
    """Run one pweather command and return its exit code."""
    args = parse_args(argv)
    logger = setup_logger()
    console = Console()

    try:
        settings = load_settings()
    except ConfigError as exc:
        logger.error("Configuration failure: %s", exc)
        return 2

    try:
        location_provider = None
        if args.command == "watch":
            location_provider = FixedLocationProvider(
                _resolve_coordinate(args, settings),
                logger=logger,
                grant_permission=not args.deny_location,
                distance_filter_meters=settings.location_distance_filter_meters,
            )
        container = build_container(settings, logger, location_provider=location_provider)
    except PreferenceStoreError as exc:
        logger.error("Preference store failure: %s", exc)
        return 3
    except WeatherProviderError as exc:
        logger.error("Invalid input: %s", exc)
        return 4

    try:
        return asyncio.run(_dispatch(args, container, console))
    except PreferenceStoreError as exc:
        logger.error("Preference store failure: %s", exc)
        return 3
    except (WeatherProviderError, LocationError) as exc:
        logger.error("Weather request failure: %s", exc)
        return 4
    except Exception as exc:  # pragma: no cover
        logger.exception("Unexpected pweather failure: %s", exc)
        return 99


if __name__ == "__main__":
    sys.exit(main())
