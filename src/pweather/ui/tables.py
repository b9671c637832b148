"""rich renderables for snapshots and city lists."""

from __future__ import annotations

from rich.table import Table

from ..core.city import City
from ..formatting import (
    PLACEHOLDER,
    current_temperature,
    format_pressure,
    format_temperature,
    format_to_day_and_date,
    format_to_time,
    format_wind_speed,
    high_temperature,
    low_temperature,
)
from ..preferences.models import Preferences
from ..weather.models import WeatherSnapshot


def snapshot_summary(snapshot: WeatherSnapshot, prefs: Preferences) -> str:
    location = snapshot.location
    place = ", ".join(part for part in (location.name, location.region, location.country) if part)
    current = snapshot.current
    return (
        f"{place} | {current_temperature(snapshot, prefs.temperature_unit)} "
        f"{current.condition.text} | H {high_temperature(snapshot, prefs.temperature_unit)} "
        f"L {low_temperature(snapshot, prefs.temperature_unit)} | wind "
        f"{format_wind_speed(current.wind_kph, current.wind_mph, prefs.wind_speed_unit)} "
        f"{current.wind_dir} | "
        f"{format_pressure(current.pressure_mb, current.pressure_in, prefs.pressure_unit)} | "
        f"local {location.localtime or PLACEHOLDER}"
    )


def hourly_table(snapshot: WeatherSnapshot, prefs: Preferences, max_rows: int) -> Table:
    table = Table(title="Hourly")
    table.add_column("Time")
    table.add_column("Temp", justify="right")
    table.add_column("Wind", justify="right")
    table.add_column("Condition", overflow="fold")

    hours = snapshot.forecast.forecastday[0].hour if snapshot.forecast.forecastday else []
    for hour in hours[:max_rows]:
        table.add_row(
            format_to_time(hour.time),
            format_temperature(hour.temp_c, hour.temp_f, prefs.temperature_unit),
            format_wind_speed(hour.wind_kph, hour.wind_mph, prefs.wind_speed_unit),
            hour.condition.text,
        )
    return table


def daily_table(snapshot: WeatherSnapshot, prefs: Preferences) -> Table:
    table = Table(title="Forecast")
    table.add_column("Day")
    table.add_column("High", justify="right")
    table.add_column("Low", justify="right")
    table.add_column("Rain %", justify="right")
    table.add_column("Sunrise")
    table.add_column("Sunset")
    table.add_column("Condition", overflow="fold")

    for forecast_day in snapshot.forecast.forecastday:
        day = forecast_day.day
        table.add_row(
            format_to_day_and_date(f"{forecast_day.date} 00:00") or forecast_day.date,
            format_temperature(day.maxtemp_c, day.maxtemp_f, prefs.temperature_unit),
            format_temperature(day.mintemp_c, day.mintemp_f, prefs.temperature_unit),
            str(day.daily_chance_of_rain),
            forecast_day.astro.sunrise,
            forecast_day.astro.sunset,
            day.condition.text,
        )
    return table


def alerts_table(snapshot: WeatherSnapshot) -> Table | None:
    if not snapshot.alerts.alert:
        return None
    table = Table(title="Alerts")
    table.add_column("Event")
    table.add_column("Headline", overflow="fold")
    table.add_column("Expires")
    for alert in snapshot.alerts.alert:
        table.add_row(alert.event or PLACEHOLDER, alert.headline or PLACEHOLDER, alert.expires)
    return table


def cities_table(
    cities: list[City],
    prefs: Preferences,
    cache: dict[str, WeatherSnapshot] | None = None,
    title: str = "Cities",
) -> Table:
    table = Table(title=title)
    table.add_column("#", justify="right")
    table.add_column("City", overflow="fold")
    table.add_column("Id", overflow="fold")
    table.add_column("Lat/Lon")
    table.add_column("Now", justify="right")
    table.add_column("Condition", overflow="fold")

    for index, city in enumerate(cities):
        snapshot = (cache or {}).get(city.id)
        name = f"{city.name} (current)" if city.is_current_location else city.name
        table.add_row(
            str(index),
            name,
            city.id,
            f"{city.latitude:.4f}, {city.longitude:.4f}",
            current_temperature(snapshot, prefs.temperature_unit) if snapshot else PLACEHOLDER,
            snapshot.current.condition.text if snapshot else PLACEHOLDER,
        )
    return table
