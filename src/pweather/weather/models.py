"""Typed, immutable models for WeatherAPI forecast snapshots."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class Location(_FrozenModel):
    """Geographic and local-time metadata for a snapshot."""

    name: str
    region: str = ""
    country: str = ""
    lat: float
    lon: float
    tz_id: str = ""
    localtime_epoch: int = 0
    localtime: str = ""


class Condition(_FrozenModel):
    """Weather condition description, icon and provider code."""

    text: str
    icon: str = ""
    code: int


class AirQuality(_FrozenModel):
    """Pollutant levels and regional air quality indexes."""

    co: float | None = None
    no2: float | None = None
    o3: float | None = None
    so2: float | None = None
    pm2_5: float | None = None
    pm10: float | None = None
    us_epa_index: int | None = Field(default=None, alias="us-epa-index")
    gb_defra_index: int | None = Field(default=None, alias="gb-defra-index")


class CurrentConditions(_FrozenModel):
    """Current conditions at the snapshot location."""

    last_updated_epoch: int
    last_updated: str
    temp_c: float
    temp_f: float
    is_day: int
    condition: Condition
    wind_mph: float
    wind_kph: float
    wind_degree: int
    wind_dir: str
    pressure_mb: float
    pressure_in: float
    precip_mm: float
    precip_in: float
    humidity: int
    cloud: int
    feelslike_c: float
    feelslike_f: float
    vis_km: float
    vis_miles: float
    uv: float
    gust_mph: float
    gust_kph: float
    air_quality: AirQuality = Field(default_factory=AirQuality)


class DayAggregate(_FrozenModel):
    """Aggregated metrics for one forecast day."""

    maxtemp_c: float
    maxtemp_f: float
    mintemp_c: float
    mintemp_f: float
    avgtemp_c: float
    avgtemp_f: float
    maxwind_mph: float
    maxwind_kph: float
    totalprecip_mm: float
    totalprecip_in: float
    avgvis_km: float
    avgvis_miles: float
    avghumidity: int
    daily_will_it_rain: int
    daily_chance_of_rain: int
    daily_will_it_snow: int
    daily_chance_of_snow: int
    condition: Condition
    uv: float


class Astro(_FrozenModel):
    """Sun and moon data for a forecast day."""

    sunrise: str
    sunset: str
    moonrise: str
    moonset: str
    moon_phase: str
    moon_illumination: str

    @field_validator("moon_illumination", mode="before")
    @classmethod
    def numeric_illumination_to_str(cls, value: Any) -> Any:
        """The API sends illumination either as a string or as a number."""
        if isinstance(value, bool):
            raise ValueError("moon_illumination must be a string or number")
        if isinstance(value, (int, float)):
            return str(int(value))
        return value


class HourForecast(_FrozenModel):
    """One hourly forecast entry."""

    time_epoch: int
    time: str
    temp_c: float
    temp_f: float
    is_day: int
    condition: Condition
    wind_mph: float
    wind_kph: float


class ForecastDay(_FrozenModel):
    """One forecast day with aggregate, astronomical and hourly data."""

    date: str
    date_epoch: int
    day: DayAggregate
    astro: Astro
    hour: list[HourForecast] = Field(default_factory=list)


class Forecast(_FrozenModel):
    forecastday: list[ForecastDay] = Field(default_factory=list)


class Alert(_FrozenModel):
    """One active weather alert."""

    headline: str = ""
    category: str = ""
    event: str = ""
    effective: str = ""
    expires: str = ""
    desc: str = ""
    instruction: str = ""


class Alerts(_FrozenModel):
    alert: list[Alert] = Field(default_factory=list)


class WeatherSnapshot(_FrozenModel):
    """Point-in-time weather payload for one place."""

    location: Location
    current: CurrentConditions
    forecast: Forecast = Field(default_factory=Forecast)
    alerts: Alerts = Field(default_factory=Alerts)
