"""Typed settings loader for the pweather client."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import AnyUrl, Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigError


class Settings(BaseSettings):
    """Application settings loaded from environment variables and `.env`."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_env: Literal["dev", "staging", "prod"] = Field(default="dev", alias="APP_ENV")

    weather_api_base_url: AnyUrl = Field(
        default=AnyUrl("https://api.weatherapi.com/v1"),
        alias="WEATHER_API_BASE_URL",
    )
    weather_api_key: str = Field(alias="WEATHER_API_KEY", repr=False)
    weather_forecast_days: int = Field(default=7, alias="WEATHER_FORECAST_DAYS")
    weather_timeout_seconds: float = Field(default=15.0, alias="WEATHER_TIMEOUT_SECONDS")
    weather_max_retries: int = Field(default=2, alias="WEATHER_MAX_RETRIES")
    weather_retry_delay_seconds: float = Field(default=0.2, alias="WEATHER_RETRY_DELAY_SECONDS")

    location_debounce_seconds: float = Field(default=2.0, alias="LOCATION_DEBOUNCE_SECONDS")
    location_distance_filter_meters: float = Field(
        default=100.0,
        alias="LOCATION_DISTANCE_FILTER_METERS",
    )
    settle_window_seconds: float = Field(default=1.0, alias="SETTLE_WINDOW_SECONDS")

    preferences_path: Path = Field(
        default=Path("./data/preferences.json"),
        alias="PREFERENCES_PATH",
    )
    default_lat: float | None = Field(default=None, alias="DEFAULT_LAT")
    default_lon: float | None = Field(default=None, alias="DEFAULT_LON")
    max_print: int = Field(default=6, alias="MAX_PRINT")

    @field_validator("default_lat", "default_lon", mode="before")
    @classmethod
    def empty_string_to_none(cls, value: Any) -> Any:
        """Treat empty env-string values as unset optional coordinates."""
        if isinstance(value, str) and value.strip() == "":
            return None
        return value

    @model_validator(mode="after")
    def validate_ranges(self) -> Settings:
        """Validate numeric ranges and paired fields."""
        if not self.weather_api_key.strip():
            raise ValueError("WEATHER_API_KEY must not be empty.")
        if not (1 <= self.weather_forecast_days <= 14):
            raise ValueError("WEATHER_FORECAST_DAYS must be between 1 and 14.")
        if self.weather_timeout_seconds <= 0:
            raise ValueError("WEATHER_TIMEOUT_SECONDS must be > 0.")
        if self.weather_max_retries < 0:
            raise ValueError("WEATHER_MAX_RETRIES must be >= 0.")
        if self.weather_retry_delay_seconds < 0:
            raise ValueError("WEATHER_RETRY_DELAY_SECONDS must be >= 0.")
        if self.location_debounce_seconds < 0:
            raise ValueError("LOCATION_DEBOUNCE_SECONDS must be >= 0.")
        if self.location_distance_filter_meters < 0:
            raise ValueError("LOCATION_DISTANCE_FILTER_METERS must be >= 0.")
        if self.settle_window_seconds < 0:
            raise ValueError("SETTLE_WINDOW_SECONDS must be >= 0.")
        if self.max_print <= 0:
            raise ValueError("MAX_PRINT must be > 0.")

        has_lat = self.default_lat is not None
        has_lon = self.default_lon is not None
        if has_lat != has_lon:
            raise ValueError("DEFAULT_LAT and DEFAULT_LON must be set together.")
        if has_lat and not (-90 <= self.default_lat <= 90):
            raise ValueError("DEFAULT_LAT must be between -90 and 90.")
        if has_lon and not (-180 <= self.default_lon <= 180):
            raise ValueError("DEFAULT_LON must be between -180 and 180.")
        return self

    def safe_summary(self) -> dict[str, Any]:
        """Return config summary safe for logging (no credentials)."""
        return {
            "app_env": self.app_env,
            "weather_api_base_url": str(self.weather_api_base_url),
            "weather_forecast_days": self.weather_forecast_days,
            "weather_timeout_seconds": self.weather_timeout_seconds,
            "weather_max_retries": self.weather_max_retries,
            "location_debounce_seconds": self.location_debounce_seconds,
            "location_distance_filter_meters": self.location_distance_filter_meters,
            "settle_window_seconds": self.settle_window_seconds,
            "preferences_path": str(self.preferences_path),
        }


def load_settings() -> Settings:
    """Load and validate settings, raising ConfigError on failure."""
    try:
        settings = Settings()
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Failed reading environment/.env: {exc}") from exc

    settings.preferences_path.parent.mkdir(parents=True, exist_ok=True)
    return settings
