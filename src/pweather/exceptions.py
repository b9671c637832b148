"""Application exception classes."""

from __future__ import annotations

from typing import Literal

WeatherErrorCategory = Literal["invalid_input", "transport", "http_status", "decoding"]
LocationErrorKind = Literal["authorization_denied", "update_failed"]


class ConfigError(Exception):
    """Raised when configuration is invalid or incomplete."""


class WeatherProviderError(Exception):
    """Raised when weather provider requests or decoding fail."""

    def __init__(
        self,
        message: str,
        *,
        category: WeatherErrorCategory = "transport",
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.category = category
        self.status_code = status_code


class LocationError(Exception):
    """Raised/reported when the device location is unavailable."""

    def __init__(self, message: str, *, kind: LocationErrorKind = "update_failed") -> None:
        super().__init__(message)
        self.kind = kind

    @classmethod
    def authorization_denied(cls) -> LocationError:
        return cls(
            "Location permission denied. Allow location access in Settings to see local weather.",
            kind="authorization_denied",
        )

    @classmethod
    def update_failed(cls, reason: str) -> LocationError:
        return cls(f"Location update failed: {reason}", kind="update_failed")


class PreferenceStoreError(Exception):
    """Raised when reading or writing persisted preferences fails."""
