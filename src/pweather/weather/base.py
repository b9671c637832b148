"""Provider-agnostic weather interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from .models import WeatherSnapshot


class WeatherProvider(ABC):
    """Base contract for weather providers used by the coordinator."""

    @abstractmethod
    async def fetch_by_coordinates(self, lat: float, lon: float) -> WeatherSnapshot:
        """Fetch a snapshot for a coordinate pair."""

    @abstractmethod
    async def fetch_by_name(self, name: str) -> WeatherSnapshot:
        """Fetch a snapshot for a free-text place name."""

    @abstractmethod
    async def aclose(self) -> None:
        """Release provider resources."""
