"""City identity and fuzzy same-place matching."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from ..weather.models import WeatherSnapshot

# ~1.1 km; two fixes closer than this on both axes are the same place.
SAME_PLACE_DEGREES = 0.01


class City(BaseModel):
    """A named point: the device's current location or a user-saved place."""

    model_config = ConfigDict(frozen=True)

    name: str
    latitude: float
    longitude: float
    is_current_location: bool = False
    lookup_by_name: bool = False

    @property
    def id(self) -> str:
        """Stable identity key used for cache and storage lookups."""
        if self.is_current_location:
            return f"current_{self.name.lower()}"
        return f"{self.name.lower()}_{self.latitude:.4f}_{self.longitude:.4f}"

    @classmethod
    def from_snapshot(
        cls,
        snapshot: WeatherSnapshot,
        *,
        is_current: bool = False,
        lookup_by_name: bool = False,
    ) -> City:
        return cls(
            name=snapshot.location.name,
            latitude=snapshot.location.lat,
            longitude=snapshot.location.lon,
            is_current_location=is_current,
            lookup_by_name=lookup_by_name,
        )


def is_same_city(a: City, b: City) -> bool:
    """Return True when two cities should not both appear in the pager.

    Equal names match regardless of distance, which also merges distinct
    same-named towns. Otherwise both coordinates must be within
    `SAME_PLACE_DEGREES`.
    """
    if a.name.lower() == b.name.lower():
        return True
    return (
        abs(a.latitude - b.latitude) < SAME_PLACE_DEGREES
        and abs(a.longitude - b.longitude) < SAME_PLACE_DEGREES
    )
