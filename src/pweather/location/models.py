"""Location provider value types."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Literal

from pydantic import BaseModel, ConfigDict

from ..exceptions import LocationError

AuthorizationStatus = Literal["not_determined", "granted", "denied", "restricted"]
LocationEventKind = Literal["location", "authorization", "error"]

EARTH_RADIUS_METERS = 6_371_000.0


class Coordinate(BaseModel):
    model_config = ConfigDict(frozen=True)

    latitude: float
    longitude: float

    def distance_to(self, other: Coordinate) -> float:
        """Great-circle distance in meters (haversine)."""
        lat1, lat2 = math.radians(self.latitude), math.radians(other.latitude)
        dlat = lat2 - lat1
        dlon = math.radians(other.longitude - self.longitude)
        a = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
        return 2 * EARTH_RADIUS_METERS * math.asin(min(1.0, math.sqrt(a)))


@dataclass(slots=True)
class LocationEvent:
    """One change reported by a location provider."""

    kind: LocationEventKind
    location: Coordinate | None = None
    status: AuthorizationStatus | None = None
    error: LocationError | None = None
